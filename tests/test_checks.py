"""Unit tests for the check suite.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.

Tests cover:
- Each check's PASS / FAIL / UNDETERMINED split
- Trail fragment format
- Processor family table
- Secure boot primary/fallback order
- run_checks ordering and per-check error containment
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from hwready.checks.outcome import CheckStatus, format_fragment
from hwready.checks.suite import (
    check_memory,
    check_processor,
    check_secure_boot,
    check_storage,
    check_tpm,
    is_processor_family_supported,
    parse_tpm_version,
    run_checks,
)
from hwready.constants import BYTES_PER_GB, CHECK_ORDER
from hwready.facts.models import CpuFacts, FactSet


# =============================================================================
# Fragment formatting
# =============================================================================


class TestFormatFragment:
    def test_single_field_with_unit(self) -> None:
        fragment = format_fragment("Storage", [("OSDiskSize", 120, "GB")], CheckStatus.PASS)

        assert fragment == "Storage: OSDiskSize=120GB. PASS; "

    def test_none_value_rendered_without_unit(self) -> None:
        fragment = format_fragment("Memory", [("System_Memory", None, "GB")], CheckStatus.UNDETERMINED)

        assert fragment == "Memory: System_Memory=Undetermined. UNDETERMINED; "

    def test_multiple_fields_joined(self) -> None:
        fragment = format_fragment("SecureBoot", [("Enabled", True, ""), ("Source", "platform", "")], CheckStatus.PASS)

        assert fragment == "SecureBoot: Enabled=True, Source=platform. PASS; "


# =============================================================================
# Storage / Memory
# =============================================================================


class TestStorage:
    def test_passes_at_threshold(self) -> None:
        outcome = check_storage(FactSet(hostname="h", os_disk_bytes=64 * BYTES_PER_GB))

        assert outcome.status is CheckStatus.PASS
        assert outcome.fragment == "Storage: OSDiskSize=64GB. PASS; "

    def test_fails_below_threshold(self) -> None:
        outcome = check_storage(FactSet(hostname="h", os_disk_bytes=32 * BYTES_PER_GB))

        assert outcome.status is CheckStatus.FAIL
        assert outcome.values == {"os_disk_gb": 32}

    def test_just_under_threshold_fails_even_if_rounded_up(self) -> None:
        outcome = check_storage(FactSet(hostname="h", os_disk_bytes=64 * BYTES_PER_GB - 1))

        assert outcome.status is CheckStatus.FAIL

    def test_unreadable_is_undetermined(self) -> None:
        outcome = check_storage(FactSet(hostname="h"))

        assert outcome.status is CheckStatus.UNDETERMINED
        assert "UNDETERMINED" in outcome.fragment


class TestMemory:
    @pytest.mark.parametrize(
        ("gigabytes", "expected"),
        [(4, CheckStatus.PASS), (16, CheckStatus.PASS), (2, CheckStatus.FAIL)],
    )
    def test_threshold(self, gigabytes: int, expected: CheckStatus) -> None:
        outcome = check_memory(FactSet(hostname="h", memory_bytes=gigabytes * BYTES_PER_GB))

        assert outcome.status is expected
        assert outcome.fragment.startswith(f"Memory: System_Memory={gigabytes}GB.")

    def test_unreadable_is_undetermined(self) -> None:
        assert check_memory(FactSet(hostname="h")).status is CheckStatus.UNDETERMINED


# =============================================================================
# TPM
# =============================================================================


class TestTpm:
    @pytest.mark.parametrize(
        ("spec_version", "expected"),
        [("2.0, 0, 1.38", 2.0), ("1.2, 2, 3", 1.2), ("2.0", 2.0), ("", None), ("garbage", None), (None, None)],
    )
    def test_parse_version(self, spec_version: str | None, expected: float | None) -> None:
        assert parse_tpm_version(spec_version) == expected

    def test_present_v2_passes(self) -> None:
        outcome = check_tpm(FactSet(hostname="h", tpm_present=True, tpm_spec_version="2.0, 0, 1.38"))

        assert outcome.status is CheckStatus.PASS
        assert outcome.fragment == "TPM: TPMVersion=2.0, 0, 1.38. PASS; "

    def test_present_v12_fails(self) -> None:
        outcome = check_tpm(FactSet(hostname="h", tpm_present=True, tpm_spec_version="1.2, 2, 3"))

        assert outcome.status is CheckStatus.FAIL

    def test_absent_fails(self) -> None:
        outcome = check_tpm(FactSet(hostname="h", tpm_present=False))

        assert outcome.status is CheckStatus.FAIL
        assert outcome.fragment == "TPM: TPMPresent=False. FAIL; "

    def test_presence_unknown_is_undetermined(self) -> None:
        outcome = check_tpm(FactSet(hostname="h", tpm_spec_version="2.0"))

        assert outcome.status is CheckStatus.UNDETERMINED

    def test_present_with_unreadable_version_is_undetermined(self) -> None:
        outcome = check_tpm(FactSet(hostname="h", tpm_present=True))

        assert outcome.status is CheckStatus.UNDETERMINED


# =============================================================================
# Processor
# =============================================================================


def _cpu(**overrides: object) -> CpuFacts:
    base: dict[str, object] = {
        "address_width": 64,
        "max_clock_speed_mhz": 2400,
        "logical_cores": 8,
        "manufacturer": "GenuineIntel",
        "caption": "Intel64 Family 6 Model 158 Stepping 10",
        "family": 6,
        "model": 158,
        "stepping": 10,
    }
    base.update(overrides)
    return CpuFacts(**base)  # type: ignore[arg-type]


class TestProcessorFamilyTable:
    @pytest.mark.parametrize(
        ("cpu", "expected"),
        [
            (_cpu(), True),  # Coffee Lake
            (_cpu(model=94, stepping=3), False),  # Skylake
            (_cpu(model=85, stepping=4), True),  # Skylake-SP / Cascade Lake
            (_cpu(model=142, stepping=9), False),  # Kaby Lake mobile
            (_cpu(model=142, stepping=10), True),  # Kaby Lake R
            (_cpu(manufacturer="AuthenticAMD", family=23, model=8), True),  # Zen+
            (_cpu(manufacturer="AuthenticAMD", family=23, model=1), False),  # Zen
            (_cpu(manufacturer="AuthenticAMD", family=21, model=2), False),
            (_cpu(manufacturer="AuthenticAMD", family=25, model=33), True),
            (_cpu(manufacturer="Qualcomm Technologies Inc", family=None, model=None), True),
            (_cpu(manufacturer="VIA"), False),
        ],
    )
    def test_table(self, cpu: CpuFacts, expected: bool) -> None:
        assert is_processor_family_supported(cpu) is expected

    def test_missing_identifiers_are_unknown(self) -> None:
        assert is_processor_family_supported(_cpu(family=None)) is None
        assert is_processor_family_supported(_cpu(manufacturer=None)) is None


class TestProcessor:
    def test_approved_cpu_passes(self) -> None:
        outcome = check_processor(FactSet(hostname="h", cpu=_cpu()))

        assert outcome.status is CheckStatus.PASS
        assert outcome.fragment == (
            "Processor: AddressWidth=64, MaxClockSpeed=2400MHz, NumberOfLogicalCores=8, "
            "Manufacturer=GenuineIntel, Caption=Intel64 Family 6 Model 158 Stepping 10. PASS; "
        )

    @pytest.mark.parametrize(
        "overrides",
        [
            {"address_width": 32},
            {"max_clock_speed_mhz": 800},
            {"logical_cores": 1},
            {"model": 60, "caption": "Intel64 Family 6 Model 60 Stepping 3"},
        ],
    )
    def test_any_unmet_criterion_fails(self, overrides: dict[str, object]) -> None:
        outcome = check_processor(FactSet(hostname="h", cpu=_cpu(**overrides)))

        assert outcome.status is CheckStatus.FAIL

    def test_no_cpu_facts_is_undetermined(self) -> None:
        assert check_processor(FactSet(hostname="h")).status is CheckStatus.UNDETERMINED

    @pytest.mark.parametrize("field", ["address_width", "max_clock_speed_mhz", "logical_cores", "family"])
    def test_missing_required_field_is_undetermined(self, field: str) -> None:
        outcome = check_processor(FactSet(hostname="h", cpu=_cpu(**{field: None})))

        assert outcome.status is CheckStatus.UNDETERMINED

    @pytest.mark.parametrize(
        "overrides",
        [
            {"address_width": 32, "family": None, "model": None, "caption": "Unknown"},
            {"max_clock_speed_mhz": 800, "logical_cores": None},
            {"model": 60, "address_width": None},
        ],
    )
    def test_readable_failure_outranks_unreadable_field(self, overrides: dict[str, object]) -> None:
        outcome = check_processor(FactSet(hostname="h", cpu=_cpu(**overrides)))

        assert outcome.status is CheckStatus.FAIL

    def test_values_record_family_support(self) -> None:
        outcome = check_processor(FactSet(hostname="h", cpu=_cpu(model=94)))

        assert outcome.values["family_supported"] is False
        assert outcome.values["model"] == 94


# =============================================================================
# Secure boot
# =============================================================================


class TestSecureBoot:
    def test_primary_enabled_passes(self) -> None:
        outcome = check_secure_boot(FactSet(hostname="h", secure_boot_enabled=True))

        assert outcome.status is CheckStatus.PASS
        assert outcome.values == {"enabled": True, "source": "platform"}

    def test_primary_disabled_fails_without_consulting_fallback(self) -> None:
        outcome = check_secure_boot(
            FactSet(hostname="h", secure_boot_enabled=False, secure_boot_state_record=True)
        )

        assert outcome.status is CheckStatus.FAIL
        assert outcome.values["source"] == "platform"

    def test_fallback_used_when_primary_unsupported(self) -> None:
        outcome = check_secure_boot(FactSet(hostname="h", secure_boot_state_record=True))

        assert outcome.status is CheckStatus.PASS
        assert outcome.fragment == "SecureBoot: Enabled=True, Source=state_record. PASS; "

    def test_fallback_disabled_fails(self) -> None:
        outcome = check_secure_boot(FactSet(hostname="h", secure_boot_state_record=False))

        assert outcome.status is CheckStatus.FAIL

    def test_neither_readable_is_undetermined(self) -> None:
        outcome = check_secure_boot(FactSet(hostname="h"))

        assert outcome.status is CheckStatus.UNDETERMINED


# =============================================================================
# run_checks
# =============================================================================


class TestRunChecks:
    def test_evaluates_all_checks_in_order(self, make_facts) -> None:
        outcomes = run_checks(make_facts())

        assert tuple(o.name for o in outcomes) == CHECK_ORDER
        assert all(o.status is CheckStatus.PASS for o in outcomes)

    def test_error_in_one_check_is_contained(self, make_facts) -> None:
        # Arrange - TPM check blows up
        facts = make_facts()
        with patch("hwready.checks.suite.parse_tpm_version", side_effect=RuntimeError("boom")):
            # Act
            outcomes = run_checks(facts)

        # Assert - TPM undetermined, every other check still evaluated
        by_name = {o.name: o for o in outcomes}
        assert by_name["TPM"].status is CheckStatus.UNDETERMINED
        assert by_name["TPM"].fragment == "TPM: Error=RuntimeError. UNDETERMINED; "
        assert by_name["Storage"].status is CheckStatus.PASS
        assert by_name["SecureBoot"].status is CheckStatus.PASS
        assert len(outcomes) == 5

    def test_unreadable_facts_never_fail(self) -> None:
        # A host where nothing could be read
        outcomes = run_checks(FactSet(hostname="h"))

        assert {o.status for o in outcomes} == {CheckStatus.UNDETERMINED}
