"""Unit tests for the exemption policy and verdict aggregation.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import itertools

import pytest

from hwready.checks.exemption import EXEMPTION_RULES, ExemptionRule, apply_exemption, find_exemption
from hwready.checks.outcome import CheckOutcome, CheckStatus
from hwready.checks.verdict import Verdict, aggregate, evaluate, failed_to_run
from hwready.constants import BYTES_PER_GB, CHECK_ORDER


def _outcomes(*statuses: CheckStatus) -> list[CheckOutcome]:
    return [
        CheckOutcome(name=name, status=status, fragment=f"{name}: X=1. {status.value}; ")
        for name, status in zip(CHECK_ORDER, statuses)
    ]


P, F, U = CheckStatus.PASS, CheckStatus.FAIL, CheckStatus.UNDETERMINED


# =============================================================================
# Verdict codes
# =============================================================================


class TestVerdictCodes:
    def test_codes(self) -> None:
        assert (Verdict.CAPABLE, Verdict.NOT_CAPABLE, Verdict.UNDETERMINED, Verdict.FAILED_TO_RUN) == (0, 1, -1, -2)

    def test_labels(self) -> None:
        assert Verdict.NOT_CAPABLE.label == "NOT CAPABLE"
        assert Verdict.FAILED_TO_RUN.label == "FAILED TO RUN"
        assert Verdict.CAPABLE.label == "CAPABLE"


# =============================================================================
# Aggregation precedence
# =============================================================================


class TestAggregate:
    def test_all_pass_is_capable_with_empty_reason(self) -> None:
        result = aggregate(_outcomes(P, P, P, P, P))

        assert result.verdict is Verdict.CAPABLE
        assert result.reason == ""

    def test_all_undetermined_is_undetermined(self) -> None:
        result = aggregate(_outcomes(U, U, U, U, U))

        assert result.verdict is Verdict.UNDETERMINED
        assert result.reason == ", ".join(CHECK_ORDER)

    def test_fail_outranks_undetermined(self) -> None:
        result = aggregate(_outcomes(U, P, F, U, P))

        assert result.verdict is Verdict.NOT_CAPABLE
        assert result.reason == "Storage, TPM, Processor"

    @pytest.mark.parametrize("statuses", list(itertools.product([P, F, U], repeat=5)))
    def test_precedence_over_every_combination(self, statuses: tuple[CheckStatus, ...]) -> None:
        result = aggregate(_outcomes(*statuses))

        if F in statuses:
            assert result.verdict is Verdict.NOT_CAPABLE
        elif U in statuses:
            assert result.verdict is Verdict.UNDETERMINED
        else:
            assert result.verdict is Verdict.CAPABLE
            assert result.reason == ""

    def test_trail_concatenates_fragments_in_order(self) -> None:
        result = aggregate(_outcomes(P, F, P, P, P))

        assert result.trail == (
            "Storage: X=1. PASS; Memory: X=1. FAIL; TPM: X=1. PASS; "
            "Processor: X=1. PASS; SecureBoot: X=1. PASS; "
        )
        assert result.failed_checks == ["Memory"]

    def test_failed_to_run(self) -> None:
        result = failed_to_run("requires an elevated process")

        assert result.verdict is Verdict.FAILED_TO_RUN
        assert result.outcomes == ()
        assert result.reason == ""
        assert result.error == "requires an elevated process"
        assert "FAILED TO RUN" in result.trail


# =============================================================================
# Exemption policy
# =============================================================================


class TestExemption:
    def test_table_is_the_single_borderline_cpu(self) -> None:
        assert len(EXEMPTION_RULES) == 1
        assert EXEMPTION_RULES[0].cpu_identity == "Intel Core i7-7820HQ"

    def test_allow_listed_family_upgrades_processor_fail(self, make_facts, i7_7820hq_cpu) -> None:
        # Arrange
        facts = make_facts(cpu=i7_7820hq_cpu, system_family="Surface Studio 2")

        # Act
        result = evaluate(facts)

        # Assert
        processor = result.outcomes[CHECK_ORDER.index("Processor")]
        assert processor.status is CheckStatus.PASS
        assert processor.exemption == "Intel Core i7-7820HQ@Surface Studio 2"
        assert "Exemption=Intel Core i7-7820HQ@Surface Studio 2. PASS; " in processor.fragment
        assert result.verdict is Verdict.CAPABLE

    def test_family_match_is_case_insensitive(self, make_facts, i7_7820hq_cpu) -> None:
        facts = make_facts(cpu=i7_7820hq_cpu, system_family="precision 5520")

        assert find_exemption(facts) is not None

    def test_other_family_keeps_fail(self, make_facts, i7_7820hq_cpu) -> None:
        # Arrange
        facts = make_facts(cpu=i7_7820hq_cpu, system_family="Latitude 5480")

        # Act
        result = evaluate(facts)

        # Assert
        processor = result.outcomes[CHECK_ORDER.index("Processor")]
        assert processor.status is CheckStatus.FAIL
        assert processor.exemption is None
        assert result.verdict is Verdict.NOT_CAPABLE
        assert result.reason == "Processor"

    def test_unknown_family_keeps_fail(self, make_facts, i7_7820hq_cpu) -> None:
        facts = make_facts(cpu=i7_7820hq_cpu, system_family=None)

        assert evaluate(facts).verdict is Verdict.NOT_CAPABLE

    def test_only_processor_fail_is_eligible(self, make_facts, i7_7820hq_cpu) -> None:
        # Arrange - allow-listed device, but storage is too small
        facts = make_facts(
            cpu=i7_7820hq_cpu,
            system_family="Surface Studio 2",
            os_disk_bytes=32 * BYTES_PER_GB,
        )
        storage_fail = CheckOutcome(name="Storage", status=CheckStatus.FAIL, fragment="Storage: OSDiskSize=32GB. FAIL; ")

        # Act
        unchanged = apply_exemption(storage_fail, facts)

        # Assert
        assert unchanged is storage_fail
        assert evaluate(facts).reason == "Storage"

    def test_processor_undetermined_not_overridden(self, make_facts) -> None:
        facts = make_facts(system_family="Surface Studio 2")
        outcome = CheckOutcome(name="Processor", status=CheckStatus.UNDETERMINED, fragment="")

        assert apply_exemption(outcome, facts) is outcome

    def test_custom_rules_can_be_passed(self, make_facts) -> None:
        # Arrange - a rule that matches the capable fixture's CPU name
        rule = ExemptionRule("Test CPU", "i7-8700", frozenset({"OptiPlex"}))
        facts = make_facts()

        # Act / Assert
        assert find_exemption(facts, [rule]) == "Test CPU@OptiPlex"
        assert find_exemption(facts) is None


# =============================================================================
# End-to-end examples
# =============================================================================


class TestExamples:
    def test_capable_device(self, make_facts) -> None:
        result = evaluate(make_facts())

        assert result.verdict is Verdict.CAPABLE
        assert int(result.verdict) == 0
        assert result.reason == ""

    def test_small_disk_is_not_capable(self, make_facts) -> None:
        result = evaluate(make_facts(os_disk_bytes=32 * BYTES_PER_GB))

        assert int(result.verdict) == 1
        assert result.reason == "Storage"

    def test_unreadable_tpm_is_undetermined(self, make_facts) -> None:
        result = evaluate(make_facts(tpm_present=None, tpm_spec_version=None))

        assert int(result.verdict) == -1
        assert result.reason == "TPM"

    def test_trail_lists_checks_in_evaluation_order(self, make_facts) -> None:
        trail = evaluate(make_facts()).trail

        positions = [trail.index(f"{name}: ") for name in CHECK_ORDER]
        assert positions == sorted(positions)
        assert trail.startswith("Storage: OSDiskSize=120GB. PASS; Memory: System_Memory=8GB. PASS; ")
