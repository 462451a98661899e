"""The five eligibility checks.

Each check is a pure function FactSet -> CheckOutcome. Checks are independent:
run_checks() evaluates all of them in CHECK_ORDER and contains any unexpected
error to the check that raised it (UNDETERMINED for that check only).

Unreadable inputs always give UNDETERMINED, never FAIL.
"""

from __future__ import annotations

__all__ = [
    "CHECKS",
    "check_memory",
    "check_processor",
    "check_secure_boot",
    "check_storage",
    "check_tpm",
    "is_processor_family_supported",
    "parse_tpm_version",
    "run_checks",
]

from collections.abc import Callable

from hwready.checks.outcome import CheckOutcome, CheckStatus, format_fragment
from hwready.constants import (
    AMD_MANUFACTURER,
    BYTES_PER_GB,
    CHECK_MEMORY,
    CHECK_PROCESSOR,
    CHECK_SECURE_BOOT,
    CHECK_STORAGE,
    CHECK_TPM,
    DEFAULT_THRESHOLDS,
    INTEL_MANUFACTURER,
    KABY_LAKE_MODELS,
    KABY_LAKE_STEPPING,
    QUALCOMM_MANUFACTURER,
    Thresholds,
)
from hwready.facts.models import CpuFacts, FactSet
from hwready.telemetry.system_logger import get_system_logger

CheckFunction = Callable[[FactSet, Thresholds], CheckOutcome]


def _to_gb(size_bytes: int) -> int:
    return round(size_bytes / BYTES_PER_GB)


def check_storage(facts: FactSet, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> CheckOutcome:
    """PASS iff the OS disk is at least min_os_disk_gb."""
    size = facts.os_disk_bytes
    if size is None:
        status = CheckStatus.UNDETERMINED
        size_gb = None
    else:
        status = CheckStatus.PASS if size >= thresholds.min_os_disk_gb * BYTES_PER_GB else CheckStatus.FAIL
        size_gb = _to_gb(size)

    return CheckOutcome(
        name=CHECK_STORAGE,
        status=status,
        fragment=format_fragment(CHECK_STORAGE, [("OSDiskSize", size_gb, "GB")], status),
        values={"os_disk_gb": size_gb},
    )


def check_memory(facts: FactSet, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> CheckOutcome:
    """PASS iff total memory is at least min_memory_gb."""
    size = facts.memory_bytes
    if size is None:
        status = CheckStatus.UNDETERMINED
        size_gb = None
    else:
        status = CheckStatus.PASS if size >= thresholds.min_memory_gb * BYTES_PER_GB else CheckStatus.FAIL
        size_gb = _to_gb(size)

    return CheckOutcome(
        name=CHECK_MEMORY,
        status=status,
        fragment=format_fragment(CHECK_MEMORY, [("System_Memory", size_gb, "GB")], status),
        values={"memory_gb": size_gb},
    )


def parse_tpm_version(spec_version: str | None) -> float | None:
    """Extract the major spec version from a TPM SpecVersion string.

    Args:
        spec_version: e.g. "2.0, 0, 1.38" or "1.2".

    Returns:
        The leading version as a float (2.0, 1.2), or None if unparsable.
    """
    if not spec_version:
        return None
    head = spec_version.split(",")[0].strip()
    try:
        return float(head)
    except ValueError:
        return None


def check_tpm(facts: FactSet, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> CheckOutcome:
    """PASS iff a TPM is present with spec version >= min_tpm_version."""
    version = parse_tpm_version(facts.tpm_spec_version)

    if facts.tpm_present is None:
        status = CheckStatus.UNDETERMINED
        fields = [("TPMPresent", None, "")]
    elif not facts.tpm_present:
        status = CheckStatus.FAIL
        fields = [("TPMPresent", False, "")]
    elif version is None:
        # Present, but the version could not be read
        status = CheckStatus.UNDETERMINED
        fields = [("TPMVersion", None, "")]
    else:
        status = CheckStatus.PASS if version >= thresholds.min_tpm_version else CheckStatus.FAIL
        fields = [("TPMVersion", facts.tpm_spec_version, "")]

    return CheckOutcome(
        name=CHECK_TPM,
        status=status,
        fragment=format_fragment(CHECK_TPM, fields, status),
        values={
            "tpm_present": facts.tpm_present,
            "tpm_spec_version": facts.tpm_spec_version,
            "tpm_version": version,
        },
    )


def is_processor_family_supported(cpu: CpuFacts) -> bool | None:
    """Look the processor up in the approved family table.

    Returns:
        True/False when the manufacturer is known and identifiers are readable,
        None when the identifiers needed for this manufacturer are missing.
    """
    manufacturer = cpu.manufacturer
    if manufacturer is None:
        return None

    if manufacturer == QUALCOMM_MANUFACTURER:
        return True

    if manufacturer not in (INTEL_MANUFACTURER, AMD_MANUFACTURER):
        return False

    if cpu.family is None or cpu.model is None:
        return None

    if manufacturer == INTEL_MANUFACTURER:
        if cpu.family >= 6 and cpu.model <= 95 and cpu.model != 85:
            return False
        # 7th gen parts share these models with 8th gen; stepping 9 is 7th gen
        if cpu.family == 6 and cpu.model in KABY_LAKE_MODELS and cpu.stepping == KABY_LAKE_STEPPING:
            return False
        return True

    # AuthenticAMD: Zen+ and later
    if cpu.family < 23:
        return False
    if cpu.family == 23 and cpu.model in (1, 17):
        return False
    return True


def check_processor(facts: FactSet, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> CheckOutcome:
    """PASS iff the CPU is 64-bit, fast enough, has enough cores and an approved family.

    Any readable criterion that fails gives FAIL, even if other fields are
    unreadable. UNDETERMINED only when nothing readable fails.
    """
    cpu = facts.cpu
    if cpu is None:
        status = CheckStatus.UNDETERMINED
        return CheckOutcome(
            name=CHECK_PROCESSOR,
            status=status,
            fragment=format_fragment(CHECK_PROCESSOR, [("Processor", None, "")], status),
        )

    fields = [
        ("AddressWidth", cpu.address_width, ""),
        ("MaxClockSpeed", cpu.max_clock_speed_mhz, "MHz"),
        ("NumberOfLogicalCores", cpu.logical_cores, ""),
        ("Manufacturer", cpu.manufacturer, ""),
        ("Caption", cpu.caption, ""),
    ]
    family_supported = is_processor_family_supported(cpu)
    values = {
        "address_width": cpu.address_width,
        "max_clock_speed_mhz": cpu.max_clock_speed_mhz,
        "logical_cores": cpu.logical_cores,
        "manufacturer": cpu.manufacturer,
        "caption": cpu.caption,
        "name": cpu.name,
        "family": cpu.family,
        "model": cpu.model,
        "stepping": cpu.stepping,
        "family_supported": family_supported,
    }

    # None marks an unreadable criterion
    criteria = (
        None if cpu.address_width is None else cpu.address_width == thresholds.required_address_width,
        None if cpu.max_clock_speed_mhz is None else cpu.max_clock_speed_mhz >= thresholds.min_clock_speed_mhz,
        None if cpu.logical_cores is None else cpu.logical_cores >= thresholds.min_logical_cores,
        family_supported,
    )
    if False in criteria:
        status = CheckStatus.FAIL
    elif None in criteria:
        status = CheckStatus.UNDETERMINED
    else:
        status = CheckStatus.PASS

    return CheckOutcome(
        name=CHECK_PROCESSOR,
        status=status,
        fragment=format_fragment(CHECK_PROCESSOR, fields, status),
        values=values,
    )


def check_secure_boot(facts: FactSet, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> CheckOutcome:
    """PASS iff secure boot is enabled.

    The platform query is authoritative when it answered. The persisted
    firmware-state record is consulted only when the platform query was
    unsupported or errored.
    """
    if facts.secure_boot_enabled is not None:
        enabled: bool | None = facts.secure_boot_enabled
        source = "platform"
    elif facts.secure_boot_state_record is not None:
        enabled = facts.secure_boot_state_record
        source = "state_record"
    else:
        enabled = None
        source = None

    if enabled is None:
        status = CheckStatus.UNDETERMINED
        fields = [("Enabled", None, "")]
    else:
        status = CheckStatus.PASS if enabled else CheckStatus.FAIL
        fields = [("Enabled", enabled, ""), ("Source", source, "")]

    return CheckOutcome(
        name=CHECK_SECURE_BOOT,
        status=status,
        fragment=format_fragment(CHECK_SECURE_BOOT, fields, status),
        values={"enabled": enabled, "source": source},
    )


# Evaluation order is CHECK_ORDER
CHECKS: tuple[tuple[str, CheckFunction], ...] = (
    (CHECK_STORAGE, check_storage),
    (CHECK_MEMORY, check_memory),
    (CHECK_TPM, check_tpm),
    (CHECK_PROCESSOR, check_processor),
    (CHECK_SECURE_BOOT, check_secure_boot),
)


def run_checks(facts: FactSet, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> tuple[CheckOutcome, ...]:
    """Evaluate every check in order.

    An exception inside one check becomes that check's UNDETERMINED outcome;
    the remaining checks still run.

    Returns:
        One outcome per check, in CHECK_ORDER.
    """
    outcomes: list[CheckOutcome] = []
    for name, check in CHECKS:
        try:
            outcomes.append(check(facts, thresholds))
        except Exception as e:
            get_system_logger().error(
                {
                    "event": "check_error",
                    "message": f"{name} check raised {type(e).__name__}: {e}",
                    "check": name,
                    "error_type": type(e).__name__,
                }
            )
            status = CheckStatus.UNDETERMINED
            outcomes.append(
                CheckOutcome(
                    name=name,
                    status=status,
                    fragment=format_fragment(name, [("Error", type(e).__name__, "")], status),
                    values={"error": str(e)},
                )
            )
    return tuple(outcomes)
