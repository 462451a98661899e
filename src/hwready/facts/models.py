"""Fact set models.

A FactSet is an immutable snapshot of raw host attributes for one run. Every
attribute is optional: None means the value could not be read (or was
malformed), which the checks turn into UNDETERMINED. Nothing here carries
policy.
"""

from __future__ import annotations

__all__ = [
    "CpuFacts",
    "FactSet",
]

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class CpuFacts:
    """Processor attributes as reported by the host.

    Attributes:
        address_width: Address width in bits (32 or 64).
        max_clock_speed_mhz: Maximum clock speed in MHz.
        logical_cores: Number of logical processors.
        manufacturer: Vendor string (e.g. "GenuineIntel").
        caption: Processor caption (e.g. "Intel64 Family 6 Model 142 Stepping 10").
        name: Marketing name (e.g. "Intel(R) Core(TM) i7-7820HQ CPU @ 2.90GHz").
        family: CPU family identifier, parsed from the caption.
        model: CPU model identifier, parsed from the caption.
        stepping: CPU stepping, parsed from the caption.
    """

    address_width: int | None = None
    max_clock_speed_mhz: int | None = None
    logical_cores: int | None = None
    manufacturer: str | None = None
    caption: str | None = None
    name: str | None = None
    family: int | None = None
    model: int | None = None
    stepping: int | None = None


@dataclass(frozen=True, slots=True)
class FactSet:
    """Immutable snapshot of host facts for a single run.

    Attributes:
        hostname: Device hostname (used in the run record name).
        os_build: OS build number.
        os_disk_bytes: Capacity of the OS disk in bytes.
        memory_bytes: Total installed memory in bytes.
        tpm_present: Whether a TPM is present.
        tpm_spec_version: TPM spec version string (e.g. "2.0, 0, 1.38").
        cpu: Processor facts, or None if the processor could not be queried.
        secure_boot_enabled: Result of the platform secure-boot query; None if
            the query is unsupported or errored.
        secure_boot_state_record: Persisted firmware-state record
            (UEFISecureBootEnabled); None if unreadable.
        system_family: OEM/model identity (e.g. "Surface Studio 2").
        system_manufacturer: OEM manufacturer, diagnostics only.
        system_model: OEM model string, diagnostics only.
        unreadable: Names of facts that could not be read or were malformed.
    """

    hostname: str
    os_build: int | None = None
    os_disk_bytes: int | None = None
    memory_bytes: int | None = None
    tpm_present: bool | None = None
    tpm_spec_version: str | None = None
    cpu: CpuFacts | None = None
    secure_boot_enabled: bool | None = None
    secure_boot_state_record: bool | None = None
    system_family: str | None = None
    system_manufacturer: str | None = None
    system_model: str | None = None
    unreadable: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """For logging and the `check --json` output."""
        data = asdict(self)
        data["unreadable"] = list(self.unreadable)
        return data
