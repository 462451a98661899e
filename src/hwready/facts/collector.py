"""Fact collection and normalization.

A FactSource knows how to talk to a particular host (PowerShell on Windows,
a JSON file for tests and offline evaluation). It hands back a raw mapping;
collect_facts() turns that mapping into a FactSet.

Raw mapping shape (all keys optional except where noted):

    {
        "hostname": "PC-0042",
        "os_build": 19045,
        "os_disk_bytes": 128849018880,
        "memory_bytes": 8589934592,
        "tpm_present": true,
        "tpm_spec_version": "2.0, 0, 1.38",
        "cpu": {
            "address_width": 64,
            "max_clock_speed": 2400,
            "logical_cores": 8,
            "manufacturer": "GenuineIntel",
            "caption": "Intel64 Family 6 Model 158 Stepping 10",
            "name": "Intel(R) Core(TM) i7-8700 CPU @ 3.20GHz"
        },
        "secure_boot_enabled": true,
        "secure_boot_state_record": 1,
        "system_family": "OptiPlex",
        "system_manufacturer": "Dell Inc.",
        "system_model": "OptiPlex 7070"
    }

Normalization rules:
- Missing, null, wrong-typed or out-of-range values become None and are
  listed in FactSet.unreadable. They never fall back to a default number.
- A disk or memory size of 0 is treated as unreadable.
- Normalization never raises. Only FactSource.ensure_access() and a raw
  read that fails outright produce FactCollectionError.
"""

from __future__ import annotations

__all__ = [
    "FactSource",
    "collect_facts",
    "normalize_facts",
    "parse_cpu_caption",
]

import re
import socket
from collections.abc import Mapping
from typing import Any, Protocol

from hwready.exceptions import FactCollectionError
from hwready.facts.models import CpuFacts, FactSet
from hwready.telemetry.system_logger import get_system_logger

_CAPTION_PATTERN = re.compile(
    r"Family\s+(?P<family>\d+)\s+Model\s+(?P<model>\d+)(?:\s+Stepping\s+(?P<stepping>\d+))?",
    re.IGNORECASE,
)

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


class FactSource(Protocol):
    """Host-specific fact provider."""

    def ensure_access(self) -> None:
        """Raise FactCollectionError if facts cannot be gathered at all."""
        ...

    def read_os_build(self) -> int | None:
        """Return the OS build number without a full probe, or None."""
        ...

    def read_raw(self) -> Mapping[str, Any]:
        """Return the raw fact mapping described in this module's docstring."""
        ...


def _as_int(value: Any) -> int | None:
    # bool is an int subclass; a boolean here is a malformed fact
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value >= 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_size(value: Any) -> int | None:
    # A zero-byte disk or memory total means the query returned nothing
    size = _as_int(value)
    return size if size else None


def _as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_cpu_caption(caption: str | None) -> tuple[int | None, int | None, int | None]:
    """Extract (family, model, stepping) from a processor caption.

    Args:
        caption: e.g. "Intel64 Family 6 Model 142 Stepping 10".

    Returns:
        Tuple of identifiers; each is None when not present in the caption.
    """
    if not caption:
        return None, None, None
    match = _CAPTION_PATTERN.search(caption)
    if match is None:
        return None, None, None
    stepping = match.group("stepping")
    return (
        int(match.group("family")),
        int(match.group("model")),
        int(stepping) if stepping is not None else None,
    )


def _normalize_cpu(raw_cpu: Any, unreadable: list[str]) -> CpuFacts | None:
    if not isinstance(raw_cpu, Mapping):
        unreadable.append("cpu")
        return None

    caption = _as_str(raw_cpu.get("caption"))
    family, model, stepping = parse_cpu_caption(caption)

    # Explicit identifiers win over the ones parsed from the caption
    if "family" in raw_cpu:
        family = _as_int(raw_cpu.get("family"))
    if "model" in raw_cpu:
        model = _as_int(raw_cpu.get("model"))
    if "stepping" in raw_cpu:
        stepping = _as_int(raw_cpu.get("stepping"))

    cpu = CpuFacts(
        address_width=_as_int(raw_cpu.get("address_width")),
        max_clock_speed_mhz=_as_int(raw_cpu.get("max_clock_speed")),
        logical_cores=_as_int(raw_cpu.get("logical_cores")),
        manufacturer=_as_str(raw_cpu.get("manufacturer")),
        caption=caption,
        name=_as_str(raw_cpu.get("name")),
        family=family,
        model=model,
        stepping=stepping,
    )
    for attr in ("address_width", "max_clock_speed_mhz", "logical_cores", "manufacturer", "family", "model"):
        if getattr(cpu, attr) is None:
            unreadable.append(f"cpu.{attr}")
    return cpu


def normalize_facts(raw: Mapping[str, Any], *, hostname: str | None = None) -> FactSet:
    """Turn a raw fact mapping into a FactSet.

    Args:
        raw: Raw mapping from a FactSource.
        hostname: Hostname to use when the mapping does not carry one.

    Returns:
        FactSet with unreadable or malformed values set to None.
    """
    unreadable: list[str] = []

    def pick(key: str, convert: Any) -> Any:
        value = convert(raw.get(key))
        if value is None:
            unreadable.append(key)
        return value

    resolved_hostname = _as_str(raw.get("hostname")) or hostname or socket.gethostname()

    return FactSet(
        hostname=resolved_hostname,
        os_build=pick("os_build", _as_int),
        os_disk_bytes=pick("os_disk_bytes", _as_size),
        memory_bytes=pick("memory_bytes", _as_size),
        tpm_present=pick("tpm_present", _as_bool),
        tpm_spec_version=pick("tpm_spec_version", _as_str),
        cpu=_normalize_cpu(raw.get("cpu"), unreadable),
        secure_boot_enabled=pick("secure_boot_enabled", _as_bool),
        secure_boot_state_record=pick("secure_boot_state_record", _as_bool),
        system_family=pick("system_family", _as_str),
        system_manufacturer=_as_str(raw.get("system_manufacturer")),
        system_model=_as_str(raw.get("system_model")),
        unreadable=tuple(unreadable),
    )


def collect_facts(source: FactSource, *, hostname: str | None = None) -> FactSet:
    """Gather a FactSet from a source.

    Args:
        source: Host-specific fact provider.
        hostname: Fallback hostname if the source does not report one.

    Returns:
        Normalized FactSet.

    Raises:
        FactCollectionError: If the source is inaccessible or returns no usable mapping.
    """
    source.ensure_access()

    try:
        raw = source.read_raw()
    except FactCollectionError:
        raise
    except (OSError, ValueError) as e:
        raise FactCollectionError(f"Fact probe failed: {e}") from e

    if not isinstance(raw, Mapping):
        raise FactCollectionError(f"Fact probe returned {type(raw).__name__}, expected a mapping")

    facts = normalize_facts(raw, hostname=hostname)
    if facts.unreadable:
        get_system_logger().warning(
            {
                "event": "fact_unreadable",
                "message": f"Unreadable facts: {', '.join(facts.unreadable)}",
                "facts": list(facts.unreadable),
            }
        )
    return facts
