"""Shared fixtures for hwready tests.

Provides in-memory stand-ins for the storage and destination seams so gate,
queue and runner tests never touch a real share, plus factories for raw fact
mappings describing a capable device.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from hwready.constants import BYTES_PER_GB
from hwready.exceptions import DeliveryError
from hwready.facts.collector import normalize_facts
from hwready.facts.models import FactSet


# ============================================================================
# In-memory seams
# ============================================================================


class MemoryDirectory:
    """Directory implementation backed by a dict."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.fail_writes = False
        self.fail_deletes = False

    def names(self) -> list[str]:
        return sorted(self.files)

    def exists(self, name: str) -> bool:
        return name in self.files

    def read(self, name: str) -> bytes:
        if name not in self.files:
            raise FileNotFoundError(name)
        return self.files[name]

    def write(self, name: str, data: bytes) -> None:
        if self.fail_writes:
            raise OSError(28, "No space left on device")
        self.files[name] = data

    def delete(self, name: str) -> None:
        if self.fail_deletes:
            raise PermissionError(13, "Permission denied")
        self.files.pop(name, None)


class RecordingDestination:
    """Destination that records writes and can be told to fail.

    Attributes:
        files: Current remote content by filename (overwrites replace).
        writes: Every attempted successful write, in order.
        available: When False every write fails.
        reject: Filenames that always fail.
    """

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.writes: list[str] = []
        self.available = True
        self.reject: set[str] = set()

    def describe(self) -> str:
        return "memory://destination"

    def write(self, filename: str, data: bytes) -> None:
        if not self.available or filename in self.reject:
            raise DeliveryError(f"unreachable: {filename}", filename=filename)
        self.files[filename] = data
        self.writes.append(filename)


# ============================================================================
# Fact factories
# ============================================================================

CAPABLE_RAW: dict[str, Any] = {
    "hostname": "PC-0042",
    "os_build": 19045,
    "os_disk_bytes": 120 * BYTES_PER_GB,
    "memory_bytes": 8 * BYTES_PER_GB,
    "tpm_present": True,
    "tpm_spec_version": "2.0, 0, 1.38",
    "cpu": {
        "address_width": 64,
        "max_clock_speed": 2400,
        "logical_cores": 8,
        "manufacturer": "GenuineIntel",
        "caption": "Intel64 Family 6 Model 158 Stepping 10",
        "name": "Intel(R) Core(TM) i7-8700 CPU @ 3.20GHz",
    },
    "secure_boot_enabled": True,
    "secure_boot_state_record": 1,
    "system_family": "OptiPlex",
    "system_manufacturer": "Dell Inc.",
    "system_model": "OptiPlex 7070",
}

# i7-7820HQ: Intel family 6, model 158, stepping 9 (7th gen)
I7_7820HQ_CPU: dict[str, Any] = {
    "address_width": 64,
    "max_clock_speed": 2901,
    "logical_cores": 8,
    "manufacturer": "GenuineIntel",
    "caption": "Intel64 Family 6 Model 158 Stepping 9",
    "name": "Intel(R) Core(TM) i7-7820HQ CPU @ 2.90GHz",
}


@pytest.fixture
def make_raw() -> Callable[..., dict[str, Any]]:
    """Factory for raw fact mappings; keyword overrides replace top-level keys."""

    def _make(**overrides: Any) -> dict[str, Any]:
        raw = copy.deepcopy(CAPABLE_RAW)
        raw.update(overrides)
        return raw

    return _make


@pytest.fixture
def make_facts(make_raw: Callable[..., dict[str, Any]]) -> Callable[..., FactSet]:
    """Factory for normalized FactSets; same overrides as make_raw."""

    def _make(**overrides: Any) -> FactSet:
        return normalize_facts(make_raw(**overrides))

    return _make


@pytest.fixture
def memory_directory() -> MemoryDirectory:
    return MemoryDirectory()


@pytest.fixture
def destination() -> RecordingDestination:
    return RecordingDestination()


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2026, 10, 18, 9, 30, 15, tzinfo=timezone.utc)


@pytest.fixture
def i7_7820hq_cpu() -> dict[str, Any]:
    return copy.deepcopy(I7_7820HQ_CPU)


@pytest.fixture
def directory_factory() -> Callable[[], MemoryDirectory]:
    """For tests that need more than one independent directory."""
    return MemoryDirectory
