"""Application-wide constants for hwready.

Constants that define checker behavior: thresholds, the approved processor
table, file naming and timeouts. For per-deployment settings (destination,
state paths, logging), see config.py.
"""

from __future__ import annotations

__all__ = [
    # Application identity
    "APP_NAME",
    "LOGGER_NAME",
    # Check thresholds
    "Thresholds",
    "DEFAULT_THRESHOLDS",
    "BYTES_PER_GB",
    # Processor tables
    "INTEL_MANUFACTURER",
    "AMD_MANUFACTURER",
    "QUALCOMM_MANUFACTURER",
    "KABY_LAKE_MODELS",
    "KABY_LAKE_STEPPING",
    # Check names (evaluation order)
    "CHECK_STORAGE",
    "CHECK_MEMORY",
    "CHECK_TPM",
    "CHECK_PROCESSOR",
    "CHECK_SECURE_BOOT",
    "CHECK_ORDER",
    # Run-once gate / target platform
    "TARGET_MIN_BUILD",
    "DEFAULT_MARKER_FILENAME",
    "DEFAULT_QUEUE_DIRNAME",
    # Run record naming
    "RECORD_TIMESTAMP_FORMAT",
    "RECORD_SUFFIX",
    "QUEUE_SEQUENCE_WIDTH",
    # Timeouts
    "PROBE_TIMEOUT_SECONDS",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "MIN_HTTP_TIMEOUT_SECONDS",
    "MAX_HTTP_TIMEOUT_SECONDS",
]

from dataclasses import dataclass

# ============================================================================
# Application Identity
# ============================================================================

# Application name used for directory names and the CLI
APP_NAME: str = "hwready"

# Root logger name; component loggers hang below it
LOGGER_NAME: str = APP_NAME

# ============================================================================
# Check Thresholds
# ============================================================================

BYTES_PER_GB: int = 1024**3


@dataclass(frozen=True, slots=True)
class Thresholds:
    """Minimums a device must meet. Closed table, not user-configurable."""

    min_os_disk_gb: int = 64
    min_memory_gb: int = 4
    min_tpm_version: float = 2.0
    required_address_width: int = 64
    min_clock_speed_mhz: int = 1000
    min_logical_cores: int = 2


DEFAULT_THRESHOLDS = Thresholds()

# ============================================================================
# Processor Tables
# ============================================================================

# Manufacturer strings as reported by Win32_Processor.Manufacturer
INTEL_MANUFACTURER: str = "GenuineIntel"
AMD_MANUFACTURER: str = "AuthenticAMD"
QUALCOMM_MANUFACTURER: str = "Qualcomm Technologies Inc"

# Intel family 6 models 142/158 at stepping 9 are 7th gen (Kaby Lake) parts.
# Only these are eligible for an exemption; see checks/exemption.py.
KABY_LAKE_MODELS: frozenset[int] = frozenset({142, 158})
KABY_LAKE_STEPPING: int = 9

# ============================================================================
# Check Names
# ============================================================================

CHECK_STORAGE: str = "Storage"
CHECK_MEMORY: str = "Memory"
CHECK_TPM: str = "TPM"
CHECK_PROCESSOR: str = "Processor"
CHECK_SECURE_BOOT: str = "SecureBoot"

# Evaluation order is part of the observable contract (trail and reason order)
CHECK_ORDER: tuple[str, ...] = (
    CHECK_STORAGE,
    CHECK_MEMORY,
    CHECK_TPM,
    CHECK_PROCESSOR,
    CHECK_SECURE_BOOT,
)

# ============================================================================
# Run-Once Gate / Target Platform
# ============================================================================

# First build of the target platform. Devices already at or above it are
# skipped without evaluation.
TARGET_MIN_BUILD: int = 22000

DEFAULT_MARKER_FILENAME: str = "completed.marker"
DEFAULT_QUEUE_DIRNAME: str = "queue"

# ============================================================================
# Run Record Naming
# ============================================================================

# Record name: HOST-YYYYMMDDTHHMMSS
RECORD_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%S"
RECORD_SUFFIX: str = ".json"

# Queue entries: <seq>.<record-name>.json, zero-padded so names sort in enqueue order
QUEUE_SEQUENCE_WIDTH: int = 6

# ============================================================================
# Timeouts
# ============================================================================

# The PowerShell probe runs a handful of CIM queries; 60s covers slow WMI
PROBE_TIMEOUT_SECONDS: int = 60

DEFAULT_HTTP_TIMEOUT_SECONDS: int = 30
MIN_HTTP_TIMEOUT_SECONDS: int = 1
MAX_HTTP_TIMEOUT_SECONDS: int = 300
