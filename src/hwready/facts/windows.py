"""Windows fact source backed by a single PowerShell probe.

The probe runs each CIM/WMI query in its own try/catch so one failing query
yields a null for that fact instead of aborting the whole probe. Output is a
single JSON document in the raw shape documented in facts/collector.py.

Requirements:
- Windows with powershell.exe on PATH
- Elevated process (Get-Tpm and Confirm-SecureBootUEFI need admin)

Design decisions:
- One subprocess for all queries; WMI startup dominates the cost
- No retry on the probe; the run-once gate stays open on failure, so the
  next scheduled invocation is the retry
"""

from __future__ import annotations

__all__ = [
    "PROBE_SCRIPT",
    "WindowsFactSource",
    "parse_os_build",
]

import json
import platform
import shutil
import subprocess
import sys
from collections.abc import Mapping
from typing import Any

from hwready.constants import PROBE_TIMEOUT_SECONDS
from hwready.exceptions import FactCollectionError

# Secure boot: Confirm-SecureBootUEFI is the primary query. It throws on
# non-UEFI firmware or when unsupported, in which case the persisted state
# value under HKLM is the fallback. Both are reported; the check decides.
# ConvertTo-Fact keeps a missing value null: a plain cast would turn it into
# 0 or $false, which the checks would read as a real measurement.
PROBE_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
function ConvertTo-Fact($value, [type]$type) {
    if ($null -eq $value) { return $null }
    return $value -as $type
}
$facts = [ordered]@{}
$facts.hostname = $env:COMPUTERNAME
try { $facts.os_build = ConvertTo-Fact (Get-CimInstance Win32_OperatingSystem).BuildNumber ([int]) } catch { $facts.os_build = $null }
try {
    $drive = (Get-CimInstance Win32_OperatingSystem).SystemDrive
    $disk = Get-CimInstance Win32_LogicalDisk -Filter "DeviceID='$drive'"
    $facts.os_disk_bytes = ConvertTo-Fact $disk.Size ([int64])
} catch { $facts.os_disk_bytes = $null }
try {
    $modules = @(Get-CimInstance Win32_PhysicalMemory)
    if ($modules.Count -eq 0) {
        $facts.memory_bytes = $null
    } else {
        $facts.memory_bytes = ConvertTo-Fact ($modules | Measure-Object -Property Capacity -Sum).Sum ([int64])
    }
} catch { $facts.memory_bytes = $null }
try { $facts.tpm_present = ConvertTo-Fact (Get-Tpm).TpmPresent ([bool]) } catch { $facts.tpm_present = $null }
try {
    $tpm = Get-CimInstance -Namespace 'root\CIMV2\Security\MicrosoftTpm' -ClassName Win32_Tpm
    $facts.tpm_spec_version = ConvertTo-Fact $tpm.SpecVersion ([string])
} catch { $facts.tpm_spec_version = $null }
try {
    $cpu = Get-CimInstance Win32_Processor | Select-Object -First 1
    if ($null -eq $cpu) {
        $facts.cpu = $null
    } else {
        $facts.cpu = [ordered]@{
            address_width   = ConvertTo-Fact $cpu.AddressWidth ([int])
            max_clock_speed = ConvertTo-Fact $cpu.MaxClockSpeed ([int])
            logical_cores   = ConvertTo-Fact $cpu.NumberOfLogicalProcessors ([int])
            manufacturer    = ConvertTo-Fact $cpu.Manufacturer ([string])
            caption         = ConvertTo-Fact $cpu.Caption ([string])
            name            = ConvertTo-Fact $cpu.Name ([string])
        }
    }
} catch { $facts.cpu = $null }
try { $facts.secure_boot_enabled = ConvertTo-Fact (Confirm-SecureBootUEFI) ([bool]) } catch { $facts.secure_boot_enabled = $null }
try {
    $state = Get-ItemProperty -Path 'HKLM:\SYSTEM\CurrentControlSet\Control\SecureBoot\State' -Name UEFISecureBootEnabled
    $facts.secure_boot_state_record = ConvertTo-Fact $state.UEFISecureBootEnabled ([int])
} catch { $facts.secure_boot_state_record = $null }
try {
    $system = Get-CimInstance Win32_ComputerSystem
    $facts.system_family = [string]$system.SystemFamily
    $facts.system_manufacturer = [string]$system.Manufacturer
    $facts.system_model = [string]$system.Model
} catch { $facts.system_family = $null }
$facts | ConvertTo-Json -Depth 4 -Compress
"""


def parse_os_build(version: str) -> int | None:
    """Extract the build number from a version string like "10.0.19045"."""
    parts = version.strip().split(".")
    if len(parts) < 3 or not parts[2].isdigit():
        return None
    return int(parts[2])


def _is_elevated() -> bool:
    try:
        import ctypes

        return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
    except (AttributeError, OSError):
        return False


class WindowsFactSource:
    """FactSource implementation for Windows hosts."""

    def __init__(
        self,
        powershell: str = "powershell.exe",
        timeout_seconds: int = PROBE_TIMEOUT_SECONDS,
    ) -> None:
        self.powershell = powershell
        self.timeout_seconds = timeout_seconds

    def ensure_access(self) -> None:
        if sys.platform != "win32":
            raise FactCollectionError(f"Fact collection requires Windows (running on {platform.system()})")
        if shutil.which(self.powershell) is None:
            raise FactCollectionError(f"{self.powershell} not found")
        if not _is_elevated():
            raise FactCollectionError("Fact collection requires an elevated (administrator) process")

    def read_os_build(self) -> int | None:
        if sys.platform != "win32":
            return None
        return parse_os_build(platform.version())

    def read_raw(self) -> Mapping[str, Any]:
        try:
            result = subprocess.run(
                [self.powershell, "-NoProfile", "-NonInteractive", "-Command", PROBE_SCRIPT],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise FactCollectionError(f"Fact probe timed out after {self.timeout_seconds}s") from e
        except OSError as e:
            raise FactCollectionError(f"Cannot start {self.powershell}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip().splitlines()
            detail = stderr[-1] if stderr else "no output"
            raise FactCollectionError(f"Fact probe exit code {result.returncode}: {detail}")

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise FactCollectionError(f"Fact probe returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise FactCollectionError("Fact probe returned a non-object JSON document")
        return data
