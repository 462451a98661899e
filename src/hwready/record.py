"""Run record: the unit of delivery.

One record per evaluation, immutable once built. Its canonical name
HOST-YYYYMMDDTHHMMSS makes delivery idempotent: writing the same record twice
overwrites one remote file instead of creating a second.

The record carries both the human-readable trail (for operators) and the same
facts as structured per-check fields, so readers never need to parse the trail.
"""

from __future__ import annotations

__all__ = [
    "CheckRecord",
    "RunRecord",
    "build_record",
    "record_name",
]

import re
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hwready import __version__
from hwready.checks.verdict import Verdict, VerdictResult
from hwready.constants import RECORD_SUFFIX, RECORD_TIMESTAMP_FORMAT

_UNSAFE_HOSTNAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _as_utc(timestamp: datetime) -> datetime:
    # Naive timestamps are taken as UTC
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).replace(microsecond=0)


def record_name(hostname: str, timestamp: datetime) -> str:
    """Build the canonical record name HOST-YYYYMMDDTHHMMSS.

    Characters that are unsafe in file names are replaced with "_".
    """
    safe_host = _UNSAFE_HOSTNAME_CHARS.sub("_", hostname) or "unknown"
    return f"{safe_host}-{_as_utc(timestamp).strftime(RECORD_TIMESTAMP_FORMAT)}"


class CheckRecord(BaseModel):
    """Structured result of one check inside a run record."""

    model_config = ConfigDict(frozen=True)

    status: str
    values: dict[str, Any] = Field(default_factory=dict)
    exemption: str | None = None


class RunRecord(BaseModel):
    """Serialized result of one evaluation on one device."""

    model_config = ConfigDict(frozen=True)

    hostname: str
    timestamp: datetime
    verdict: int = Field(description="0 CAPABLE, 1 NOT CAPABLE, -1 UNDETERMINED, -2 FAILED TO RUN")
    verdict_label: str
    trail: str
    reason: str = ""
    failed_checks: list[str] = Field(default_factory=list)
    checks: dict[str, CheckRecord] = Field(default_factory=dict)
    os_build: int | None = None
    error: str | None = None
    tool_version: str = __version__

    @property
    def name(self) -> str:
        """Canonical record name (HOST-YYYYMMDDTHHMMSS)."""
        return record_name(self.hostname, self.timestamp)

    @property
    def filename(self) -> str:
        """Name of the file written to the destination."""
        return f"{self.name}{RECORD_SUFFIX}"

    @property
    def completed(self) -> bool:
        """True if this record may close the run-once gate."""
        return self.verdict != Verdict.FAILED_TO_RUN

    def to_bytes(self) -> bytes:
        return self.model_dump_json(indent=2).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "RunRecord":
        """Parse a serialized record.

        Raises:
            pydantic.ValidationError: If the payload is not a valid record.
        """
        return cls.model_validate_json(data)


def build_record(
    result: VerdictResult,
    hostname: str,
    timestamp: datetime,
    os_build: int | None = None,
) -> RunRecord:
    """Build the run record for a verdict.

    Args:
        result: Aggregated verdict (or a FAILED_TO_RUN result).
        hostname: Device hostname.
        timestamp: Evaluation time; normalized to UTC, whole seconds.
        os_build: OS build number, if known.
    """
    return RunRecord(
        hostname=hostname,
        timestamp=_as_utc(timestamp),
        verdict=int(result.verdict),
        verdict_label=result.verdict.label,
        trail=result.trail,
        reason=result.reason,
        failed_checks=result.failed_checks,
        checks={
            outcome.name: CheckRecord(
                status=outcome.status.value,
                values=dict(outcome.values),
                exemption=outcome.exemption,
            )
            for outcome in result.outcomes
        },
        os_build=os_build,
        error=result.error,
    )
