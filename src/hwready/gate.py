"""Run-once gate.

Two states, decided by marker existence: NOT_RUN (no marker) and COMPLETED
(marker present). The marker is written only after a record with a verdict
other than FAILED_TO_RUN has been built; delivery success is not required.
It is never removed automatically. `hwready reset` is the deliberate removal.

The marker's content is diagnostic text only; nothing reads it back for
decisions.
"""

from __future__ import annotations

__all__ = [
    "GateState",
    "RunOnceGate",
]

import json
from enum import Enum

from hwready.constants import DEFAULT_MARKER_FILENAME
from hwready.delivery.storage import Directory
from hwready.record import RunRecord
from hwready.telemetry.system_logger import get_system_logger


class GateState(str, Enum):
    NOT_RUN = "not_run"
    COMPLETED = "completed"


class RunOnceGate:
    """Marker-backed run-once gate.

    Args:
        directory: Where the marker lives.
        marker_name: Marker entry name.
        target_min_build: OS builds at or above this skip evaluation entirely.
    """

    def __init__(
        self,
        directory: Directory,
        marker_name: str = DEFAULT_MARKER_FILENAME,
        target_min_build: int | None = None,
    ) -> None:
        self.directory = directory
        self.marker_name = marker_name
        self.target_min_build = target_min_build

    @property
    def state(self) -> GateState:
        return GateState.COMPLETED if self.directory.exists(self.marker_name) else GateState.NOT_RUN

    @property
    def is_open(self) -> bool:
        """True if this device still needs an evaluation."""
        return self.state is GateState.NOT_RUN

    def is_on_target_build(self, os_build: int | None) -> bool:
        """True if the host already runs the target platform (bypass evaluation).

        An unknown build never bypasses.
        """
        if os_build is None or self.target_min_build is None:
            return False
        return os_build >= self.target_min_build

    def complete(self, record: RunRecord) -> bool:
        """Write the marker for a completed record.

        Returns:
            True if the marker was written, False if the record is FAILED_TO_RUN
            (the gate stays open so the next invocation retries).

        Raises:
            OSError: If the marker cannot be written.
        """
        if not record.completed:
            return False

        content = {
            "record": record.name,
            "timestamp": record.timestamp.isoformat(),
            "verdict": record.verdict,
            "verdict_label": record.verdict_label,
        }
        self.directory.write(self.marker_name, (json.dumps(content, indent=2) + "\n").encode("utf-8"))
        get_system_logger().info(
            {
                "event": "marker_written",
                "message": f"Run-once marker written for {record.name}",
                "record": record.name,
            }
        )
        return True

    def read_marker(self) -> str | None:
        """Marker content for display, or None when absent or unreadable."""
        try:
            return self.directory.read(self.marker_name).decode("utf-8", errors="replace")
        except OSError:
            return None

    def reset(self) -> bool:
        """Remove the marker. Returns True if one was present."""
        present = self.directory.exists(self.marker_name)
        self.directory.delete(self.marker_name)
        return present
