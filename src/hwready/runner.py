"""One invocation of the checker.

Flow:
    gate closed        -> flush                              -> ALREADY_COMPLETED
    on target build    -> flush                              -> TARGET_BUILD
    collection fails   -> FAILED_TO_RUN record -> flush -> deliver (gate stays open)
    otherwise          -> checks -> exemption -> verdict -> record
                          -> flush -> deliver -> marker      -> EVALUATED

Strictly sequential. When the gate is closed no facts are collected at all.
"""

from __future__ import annotations

__all__ = [
    "Assessor",
    "InvocationOutcome",
    "RunResult",
    "build_assessor",
    "build_delivery",
    "build_gate",
]

import socket
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from hwready.checks.verdict import VerdictResult, evaluate, failed_to_run
from hwready.config import AppConfig
from hwready.constants import DEFAULT_THRESHOLDS, Thresholds
from hwready.delivery.destinations import create_destination
from hwready.delivery.layer import DeliveryLayer, DeliveryOutcome, FlushReport
from hwready.delivery.queue import DeliveryQueue
from hwready.delivery.storage import LocalDirectory
from hwready.exceptions import FactCollectionError, QueueWriteError
from hwready.facts.collector import FactSource, collect_facts
from hwready.gate import RunOnceGate
from hwready.record import RunRecord, build_record
from hwready.telemetry.system_logger import get_system_logger

_logger = get_system_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvocationOutcome(str, Enum):
    ALREADY_COMPLETED = "already_completed"
    TARGET_BUILD = "target_build"
    EVALUATED = "evaluated"
    FAILED_TO_RUN = "failed_to_run"


@dataclass(slots=True)
class RunResult:
    """What one invocation did.

    Attributes:
        outcome: Which branch of the flow ran.
        flush: Result of the flush pass (always performed).
        record: Run record, when one was produced.
        delivery: DELIVERED/QUEUED for the new record; None if no record or it
            could not be queued.
        marker_written: Whether the gate was closed by this invocation.
    """

    outcome: InvocationOutcome
    flush: FlushReport = field(default_factory=FlushReport)
    record: RunRecord | None = None
    delivery: DeliveryOutcome | None = None
    marker_written: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "record": self.record.name if self.record else None,
            "verdict": self.record.verdict if self.record else None,
            "verdict_label": self.record.verdict_label if self.record else None,
            "reason": self.record.reason if self.record else None,
            "trail": self.record.trail if self.record else None,
            "delivery": self.delivery.value if self.delivery else None,
            "marker_written": self.marker_written,
            "flush": self.flush.to_dict(),
        }


class Assessor:
    """Wires fact source, gate and delivery into one invocation.

    Args:
        source: Host fact provider.
        gate: Run-once gate.
        delivery: Delivery layer.
        thresholds: Check thresholds.
        clock: Returns the current time (UTC); injectable for tests.
        hostname: Fallback hostname when the source reports none.
    """

    def __init__(
        self,
        source: FactSource,
        gate: RunOnceGate,
        delivery: DeliveryLayer,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        clock: Callable[[], datetime] = _utcnow,
        hostname: str | None = None,
    ) -> None:
        self.source = source
        self.gate = gate
        self.delivery = delivery
        self.thresholds = thresholds
        self.clock = clock
        self.hostname = hostname or socket.gethostname()

    def run(self) -> RunResult:
        """Perform one invocation. See module docstring for the flow."""
        if not self.gate.is_open:
            _logger.info({"event": "gate_closed", "message": "Device already evaluated; skipping checks"})
            return RunResult(InvocationOutcome.ALREADY_COMPLETED, flush=self.delivery.flush())

        os_build = self.source.read_os_build()
        if self.gate.is_on_target_build(os_build):
            _logger.info(
                {
                    "event": "target_build_reached",
                    "message": f"OS build {os_build} already meets target {self.gate.target_min_build}",
                    "os_build": os_build,
                }
            )
            return RunResult(InvocationOutcome.TARGET_BUILD, flush=self.delivery.flush())

        result, record = self._evaluate(os_build)
        outcome = (
            InvocationOutcome.EVALUATED if record.completed else InvocationOutcome.FAILED_TO_RUN
        )
        _logger.info(
            {
                "event": "verdict",
                "message": f"Verdict {record.verdict_label} ({record.verdict})"
                + (f": {result.reason}" if result.reason else ""),
                "record": record.name,
                "verdict": record.verdict,
                "reason": result.reason,
            }
        )

        flush = self.delivery.flush()
        try:
            delivery = self.delivery.deliver(record)
        except QueueWriteError:
            # Record is lost for this invocation; keep the gate open so the
            # next invocation evaluates again
            return RunResult(outcome, flush=flush, record=record)

        try:
            marker_written = self.gate.complete(record)
        except OSError as e:
            _logger.error(
                {
                    "event": "marker_write_failed",
                    "message": f"Cannot write run-once marker: {e}",
                    "record": record.name,
                }
            )
            marker_written = False
        return RunResult(outcome, flush=flush, record=record, delivery=delivery, marker_written=marker_written)

    def _evaluate(self, os_build: int | None) -> tuple[VerdictResult, RunRecord]:
        try:
            facts = collect_facts(self.source, hostname=self.hostname)
        except FactCollectionError as e:
            _logger.error({"event": "failed_to_run", "message": f"Fact collection failed: {e}"})
            result = failed_to_run(str(e))
            return result, build_record(result, self.hostname, self.clock(), os_build=os_build)

        result = evaluate(facts, self.thresholds)
        record = build_record(
            result,
            facts.hostname,
            self.clock(),
            os_build=facts.os_build if facts.os_build is not None else os_build,
        )
        return result, record


def build_delivery(config: AppConfig) -> DeliveryLayer:
    """Delivery layer for a config (destination + local queue)."""
    return DeliveryLayer(
        create_destination(config.destination),
        DeliveryQueue(LocalDirectory(config.state.queue, secure=True)),
    )


def build_gate(config: AppConfig) -> RunOnceGate:
    """Run-once gate for a config."""
    marker = config.state.marker
    return RunOnceGate(
        LocalDirectory(marker.parent, secure=True),
        marker_name=marker.name,
        target_min_build=config.target_min_build,
    )


def build_assessor(config: AppConfig, source: FactSource) -> Assessor:
    """Assessor wired from a config file."""
    return Assessor(source=source, gate=build_gate(config), delivery=build_delivery(config))
