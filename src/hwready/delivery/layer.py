"""Delivery layer: write records to the destination, queue on failure, flush.

Contract:
- deliver(record) -> DELIVERED | QUEUED. A failed remote write is the
  designed degraded path, not an error. Only when the record can be neither
  delivered nor queued does QueueWriteError escape.
- flush() walks the queue in enqueue order, writes each entry to the
  destination and deletes the local copy only after the write succeeded.
  Entries that fail stay queued for the next invocation, in place. No backoff.

A record whose local copy could not be deleted after a successful write is
delivered again on the next flush; the overwrite by name makes that harmless.
"""

from __future__ import annotations

__all__ = [
    "DeliveryLayer",
    "DeliveryOutcome",
    "FlushReport",
]

from dataclasses import dataclass, field
from enum import Enum

from hwready.delivery.destinations import Destination
from hwready.delivery.queue import DeliveryQueue
from hwready.exceptions import DeliveryError, QueueWriteError
from hwready.record import RunRecord
from hwready.telemetry.system_logger import get_system_logger

_logger = get_system_logger()


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    QUEUED = "queued"


@dataclass(slots=True)
class FlushReport:
    """Result of one flush pass.

    Attributes:
        delivered: Record names delivered and removed from the queue.
        remaining: Record names still queued after the pass.
    """

    delivered: list[str] = field(default_factory=list)
    remaining: list[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.remaining)

    def to_dict(self) -> dict[str, list[str]]:
        return {"delivered": list(self.delivered), "remaining": list(self.remaining)}


class DeliveryLayer:
    """Delivers run records, falling back to a local queue.

    Args:
        destination: Remote write target.
        queue: Local durable queue.
    """

    def __init__(self, destination: Destination, queue: DeliveryQueue) -> None:
        self.destination = destination
        self.queue = queue

    def flush(self) -> FlushReport:
        """Attempt delivery of every queued record, oldest first."""
        report = FlushReport()

        for entry in self.queue.entries():
            try:
                data = self.queue.read(entry)
            except OSError as e:
                _logger.error(
                    {
                        "event": "queue_read_failed",
                        "message": f"Cannot read queued record {entry.entry_name}: {e}",
                        "record": entry.record_name,
                    }
                )
                report.remaining.append(entry.record_name)
                continue

            try:
                self.destination.write(entry.filename, data)
            except DeliveryError as e:
                _logger.warning(
                    {
                        "event": "queue_flush_deferred",
                        "message": f"Queued record {entry.record_name} still undeliverable: {e}",
                        "record": entry.record_name,
                    }
                )
                report.remaining.append(entry.record_name)
                continue

            report.delivered.append(entry.record_name)
            try:
                self.queue.remove(entry)
            except OSError as e:
                _logger.warning(
                    {
                        "event": "queue_remove_failed",
                        "message": f"Delivered {entry.record_name} but could not remove local copy: {e}",
                        "record": entry.record_name,
                    }
                )

        if report.attempted:
            _logger.info(
                {
                    "event": "queue_flush",
                    "message": (
                        f"Queue flush: {len(report.delivered)} delivered, "
                        f"{len(report.remaining)} remaining"
                    ),
                    **report.to_dict(),
                }
            )
        return report

    def deliver(self, record: RunRecord) -> DeliveryOutcome:
        """Write a record to the destination, queueing it locally on failure.

        Raises:
            QueueWriteError: If the remote write failed and the local queue
                could not persist the record either.
        """
        data = record.to_bytes()
        try:
            self.destination.write(record.filename, data)
        except DeliveryError as e:
            failure = str(e)
        else:
            _logger.info(
                {
                    "event": "record_delivered",
                    "message": f"Delivered {record.filename} to {self.destination.describe()}",
                    "record": record.name,
                }
            )
            return DeliveryOutcome.DELIVERED

        try:
            entry = self.queue.enqueue(record)
        except OSError as e:
            _logger.critical(
                {
                    "event": "queue_write_failed",
                    "message": f"Record {record.name} could not be delivered ({failure}) or queued ({e})",
                    "record": record.name,
                }
            )
            raise QueueWriteError(f"Cannot queue {record.name}: {e}", record_name=record.name) from e

        _logger.warning(
            {
                "event": "record_queued",
                "message": f"Destination unavailable, queued {record.name}: {failure}",
                "record": record.name,
                "entry": entry.entry_name,
            }
        )
        return DeliveryOutcome.QUEUED
