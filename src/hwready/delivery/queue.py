"""Local durable queue of undelivered run records.

Entries are files named `<seq>.<record-name>.json` holding the serialized
record. The zero-padded sequence makes lexicographic order equal to enqueue
order, so a flush always retries in the order records were queued.

Queuing a record that is already queued replaces its payload in place and
keeps its position.
"""

from __future__ import annotations

__all__ = [
    "DeliveryQueue",
    "QueueEntry",
]

import re
from typing import NamedTuple

from hwready.constants import QUEUE_SEQUENCE_WIDTH, RECORD_SUFFIX
from hwready.delivery.storage import Directory
from hwready.record import RunRecord

_ENTRY_PATTERN = re.compile(
    rf"^(?P<seq>\d{{{QUEUE_SEQUENCE_WIDTH},}})\.(?P<record>.+){re.escape(RECORD_SUFFIX)}$"
)


class QueueEntry(NamedTuple):
    """A queued record as stored locally."""

    entry_name: str  # local file name (<seq>.<record>.json)
    sequence: int
    record_name: str

    @property
    def filename(self) -> str:
        """Canonical remote filename of the queued record."""
        return f"{self.record_name}{RECORD_SUFFIX}"


class DeliveryQueue:
    """Ordered queue over a Directory.

    Args:
        directory: Storage for queue entries (one file per record).
    """

    def __init__(self, directory: Directory) -> None:
        self.directory = directory

    def entries(self) -> list[QueueEntry]:
        """Queued entries in enqueue order. Files not matching the entry pattern are ignored."""
        entries: list[QueueEntry] = []
        for name in self.directory.names():
            match = _ENTRY_PATTERN.match(name)
            if match is None:
                continue
            entries.append(QueueEntry(name, int(match.group("seq")), match.group("record")))
        entries.sort(key=lambda e: (e.sequence, e.entry_name))
        return entries

    def __len__(self) -> int:
        return len(self.entries())

    def enqueue(self, record: RunRecord) -> QueueEntry:
        """Persist a record for later delivery.

        Raises:
            OSError: If the entry cannot be written.
        """
        existing = self.entries()
        for entry in existing:
            if entry.record_name == record.name:
                self.directory.write(entry.entry_name, record.to_bytes())
                return entry

        sequence = existing[-1].sequence + 1 if existing else 1
        entry_name = f"{sequence:0{QUEUE_SEQUENCE_WIDTH}d}.{record.name}{RECORD_SUFFIX}"
        self.directory.write(entry_name, record.to_bytes())
        return QueueEntry(entry_name, sequence, record.name)

    def read(self, entry: QueueEntry) -> bytes:
        return self.directory.read(entry.entry_name)

    def remove(self, entry: QueueEntry) -> None:
        self.directory.delete(entry.entry_name)
