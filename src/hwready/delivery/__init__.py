"""Record delivery with a local durable queue.

This package provides:
- Directory / LocalDirectory: named-file storage abstraction
- ShareDestination / HttpDestination: remote write targets
- DeliveryQueue: ordered local queue of undelivered records
- DeliveryLayer: deliver-or-queue plus the flush pass
"""

from hwready.delivery.destinations import Destination, HttpDestination, ShareDestination, create_destination
from hwready.delivery.layer import DeliveryLayer, DeliveryOutcome, FlushReport
from hwready.delivery.queue import DeliveryQueue, QueueEntry
from hwready.delivery.storage import Directory, LocalDirectory

__all__ = [
    "DeliveryLayer",
    "DeliveryOutcome",
    "DeliveryQueue",
    "Destination",
    "Directory",
    "FlushReport",
    "HttpDestination",
    "LocalDirectory",
    "QueueEntry",
    "ShareDestination",
    "create_destination",
]
