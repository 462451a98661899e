"""Custom exceptions for hwready.

Exceptions are organized by how far they are allowed to travel:

Contained (never abort a run):
    - DeliveryError: A single remote write failed. Caught by the delivery
      layer and downgraded to "queued".

Run-level:
    - FactCollectionError: Low-level facilities are unavailable. The run
      produces a FAILED_TO_RUN verdict and leaves the gate open.
    - QueueWriteError: The local queue could not persist a record. The run
      leaves the gate open so the record is re-created next time.

Startup:
    - ConfigurationError: Config file is invalid (a missing file raises
      FileNotFoundError).

Usage:
    from hwready.exceptions import DeliveryError, FactCollectionError
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "FactCollectionError",
    "HwReadyError",
    "QueueWriteError",
]


class HwReadyError(Exception):
    """Base class for all hwready errors."""


class ConfigurationError(HwReadyError, ValueError):
    """Raised when the configuration file cannot be parsed or is invalid."""


class FactCollectionError(HwReadyError):
    """Raised when host facts cannot be gathered at all.

    Distinct from a single unreadable fact (which yields UNDETERMINED for one
    check). This covers missing privileges, an unsupported platform or a probe
    that cannot be started.
    """


class DeliveryError(HwReadyError):
    """Raised by a destination when a named write did not complete.

    Attributes:
        filename: Name of the file that could not be written.
    """

    def __init__(self, message: str, *, filename: str | None = None) -> None:
        super().__init__(message)
        self.filename = filename


class QueueWriteError(HwReadyError):
    """Raised when a record could neither be delivered nor queued locally."""

    def __init__(self, message: str, *, record_name: str) -> None:
        super().__init__(message)
        self.record_name = record_name
