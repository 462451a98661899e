"""Remote destinations for run records.

The only operation a destination needs is "write named file". Both
implementations overwrite on rewrite (file replace / HTTP PUT), which is what
makes delivery idempotent by record name. The checker never reads back.

Every failure (unreachable, permission denied, timeout, non-2xx) surfaces as
DeliveryError so the delivery layer can queue the record.
"""

from __future__ import annotations

__all__ = [
    "Destination",
    "HttpDestination",
    "ShareDestination",
    "create_destination",
]

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import httpx

from hwready.constants import DEFAULT_HTTP_TIMEOUT_SECONDS
from hwready.delivery.storage import LocalDirectory
from hwready.exceptions import DeliveryError

if TYPE_CHECKING:
    from hwready.config import DestinationConfig


class Destination(Protocol):
    """Write-only target for run records."""

    def describe(self) -> str:
        """Human-readable location, for logs and `status`."""
        ...

    def write(self, filename: str, data: bytes) -> None:
        """Write (or overwrite) a named file. Raises DeliveryError on failure."""
        ...


class ShareDestination:
    """Shared storage reachable as a filesystem path (UNC path or mount)."""

    def __init__(self, path: Path) -> None:
        self._directory = LocalDirectory(path)

    @property
    def path(self) -> Path:
        return self._directory.path

    def describe(self) -> str:
        return str(self.path)

    def write(self, filename: str, data: bytes) -> None:
        try:
            self._directory.write(filename, data)
        except OSError as e:
            raise DeliveryError(f"Cannot write {filename} to {self.path}: {e}", filename=filename) from e


class HttpDestination:
    """HTTP collection endpoint accepting `PUT {base_url}/{filename}`.

    Args:
        base_url: Collection URL; the filename is appended as the last path segment.
        timeout_seconds: Per-request timeout.
        http_client: Optional client (tests pass one with a mock transport).
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = http_client

    def describe(self) -> str:
        return self.base_url

    def _put(self, client: httpx.Client, filename: str, data: bytes) -> None:
        response = client.put(
            f"{self.base_url}/{filename}",
            content=data,
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()

    def write(self, filename: str, data: bytes) -> None:
        try:
            if self._client is not None:
                self._put(self._client, filename, data)
            else:
                with httpx.Client(timeout=self.timeout_seconds) as client:
                    self._put(client, filename, data)
        except httpx.HTTPStatusError as e:
            raise DeliveryError(
                f"{self.base_url} rejected {filename}: HTTP {e.response.status_code}",
                filename=filename,
            ) from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"Cannot reach {self.base_url} for {filename}: {e}", filename=filename) from e


def create_destination(config: "DestinationConfig") -> Destination:
    """Build the destination described by the config."""
    if config.kind == "http":
        assert config.url is not None  # enforced by DestinationConfig validation
        return HttpDestination(config.url, timeout_seconds=config.timeout_seconds)
    assert config.path is not None  # enforced by DestinationConfig validation
    return ShareDestination(Path(config.path).expanduser())
