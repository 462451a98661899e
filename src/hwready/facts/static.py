"""Fact source that replays a raw fact mapping from JSON.

Used by `hwready check --facts-file` / `hwready run --facts-file` to evaluate
facts captured elsewhere, and by the tests.
"""

from __future__ import annotations

__all__ = ["StaticFactSource"]

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from hwready.exceptions import FactCollectionError


class StaticFactSource:
    """FactSource over a fixed raw mapping.

    Args:
        raw: Raw fact mapping (see facts/collector.py for the shape).
        access_error: If set, ensure_access() raises FactCollectionError with
            this message. Lets callers simulate an inaccessible host.
    """

    def __init__(self, raw: Mapping[str, Any], *, access_error: str | None = None) -> None:
        self._raw = dict(raw)
        self._access_error = access_error
        self.reads = 0

    @classmethod
    def from_file(cls, path: Path) -> "StaticFactSource":
        """Load a raw fact mapping from a JSON file.

        Raises:
            FactCollectionError: If the file cannot be read or is not a JSON object.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise FactCollectionError(f"Invalid JSON in facts file {path}: {e}") from e
        except OSError as e:
            raise FactCollectionError(f"Could not read facts file {path}: {e}") from e
        if not isinstance(data, dict):
            raise FactCollectionError(f"Facts file {path} must contain a JSON object")
        return cls(data)

    def ensure_access(self) -> None:
        if self._access_error is not None:
            raise FactCollectionError(self._access_error)

    def read_os_build(self) -> int | None:
        value = self._raw.get("os_build")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.isdigit():
            return int(value)
        return None

    def read_raw(self) -> Mapping[str, Any]:
        self.reads += 1
        return dict(self._raw)
