"""Named-file storage abstraction.

The run-once marker, the local queue and the share destination all reduce to
"a directory of named files". Components take a Directory at construction so
tests can inject an in-memory implementation instead of touching disk.
"""

from __future__ import annotations

__all__ = [
    "Directory",
    "LocalDirectory",
]

import os
from pathlib import Path
from typing import Protocol

from hwready.utils.file_helpers import set_secure_permissions

# Temp files written during atomic replace start with this prefix and are
# never listed
_TEMP_PREFIX = ".tmp-"


class Directory(Protocol):
    """A flat namespace of named byte blobs."""

    def names(self) -> list[str]:
        """Return entry names sorted lexicographically."""
        ...

    def exists(self, name: str) -> bool: ...

    def read(self, name: str) -> bytes:
        """Raises FileNotFoundError if the entry does not exist."""
        ...

    def write(self, name: str, data: bytes) -> None:
        """Create or replace an entry. Raises OSError on failure."""
        ...

    def delete(self, name: str) -> None:
        """Remove an entry; missing entries are ignored."""
        ...


class LocalDirectory:
    """Directory backed by a filesystem path.

    Writes go to a temp file in the same directory and are moved into place
    with os.replace, so readers never observe a partially written entry and a
    rewrite of the same name is an overwrite.

    Args:
        path: Directory path; created on first write.
        secure: Restrict permissions to the owner (local state only; never
            applied to shared destinations).
    """

    def __init__(self, path: Path, *, secure: bool = False) -> None:
        self.path = path
        self.secure = secure

    def __repr__(self) -> str:
        return f"LocalDirectory({str(self.path)!r})"

    def _entry(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(f"Invalid entry name: {name!r}")
        return self.path / name

    def names(self) -> list[str]:
        if not self.path.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.path.iterdir()
            if entry.is_file() and not entry.name.startswith(_TEMP_PREFIX)
        )

    def exists(self, name: str) -> bool:
        return self._entry(name).is_file()

    def read(self, name: str) -> bytes:
        return self._entry(name).read_bytes()

    def write(self, name: str, data: bytes) -> None:
        target = self._entry(name)
        self.path.mkdir(parents=True, exist_ok=True)
        if self.secure:
            set_secure_permissions(self.path, is_directory=True)

        temp = self.path / f"{_TEMP_PREFIX}{os.getpid()}-{name}"
        try:
            with open(temp, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp, target)
        except OSError:
            temp.unlink(missing_ok=True)
            raise

        if self.secure:
            set_secure_permissions(target)

    def delete(self, name: str) -> None:
        self._entry(name).unlink(missing_ok=True)
