"""File helpers for the config file and the local state directories."""

from __future__ import annotations

__all__ = [
    "get_app_dir",
    "load_validated_json",
    "require_file_exists",
    "set_secure_permissions",
]

import json
import sys
from pathlib import Path
from typing import TypeVar

import click
from pydantic import BaseModel, ValidationError

from hwready.constants import APP_NAME
from hwready.exceptions import ConfigurationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_dir() -> Path:
    """Per-user hwready directory (%APPDATA%\\hwready on Windows)."""
    return Path(click.get_app_dir(APP_NAME))


def set_secure_permissions(path: Path, *, is_directory: bool = False) -> None:
    """Restrict the marker, queue entries and config to their owner.

    No-op on Windows, where ACLs are inherited from the state directory.
    """
    if sys.platform == "win32":
        return

    try:
        path.chmod(0o700 if is_directory else 0o600)
    except OSError:
        # Best effort: a state directory on a filesystem without modes still works
        return


def require_file_exists(file_path: Path, file_type: str = "configuration") -> None:
    """Raise FileNotFoundError pointing at 'hwready init' if file_path is missing."""
    if not file_path.exists():
        raise FileNotFoundError(
            f"{file_type.capitalize()} file not found at {file_path}.\n"
            f"Run 'hwready init' to create a {file_type} file."
        )


def load_validated_json(file_path: Path, model_class: type[ModelT], recovery_hint: str | None = None) -> ModelT:
    """Read file_path and validate it as model_class.

    Raises:
        ConfigurationError: Unreadable file, invalid JSON, or one line per
            failing field (dotted location) followed by recovery_hint.
    """
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {file_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        lines = [f"  - {'.'.join(str(part) for part in err['loc']) or '(root)'}: {err['msg']}" for err in e.errors()]
        hint = f"\n\n{recovery_hint}" if recovery_hint else ""
        raise ConfigurationError(f"Invalid configuration in {file_path}:\n" + "\n".join(lines) + hint) from e
