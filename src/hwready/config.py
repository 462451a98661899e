"""Application configuration for hwready.

Defines configuration models for the remote destination, local state (marker
and queue) and logging. The deployment creates a config via `hwready init`;
it is stored at the OS-appropriate location (via click.get_app_dir) unless
--config points elsewhere.

Check thresholds and the exemption table are not configurable: they are
fixed tables in constants.py and checks/exemption.py.

Example usage:
    config = AppConfig.load_from_files(config_path)
    config.save_to_file(config_path)
"""

from __future__ import annotations

__all__ = [
    "AppConfig",
    "DestinationConfig",
    "LoggingConfig",
    "StateConfig",
    "get_config_path",
    "get_system_log_path",
]

import json
from pathlib import Path
from typing import Literal

from platformdirs import user_log_dir, user_state_dir
from pydantic import BaseModel, Field, model_validator

from hwready.constants import (
    APP_NAME,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_MARKER_FILENAME,
    DEFAULT_QUEUE_DIRNAME,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
    TARGET_MIN_BUILD,
)
from hwready.utils.file_helpers import (
    get_app_dir,
    load_validated_json,
    require_file_exists,
    set_secure_permissions,
)

# =============================================================================
# Platform-specific defaults
# =============================================================================

# Local state (marker + queue) follows OS conventions:
# - Windows: %LOCALAPPDATA%\hwready
# - Linux: ~/.local/state/hwready
# - macOS: ~/Library/Application Support/hwready
DEFAULT_STATE_DIR = Path(user_state_dir(APP_NAME, appauthor=False))
DEFAULT_LOG_DIR = user_log_dir(APP_NAME, appauthor=False)


def get_config_path() -> Path:
    """Default config file location (<app dir>/config.json)."""
    return get_app_dir() / "config.json"


# =============================================================================
# Sections
# =============================================================================


class DestinationConfig(BaseModel):
    """Where run records are delivered.

    Attributes:
        kind: "share" (filesystem/UNC path) or "http" (PUT endpoint).
        path: Base path for kind="share".
        url: Base URL for kind="http".
        timeout_seconds: HTTP request timeout.
    """

    kind: Literal["share", "http"] = "share"
    path: str | None = None
    url: str | None = None
    timeout_seconds: int = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        ge=MIN_HTTP_TIMEOUT_SECONDS,
        le=MAX_HTTP_TIMEOUT_SECONDS,
    )

    @model_validator(mode="after")
    def _require_target(self) -> "DestinationConfig":
        if self.kind == "share" and not self.path:
            raise ValueError("path is required when kind is 'share'")
        if self.kind == "http":
            if not self.url:
                raise ValueError("url is required when kind is 'http'")
            if not self.url.startswith(("http://", "https://")):
                raise ValueError("url must start with http:// or https://")
        return self


class StateConfig(BaseModel):
    """Local per-device state.

    Attributes:
        marker_path: Run-once marker file.
        queue_dir: Directory of records awaiting delivery.
    """

    marker_path: str = str(DEFAULT_STATE_DIR / DEFAULT_MARKER_FILENAME)
    queue_dir: str = str(DEFAULT_STATE_DIR / DEFAULT_QUEUE_DIRNAME)

    @property
    def marker(self) -> Path:
        return Path(self.marker_path).expanduser()

    @property
    def queue(self) -> Path:
        return Path(self.queue_dir).expanduser()


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        log_dir: Directory for system.jsonl.
        log_level: Console verbosity; the file always records WARNING and above.
    """

    log_dir: str = Field(default=DEFAULT_LOG_DIR, min_length=1)
    log_level: Literal["DEBUG", "INFO", "WARNING"] = "INFO"


class AppConfig(BaseModel):
    """Main application configuration for hwready.

    Attributes:
        destination: Remote destination for run records. Required.
        state: Marker and queue locations.
        logging: Logging settings.
        target_min_build: Hosts at or above this OS build skip evaluation.
    """

    destination: DestinationConfig
    state: StateConfig = Field(default_factory=StateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    target_min_build: int = Field(default=TARGET_MIN_BUILD, ge=0)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file with owner-only permissions.

        Args:
            config_path: Path where the config JSON file should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)
        set_secure_permissions(config_path.parent, is_directory=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)

        set_secure_permissions(config_path)

    @classmethod
    def load_from_files(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ConfigurationError: If config file is invalid or missing required fields.
        """
        require_file_exists(config_path)
        return load_validated_json(config_path, cls, recovery_hint="Run 'hwready init --force' to reconfigure.")


def get_system_log_path(config: AppConfig) -> Path:
    """Path of the JSONL system log for this config."""
    return Path(config.logging.log_dir).expanduser() / "system.jsonl"
