"""System logger for operational events.

Provides a singleton logger for everything the checker does that is not part
of the run record itself: gate decisions, unreadable facts, delivery attempts
and queue flushes.

Logging strategy:
- Console (stderr): INFO and above, human readable
- File (system.jsonl): WARNING and above as JSONL, added once the config's
  log_dir is known via configure_system_logger_file()

Messages are dicts with an "event" key and optional "message"/detail keys:
    get_system_logger().warning({"event": "record_queued", "record": name})
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "set_console_level",
]

import logging
import sys
from pathlib import Path

from hwready.constants import LOGGER_NAME
from hwready.telemetry.iso_formatter import ISO8601Formatter


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages for cleaner stderr output.
    """

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"


# Module-level singleton logger
_system_logger: logging.Logger | None = None
_stderr_handler: logging.Handler | None = None
_file_handler: logging.FileHandler | None = None


def get_system_logger() -> logging.Logger:
    """Get the singleton system logger instance.

    Creates the logger on first call with a stderr handler only.

    Returns:
        logging.Logger: Configured system logger instance.
    """
    global _system_logger, _stderr_handler

    if _system_logger is not None:
        return _system_logger

    _system_logger = logging.getLogger(f"{LOGGER_NAME}.system")
    _system_logger.setLevel(logging.DEBUG)
    _system_logger.propagate = False  # Don't propagate to root logger

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in _system_logger.handlers:
        handler.close()
    _system_logger.handlers.clear()

    _stderr_handler = logging.StreamHandler(sys.stderr)
    _stderr_handler.setLevel(logging.INFO)
    _stderr_handler.setFormatter(ConsoleFormatter())
    _system_logger.addHandler(_stderr_handler)

    return _system_logger


def set_console_level(level: str | int) -> None:
    """Change the stderr handler level (e.g. "DEBUG" from config or "WARNING" for --json)."""
    get_system_logger()
    if _stderr_handler is not None:
        _stderr_handler.setLevel(level)


def configure_system_logger_file(log_path: Path) -> None:
    """Attach the JSONL file handler to the system logger.

    Idempotent: a second call with the same path is a no-op; a different path
    replaces the previous handler. If the log directory cannot be created the
    logger keeps writing to stderr only.

    Args:
        log_path: Path to system.jsonl.
    """
    global _file_handler

    logger = get_system_logger()

    if _file_handler is not None:
        if Path(_file_handler.baseFilename) == log_path.absolute():
            return
        logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        # Set owner-only permissions (0o700) - skip on Windows
        if sys.platform != "win32":
            try:
                log_path.parent.chmod(0o700)
            except OSError:
                pass  # Permission changes might fail on some systems
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        logger.warning(
            {
                "event": "log_file_unavailable",
                "message": f"Cannot open system log {log_path}: {e}",
                "path": str(log_path),
            }
        )
        return

    handler.setLevel(logging.WARNING)
    handler.setFormatter(ISO8601Formatter())
    logger.addHandler(handler)
    _file_handler = handler
