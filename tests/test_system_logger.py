"""Tests for the system logger and its JSONL file output."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from hwready.telemetry.iso_formatter import ISO8601Formatter
from hwready.telemetry.system_logger import (
    ConsoleFormatter,
    configure_system_logger_file,
    get_system_logger,
)


def _record(msg: object, level: int = logging.WARNING) -> logging.LogRecord:
    return logging.LogRecord("hwready.system", level, __file__, 1, msg, None, None)


class TestFormatters:
    def test_iso_formatter_merges_dict_message(self) -> None:
        # Act
        line = ISO8601Formatter().format(_record({"event": "record_queued", "record": "PC-1"}))

        # Assert
        data = json.loads(line)
        assert data["level"] == "WARNING"
        assert data["event"] == "record_queued"
        assert data["record"] == "PC-1"
        assert data["time"].endswith("Z")

    def test_iso_formatter_wraps_plain_message(self) -> None:
        data = json.loads(ISO8601Formatter().format(_record("plain text")))

        assert data["message"] == "plain text"

    def test_console_formatter_prefers_message(self) -> None:
        formatter = ConsoleFormatter()

        assert formatter.format(_record({"event": "e", "message": "Queued"})) == "WARNING: Queued"
        assert formatter.format(_record({"event": "gate_closed"}, logging.INFO)) == "INFO: gate_closed"


class TestSystemLogger:
    def test_singleton(self) -> None:
        assert get_system_logger() is get_system_logger()

    def test_file_receives_warnings_only(self, tmp_path: Path) -> None:
        # Arrange
        log_path = tmp_path / "logs" / "system.jsonl"
        configure_system_logger_file(log_path)
        logger = get_system_logger()

        # Act
        logger.info({"event": "record_delivered"})
        logger.warning({"event": "record_queued", "record": "PC-1"})
        for handler in logger.handlers:
            handler.flush()

        # Assert
        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["record_queued"]

    def test_reconfigure_same_path_is_noop(self, tmp_path: Path) -> None:
        log_path = tmp_path / "system.jsonl"
        configure_system_logger_file(log_path)
        count = len(get_system_logger().handlers)

        configure_system_logger_file(log_path)

        assert len(get_system_logger().handlers) == count

    def test_unwritable_log_dir_falls_back_to_stderr(self, tmp_path: Path) -> None:
        # A regular file where the log directory should be
        blocker = tmp_path / "logs"
        blocker.write_text("x")

        configure_system_logger_file(blocker / "system.jsonl")

        assert all(not isinstance(h, logging.FileHandler) for h in get_system_logger().handlers)
