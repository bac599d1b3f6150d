"""Tests for logging setup and channel log capture."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest
import structlog
from rich.logging import RichHandler

from thandie.scanner.events import EventChannel, LogEvent
from thandie.utils.log_setup import (
	ChannelLogHandler,
	capture_logs_to_channel,
	resolve_log_level,
	setup_logging,
)

if TYPE_CHECKING:
	from pathlib import Path


@pytest.mark.unit
class TestLogLevels:
	"""Test cases for resolve_log_level."""

	@pytest.mark.parametrize(
		("name", "expected"),
		[
			("debug", logging.DEBUG),
			("INFO", logging.INFO),
			("warn", logging.WARNING),
			("warning", logging.WARNING),
			("error", logging.ERROR),
			("unknown", logging.INFO),
		],
	)
	def test_names(self, name: str, expected: int) -> None:
		"""Configured names map to logging levels."""
		assert resolve_log_level(name) == expected

	def test_verbose_forces_debug(self) -> None:
		"""Verbose mode overrides the configured level."""
		assert resolve_log_level("error", is_verbose=True) == logging.DEBUG


@pytest.mark.unit
class TestSetupLogging:
	"""Test cases for setup_logging."""

	def test_rich_console_handler(self) -> None:
		"""By default records go to a single rich handler."""
		setup_logging(level="warning")

		root_logger = logging.getLogger()
		assert root_logger.level == logging.WARNING
		assert len(root_logger.handlers) == 1
		assert isinstance(root_logger.handlers[0], RichHandler)

	def test_repeated_setup_does_not_duplicate(self) -> None:
		"""Calling setup twice replaces the handlers."""
		setup_logging()
		setup_logging(is_verbose=True)

		root_logger = logging.getLogger()
		assert len(root_logger.handlers) == 1
		assert root_logger.level == logging.DEBUG

	def test_json_console_handler(self) -> None:
		"""JSON output renders records with structlog."""
		setup_logging(json_output=True)

		handler = logging.getLogger().handlers[0]
		assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

		record = logging.LogRecord("thandie.test", logging.INFO, __file__, 1, "scanned %d dirs", (3,), None)
		payload = json.loads(handler.format(record))
		assert payload["event"] == "scanned 3 dirs"
		assert payload["level"] == "info"
		assert payload["logger"] == "thandie.test"
		assert "timestamp" in payload

	def test_file_handler(self, tmp_path: Path) -> None:
		"""A log file path adds a file handler that receives records."""
		log_file = tmp_path / "logs" / "thandie.log"

		setup_logging(level="info", log_to_console=False, log_file_path=log_file)
		logging.getLogger("thandie.test").info("written to file")
		for handler in logging.getLogger().handlers:
			handler.flush()

		assert "written to file" in log_file.read_text(encoding="utf-8")


@pytest.mark.unit
class TestChannelCapture:
	"""Test cases for forwarding log records into an event channel."""

	def test_handler_forwards_records(self) -> None:
		"""Each record becomes one log event."""
		channel = EventChannel()
		logger = logging.getLogger("thandie.test.channel")
		handler = ChannelLogHandler(channel)
		logger.addHandler(handler)
		try:
			logger.warning("cache unavailable")
		finally:
			logger.removeHandler(handler)

		assert channel.drain() == [LogEvent("WARNING cache unavailable")]

	def test_full_channel_does_not_block(self) -> None:
		"""Records are dropped when the log queue is full."""
		channel = EventChannel(log_capacity=1)
		handler = ChannelLogHandler(channel)
		record = logging.LogRecord("thandie", logging.INFO, __file__, 1, "line", None, None)

		handler.emit(record)
		handler.emit(record)

		assert channel.dropped_logs == 1

	def test_capture_replaces_console_handlers(self) -> None:
		"""Console handlers are detached during capture and restored afterwards."""
		setup_logging(level="info")
		root_logger = logging.getLogger()
		console_handler = root_logger.handlers[0]
		channel = EventChannel()

		with capture_logs_to_channel(channel) as channel_handler:
			assert root_logger.handlers == [channel_handler]
			logging.getLogger("thandie.test").info("during scan")

		assert root_logger.handlers == [console_handler]
		assert channel.drain() == [LogEvent("INFO during scan")]

	def test_capture_keeps_file_handler(self, tmp_path: Path) -> None:
		"""File logging continues while output is captured."""
		setup_logging(level="info", log_file_path=tmp_path / "thandie.log")
		root_logger = logging.getLogger()
		file_handlers = [handler for handler in root_logger.handlers if isinstance(handler, logging.FileHandler)]

		with capture_logs_to_channel(EventChannel()):
			assert all(handler in root_logger.handlers for handler in file_handlers)
			assert not any(isinstance(handler, RichHandler) for handler in root_logger.handlers)
