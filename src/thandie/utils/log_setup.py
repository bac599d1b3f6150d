"""
Logging setup for Thandie.

This module configures the root logger for the CLI: a rich console handler,
an optional log file in the user log directory and optional JSON lines
rendered by structlog. While a scan runs, console output can be redirected
into the scan's event channel so it does not tear through the live view.

"""

from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

if TYPE_CHECKING:
	from collections.abc import Iterator

	from thandie.scanner.events import EventChannel

# Console for summaries; diagnostics go to stderr
console = Console()
err_console = Console(stderr=True)

LOG_LEVELS = {
	"debug": logging.DEBUG,
	"info": logging.INFO,
	"warn": logging.WARNING,
	"warning": logging.WARNING,
	"error": logging.ERROR,
}

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def resolve_log_level(level: str, is_verbose: bool = False) -> int:
	"""
	Map a configured level name to a logging level.

	Unknown names fall back to INFO. ``is_verbose`` always wins.

	"""
	if is_verbose:
		return logging.DEBUG
	return LOG_LEVELS.get(level.lower(), logging.INFO)


def _json_formatter() -> structlog.stdlib.ProcessorFormatter:
	"""Build a formatter rendering stdlib records as JSON lines."""
	shared_processors: list[structlog.types.Processor] = [
		structlog.stdlib.add_log_level,
		structlog.stdlib.add_logger_name,
		structlog.processors.TimeStamper(fmt="iso"),
		structlog.processors.StackInfoRenderer(),
		structlog.processors.format_exc_info,
	]
	return structlog.stdlib.ProcessorFormatter(
		foreign_pre_chain=shared_processors,
		processors=[
			structlog.stdlib.ProcessorFormatter.remove_processors_meta,
			structlog.processors.JSONRenderer(),
		],
	)


def setup_logging(
	level: str = "info",
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
	json_output: bool = False,
) -> None:
	"""
	Set up logging configuration.

	Args:
	    level: Level name from the configuration (debug, info, warn, warning, error)
	    is_verbose: Enable debug logging regardless of ``level``
	    log_to_console: Whether to log to the console
	    log_file_path: Optional path to a file for logging. If None, no file logging.
	    json_output: Render log records as JSON lines

	"""
	log_level = resolve_log_level(level, is_verbose)

	root_logger = logging.getLogger()
	root_logger.setLevel(log_level)

	# Clear existing handlers to avoid duplicate logs if called multiple times
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	if log_to_console:
		if json_output:
			console_handler: logging.Handler = logging.StreamHandler(sys.stderr)
			console_handler.setFormatter(_json_formatter())
		else:
			console_handler = RichHandler(
				level=log_level,
				console=err_console,
				rich_tracebacks=True,
				show_time=True,
				show_path=is_verbose,
			)
		console_handler.setLevel(log_level)
		root_logger.addHandler(console_handler)

	if log_file_path:
		try:
			file_handler_path = Path(log_file_path)
			file_handler_path.parent.mkdir(parents=True, exist_ok=True)

			file_handler = logging.FileHandler(file_handler_path, mode="a", encoding="utf-8")
			file_handler.setLevel(log_level)
			file_handler.setFormatter(_json_formatter() if json_output else logging.Formatter(FILE_LOG_FORMAT))
			root_logger.addHandler(file_handler)
			root_logger.debug("Logging to file: %s", file_handler_path)
		except OSError as e:
			# File logging is optional; report on the console and continue
			err_console.print(f"[yellow]Failed to set up file logging to {log_file_path}: {e}[/yellow]")


class ChannelLogHandler(logging.Handler):
	"""
	Logging handler forwarding formatted records to a scan event channel.

	Records are delivered with the channel's non-blocking log send: when the
	log queue is full the record is dropped rather than stalling the logger.

	"""

	def __init__(self, channel: EventChannel, level: int = logging.NOTSET) -> None:
		"""
		Initialize the handler.

		Args:
			channel: Channel receiving the log lines
			level: Minimum level forwarded

		"""
		super().__init__(level)
		self.channel = channel
		self.setFormatter(logging.Formatter("%(levelname)s %(message)s"))

	def emit(self, record: logging.LogRecord) -> None:
		"""Forward one record to the channel."""
		try:
			self.channel.send_log(self.format(record))
		except Exception:  # noqa: BLE001
			self.handleError(record)


@contextlib.contextmanager
def capture_logs_to_channel(channel: EventChannel, level: int | None = None) -> Iterator[ChannelLogHandler]:
	"""
	Redirect console log output into an event channel.

	Console handlers on the root logger are detached for the duration of the
	block and a :class:`ChannelLogHandler` takes their place. File handlers
	stay attached.

	Args:
		channel: Channel receiving the log lines
		level: Minimum level forwarded (default: the root logger level)

	Yields:
		The installed handler

	"""
	root_logger = logging.getLogger()
	detached = [
		handler
		for handler in root_logger.handlers
		if isinstance(handler, logging.StreamHandler | RichHandler) and not isinstance(handler, logging.FileHandler)
	]
	for handler in detached:
		root_logger.removeHandler(handler)

	channel_handler = ChannelLogHandler(channel, root_logger.level if level is None else level)
	root_logger.addHandler(channel_handler)
	try:
		yield channel_handler
	finally:
		root_logger.removeHandler(channel_handler)
		for handler in detached:
			root_logger.addHandler(handler)


def log_environment_info() -> None:
	"""Log information about the execution environment."""
	logger = logging.getLogger(__name__)

	import platform

	import pygit2

	from thandie import __version__

	logger.debug("Thandie version: %s", __version__)
	logger.debug("Python version: %s", platform.python_version())
	logger.debug("libgit2 version: %s", pygit2.LIBGIT2_VERSION)
	logger.debug("Platform: %s", platform.platform())


def display_error_summary(error_message: str) -> None:
	"""
	Display an error summary with a divider and a title.

	Args:
	        error_message: The error message to display

	"""
	title = Text("Error Summary", style="bold red")

	console.print()
	console.print(Rule(title, style="red"))
	console.print(f"\n{error_message}\n", markup=False)
	console.print(Rule(style="red"))
	console.print()


def display_warning_summary(warning_message: str) -> None:
	"""
	Display a warning summary with a divider and a title.

	Args:
	        warning_message: The warning message to display

	"""
	title = Text("Warning Summary", style="bold yellow")

	console.print()
	console.print(Rule(title, style="yellow"))
	console.print(f"\n{warning_message}\n", markup=False)
	console.print(Rule(style="yellow"))
	console.print()
