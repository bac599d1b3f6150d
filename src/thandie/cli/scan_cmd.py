"""CLI command for scanning a workspace."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
	from thandie.scanner.events import CompleteEvent
	from thandie.scanner.orchestrator import ScanHandle

logger = logging.getLogger(__name__)

# --- Command Argument Annotations ---

IncludeHiddenOpt = Annotated[
	bool | None,
	typer.Option(
		"--include-hidden/--exclude-hidden",
		help="Scan directories whose name starts with a dot (default from config).",
		show_default=False,
	),
]

IgnoreOpt = Annotated[
	list[str] | None,
	typer.Option(
		"--ignore",
		"-i",
		help="Directory name to skip, in addition to the configured ones. Repeatable.",
	),
]

NoCacheFlag = Annotated[bool, typer.Option("--no-cache", help="Do not save the result to the cache.")]

QuietFlag = Annotated[bool, typer.Option("--quiet", "-q", help="Only print the summary line.")]


# --- Registration Function ---


def register_command(app: typer.Typer) -> None:
	"""Register the scan command with the CLI app."""

	@app.command(name="scan")
	def scan_command(
		ctx: typer.Context,
		include_hidden: IncludeHiddenOpt = None,
		ignore: IgnoreOpt = None,
		no_cache: NoCacheFlag = False,
		quiet: QuietFlag = False,
	) -> None:
		"""Scan the top-level directories of the workspace and cache the result."""
		_scan_command_impl(
			ctx,
			include_hidden=include_hidden,
			ignore=ignore or [],
			no_cache=no_cache,
			quiet=quiet,
		)


# --- Implementation Function ---


def _scan_command_impl(
	ctx: typer.Context,
	include_hidden: bool | None,
	ignore: list[str],
	no_cache: bool,
	quiet: bool,
) -> None:
	"""Run a scan on a worker thread and render its events."""
	from thandie.cache import CacheError, ResultCache
	from thandie.cli.cli_types import get_state
	from thandie.cli.formatter import print_snapshot, summary_line
	from thandie.scanner import EnumerationError, ScanState, start_scan
	from thandie.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt, show_warning
	from thandie.utils.log_setup import capture_logs_to_channel

	state = get_state(ctx)
	workspace = state.workspace_path()
	scanner_config = state.config.scanner
	hidden = scanner_config.include_hidden if include_hidden is None else include_hidden
	ignore_names = [*scanner_config.ignore_dirs, *(name for name in ignore if name not in scanner_config.ignore_dirs)]

	cache = None
	if not no_cache:
		try:
			cache = ResultCache()
		except CacheError as e:
			show_warning(f"Scan results will not be cached: {e}")

	logger.debug("Starting scan of %s (include_hidden=%s, ignore=%s)", workspace, hidden, ignore_names)
	handle = start_scan(workspace, ignore_names, hidden, cache=cache)

	try:
		with capture_logs_to_channel(handle.channel):
			complete = _wait_quietly(handle) if quiet else _render_live(handle)
	except KeyboardInterrupt:
		handle.cancel()
		handle.join()
		handle_keyboard_interrupt()
		return

	result = handle.join()

	if complete.outcome is ScanState.FAILED:
		error = complete.error
		if isinstance(error, EnumerationError):
			exit_with_error(str(error), exception=error)
		exit_with_error(f"Scan of {workspace} failed", exception=error)
	if complete.outcome is ScanState.CANCELLED:
		handle_keyboard_interrupt()

	snapshot = complete.snapshot
	if snapshot is None:
		exit_with_error(f"Scan of {workspace} finished without a result")
		return

	if result is not None and result.cache_error is not None:
		show_warning(f"Failed to save scan results to cache: {result.cache_error}")

	if quiet:
		console.print(summary_line(snapshot), markup=False)
	else:
		print_snapshot(console, snapshot)


def _wait_quietly(handle: ScanHandle) -> CompleteEvent:
	return handle.channel.wait_for_completion()


def _render_live(handle: ScanHandle) -> CompleteEvent:
	"""Show progress and log lines until the terminal event arrives."""
	from rich.text import Text

	from thandie.scanner.events import CompleteEvent, LogEvent, ProgressEvent
	from thandie.utils.cli_utils import create_scan_progress

	with create_scan_progress() as progress:
		task_id = progress.add_task("Scanning workspace", total=None)
		for event in handle.channel.events():
			if isinstance(event, ProgressEvent):
				progress.update(task_id, completed=event.current, total=event.total, description=event.message)
			elif isinstance(event, LogEvent):
				progress.console.print(Text(event.text, style="dim"))
			elif isinstance(event, CompleteEvent):
				return event

	# events() only stops after yielding the terminal event
	msg = "Scan event stream ended without a terminal event"
	raise RuntimeError(msg)
