"""
Scan orchestration.

The orchestrator drives the enumerator and the metadata extractor over the
top-level directories of a workspace, reports progress on an event channel,
honours cooperative cancellation at directory boundaries and persists the
finished snapshot in the result cache.

"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from thandie.cache.errors import CacheError
from thandie.scanner.enumerator import list_top_level_dirs
from thandie.scanner.errors import EnumerationError, ScanCancelledError
from thandie.scanner.events import CompleteEvent, EventChannel
from thandie.scanner.git_metadata import collect_repo_metadata
from thandie.scanner.models import DirectoryRecord, RepoMetadata, Snapshot
from thandie.scanner.state import ScanState

if TYPE_CHECKING:
	from collections.abc import Callable, Iterable
	from pathlib import Path

	from thandie.cache.result_cache import ResultCache

	Enumerator = Callable[[str, Iterable[str], bool], list[str]]
	Extractor = Callable[[str], RepoMetadata]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
	"""Outcome of one scan run."""

	state: ScanState
	snapshot: Snapshot | None = None
	error: Exception | None = None
	cache_error: CacheError | None = None

	@property
	def completed(self) -> bool:
		"""Whether the scan produced a snapshot."""
		return self.state is ScanState.COMPLETED

	def raise_for_outcome(self) -> Snapshot:
		"""
		Return the snapshot of a completed scan.

		Raises:
			EnumerationError: If the scan failed
			ScanCancelledError: If the scan was cancelled

		"""
		if self.state is ScanState.COMPLETED and self.snapshot is not None:
			return self.snapshot
		if self.error is not None:
			raise self.error
		msg = f"Scan ended in state {self.state.value} without a result"
		raise RuntimeError(msg)


class ScanOrchestrator:
	"""Runs one workspace scan and reports it on an event channel."""

	def __init__(
		self,
		cache: ResultCache | None = None,
		channel: EventChannel | None = None,
		*,
		enumerator: Enumerator = list_top_level_dirs,
		extractor: Extractor = collect_repo_metadata,
	) -> None:
		"""
		Initialize the orchestrator.

		Args:
			cache: Cache the finished snapshot is saved to (None to skip saving)
			channel: Channel receiving progress, log and completion events
			enumerator: Function listing candidate directories
			extractor: Function collecting metadata for one directory

		"""
		self.cache = cache
		self.channel = channel or EventChannel()
		self._enumerator = enumerator
		self._extractor = extractor
		self._state = ScanState.IDLE

	@property
	def state(self) -> ScanState:
		"""Current state of the scan."""
		return self._state

	def run(
		self,
		root_path: str | Path,
		ignore_names: Iterable[str] = (),
		include_hidden: bool = False,
		cancel_event: threading.Event | None = None,
	) -> ScanResult:
		"""
		Scan a workspace root.

		Args:
			root_path: Workspace root to scan
			ignore_names: Directory names to skip
			include_hidden: Whether to scan dot-prefixed directories
			cancel_event: Set by the caller to stop the scan at the next directory

		Returns:
			ScanResult describing the terminal state

		Raises:
			RuntimeError: If the orchestrator already ran

		"""
		if self._state is not ScanState.IDLE:
			msg = "A scan orchestrator can only run once"
			raise RuntimeError(msg)

		root = os.fspath(root_path)
		cancel_event = cancel_event or threading.Event()

		self._state = ScanState.ENUMERATING
		logger.info("Scanning workspace %s", root)
		try:
			candidates = self._enumerator(root, ignore_names, include_hidden)
		except EnumerationError as e:
			logger.error("Workspace scan failed: %s", e)  # noqa: TRY400
			return self._finish(ScanResult(ScanState.FAILED, error=e))
		except OSError as e:
			error = EnumerationError(root, e)
			logger.error("Workspace scan failed: %s", error)  # noqa: TRY400
			return self._finish(ScanResult(ScanState.FAILED, error=error))

		total = len(candidates)
		self.channel.send_progress(0, total, f"{total} directories to scan")

		self._state = ScanState.EXTRACTING
		records: list[DirectoryRecord] = []
		for index, candidate in enumerate(candidates, start=1):
			if cancel_event.is_set():
				return self._cancelled(root, len(records), total)

			name = os.path.basename(candidate)
			self.channel.send_log(f"Scanning {name}")
			records.append(DirectoryRecord(path=candidate, git_metadata=self._extract(candidate)))
			self.channel.send_log(f"Completed scan of {name}")
			self.channel.send_progress(index, total, f"Completed scan of {name}")

		if cancel_event.is_set():
			return self._cancelled(root, len(records), total)

		self._state = ScanState.FINALIZING
		snapshot = Snapshot(workspace_path=root, scanned_at=datetime.now(tz=UTC), records=tuple(records))

		cache_error = None
		if self.cache is not None:
			try:
				self.cache.save(root, snapshot)
			except CacheError as e:
				cache_error = e
				logger.warning("Failed to save scan results to cache: %s", e)
				self.channel.send_log(f"Warning: failed to save scan results to cache: {e}")
			else:
				self.channel.send_log(f"Scan results cached: {snapshot.count} directories")

		summary = (
			f"Scanned {snapshot.count} directories: {snapshot.repo_count} git repositories, "
			f"{snapshot.uncommitted_count} with uncommitted changes"
		)
		logger.debug(summary)
		self.channel.send_log(summary)
		self.channel.send_progress(total, total, summary)

		return self._finish(ScanResult(ScanState.COMPLETED, snapshot=snapshot, cache_error=cache_error))

	def _extract(self, path: str) -> RepoMetadata:
		"""Collect metadata for one directory, reporting any failure as a non-repository."""
		try:
			return self._extractor(path)
		except Exception as e:  # noqa: BLE001
			logger.warning("Failed to collect git metadata for %s: %s", path, e)
			return RepoMetadata(is_repo=False)

	def _cancelled(self, root: str, scanned: int, total: int) -> ScanResult:
		logger.info("Scan of %s cancelled after %d of %d directories", root, scanned, total)
		return self._finish(ScanResult(ScanState.CANCELLED, error=ScanCancelledError(root, scanned, total)))

	def _finish(self, result: ScanResult) -> ScanResult:
		"""Enter the terminal state and deliver the terminal event."""
		self._state = result.state
		self.channel.complete(CompleteEvent(outcome=result.state, snapshot=result.snapshot, error=result.error))
		return result


@dataclass
class ScanHandle:
	"""Handle to a scan running on a background thread."""

	orchestrator: ScanOrchestrator
	thread: threading.Thread
	cancel_event: threading.Event
	_result: ScanResult | None = None

	@property
	def channel(self) -> EventChannel:
		"""Event channel of the running scan."""
		return self.orchestrator.channel

	@property
	def state(self) -> ScanState:
		"""Current state of the scan."""
		return self.orchestrator.state

	@property
	def cancelled(self) -> bool:
		"""Whether cancellation was requested."""
		return self.cancel_event.is_set()

	@property
	def done(self) -> bool:
		"""Whether the worker thread has finished."""
		return not self.thread.is_alive()

	@property
	def result(self) -> ScanResult | None:
		"""Result of the scan, or None while it is still running."""
		return self._result

	def cancel(self) -> None:
		"""Request cooperative cancellation of the scan."""
		self.cancel_event.set()

	def join(self, timeout: float | None = None) -> ScanResult | None:
		"""Wait for the worker thread and return the result, if finished."""
		self.thread.join(timeout)
		return self._result


def start_scan(
	root_path: str | Path,
	ignore_names: Iterable[str] = (),
	include_hidden: bool = False,
	*,
	cache: ResultCache | None = None,
	channel: EventChannel | None = None,
	orchestrator: ScanOrchestrator | None = None,
) -> ScanHandle:
	"""
	Start a scan on a dedicated worker thread.

	Args:
		root_path: Workspace root to scan
		ignore_names: Directory names to skip
		include_hidden: Whether to scan dot-prefixed directories
		cache: Cache the finished snapshot is saved to
		channel: Channel for live events (created if omitted)
		orchestrator: Preconfigured orchestrator (overrides cache and channel)

	Returns:
		ScanHandle used to consume events, cancel and collect the result

	"""
	orchestrator = orchestrator or ScanOrchestrator(cache=cache, channel=channel)
	cancel_event = threading.Event()
	ignore = list(ignore_names)

	def _worker() -> None:
		try:
			handle._result = orchestrator.run(root_path, ignore, include_hidden, cancel_event)  # noqa: SLF001
		except Exception as e:
			logger.exception("Scan worker stopped unexpectedly")
			handle._result = ScanResult(ScanState.FAILED, error=e)  # noqa: SLF001
			if not orchestrator.channel.closed:
				orchestrator.channel.complete(CompleteEvent(outcome=ScanState.FAILED, error=e))

	thread = threading.Thread(target=_worker, name="thandie-scan", daemon=True)
	handle = ScanHandle(orchestrator=orchestrator, thread=thread, cancel_event=cancel_event)
	thread.start()
	return handle


def scan_workspace(
	root_path: str | Path,
	ignore_names: Iterable[str] = (),
	include_hidden: bool = False,
	*,
	cache: ResultCache | None = None,
	cancel_event: threading.Event | None = None,
) -> Snapshot:
	"""
	Scan a workspace on the calling thread.

	Returns:
		The completed snapshot

	Raises:
		EnumerationError: If the workspace root cannot be listed
		ScanCancelledError: If ``cancel_event`` was set during the scan

	"""
	orchestrator = ScanOrchestrator(cache=cache)
	return orchestrator.run(root_path, ignore_names, include_hidden, cancel_event).raise_for_outcome()
