"""
Event channel between a running scan and its presentation layer.

The scan worker is the only producer. Progress and log events go through
bounded queues and are dropped when a queue is full, so a slow or absent
consumer never blocks the scan. The terminal event has a queue of its own
with a single slot and is always delivered.

"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from thandie.scanner.state import ScanState

if TYPE_CHECKING:
	from collections.abc import Iterator

	from thandie.scanner.models import Snapshot

DEFAULT_PROGRESS_CAPACITY = 10
DEFAULT_LOG_CAPACITY = 100


@dataclass(frozen=True)
class ProgressEvent:
	"""Progress of a scan over its candidate directories."""

	current: int
	total: int
	message: str = ""


@dataclass(frozen=True)
class LogEvent:
	"""Free-text status line."""

	text: str


@dataclass(frozen=True)
class CompleteEvent:
	"""Terminal event of a scan."""

	outcome: ScanState
	snapshot: Snapshot | None = None
	error: Exception | None = None


ScanEvent = ProgressEvent | LogEvent | CompleteEvent


class EventChannel:
	"""Single-producer event stream carrying progress, log and completion events."""

	def __init__(
		self,
		progress_capacity: int = DEFAULT_PROGRESS_CAPACITY,
		log_capacity: int = DEFAULT_LOG_CAPACITY,
	) -> None:
		"""
		Initialize the channel.

		Args:
			progress_capacity: Maximum number of pending progress events
			log_capacity: Maximum number of pending log events

		"""
		self._progress: queue.Queue[ProgressEvent] = queue.Queue(maxsize=progress_capacity)
		self._logs: queue.Queue[LogEvent] = queue.Queue(maxsize=log_capacity)
		self._terminal: queue.Queue[CompleteEvent] = queue.Queue(maxsize=1)
		self._closed = threading.Event()
		self._activity = threading.Event()
		self._terminal_seen = False
		self._drop_lock = threading.Lock()
		self.dropped_progress = 0
		self.dropped_logs = 0

	@property
	def closed(self) -> bool:
		"""Whether the terminal event has been sent."""
		return self._closed.is_set()

	# Producer side

	def send_progress(self, current: int, total: int, message: str = "") -> bool:
		"""
		Queue a progress event without blocking.

		Returns:
			False if the event was dropped because the queue is full or the
			channel is closed

		"""
		return self._offer(self._progress, ProgressEvent(current, total, message), "dropped_progress")

	def send_log(self, text: str) -> bool:
		"""
		Queue a log line without blocking.

		Returns:
			False if the line was dropped because the queue is full or the
			channel is closed

		"""
		return self._offer(self._logs, LogEvent(text), "dropped_logs")

	def _offer(self, target: queue.Queue, event: ProgressEvent | LogEvent, counter: str) -> bool:
		if self.closed:
			return False
		try:
			target.put_nowait(event)
		except queue.Full:
			# Producers and the log handler may drop concurrently
			with self._drop_lock:
				setattr(self, counter, getattr(self, counter) + 1)
			return False
		self._activity.set()
		return True

	def complete(self, event: CompleteEvent) -> None:
		"""
		Deliver the terminal event and close the channel.

		Raises:
			RuntimeError: If a terminal event was already sent

		"""
		if self.closed:
			msg = "Scan channel already received its terminal event"
			raise RuntimeError(msg)
		self._closed.set()
		self._terminal.put(event)
		self._activity.set()

	# Consumer side

	def drain(self) -> list[ScanEvent]:
		"""
		Collect every pending event without blocking.

		Progress events come first, then log lines, then the terminal event if
		it has arrived. The terminal event is checked before the other queues
		are drained, so nothing the producer sent before it is left behind.

		"""
		terminal = None
		try:
			terminal = self._terminal.get_nowait()
		except queue.Empty:
			pass

		events: list[ScanEvent] = []
		for source in (self._progress, self._logs):
			while True:
				try:
					events.append(source.get_nowait())
				except queue.Empty:
					break

		if terminal is not None:
			self._terminal_seen = True
			events.append(terminal)
		return events

	def events(self, poll_interval: float = 0.05) -> Iterator[ScanEvent]:
		"""
		Yield events as they arrive until the terminal event has been yielded.

		Args:
			poll_interval: Longest time to wait for new events between drains

		"""
		if self._terminal_seen:
			return
		while True:
			self._activity.clear()
			batch = self.drain()
			yield from batch
			if batch and isinstance(batch[-1], CompleteEvent):
				return
			self._activity.wait(poll_interval)

	def wait_for_completion(self, timeout: float | None = None) -> CompleteEvent:
		"""
		Block until the terminal event arrives, discarding other events.

		Args:
			timeout: Seconds to wait, or None to wait indefinitely

		Raises:
			TimeoutError: If no terminal event arrived in time

		"""
		try:
			event = self._terminal.get(timeout=timeout)
		except queue.Empty as e:
			msg = "Timed out waiting for the scan to finish"
			raise TimeoutError(msg) from e
		self._terminal_seen = True
		self.drain()
		return event
