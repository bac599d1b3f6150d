"""Tests for the scan event channel."""

from __future__ import annotations

import threading

import pytest

from thandie.scanner.events import CompleteEvent, EventChannel, LogEvent, ProgressEvent
from thandie.scanner.state import ScanState


@pytest.mark.unit
class TestEventChannel:
	"""Test cases for EventChannel."""

	def test_progress_dropped_when_full(self) -> None:
		"""Sends never block; events beyond capacity are dropped and counted."""
		channel = EventChannel(progress_capacity=2)

		assert channel.send_progress(0, 3)
		assert channel.send_progress(1, 3)
		assert not channel.send_progress(2, 3)
		assert channel.dropped_progress == 1
		assert channel.drain() == [ProgressEvent(0, 3), ProgressEvent(1, 3)]

	def test_logs_dropped_when_full(self) -> None:
		"""The log queue has its own capacity."""
		channel = EventChannel(log_capacity=1)

		assert channel.send_log("first")
		assert not channel.send_log("second")
		assert channel.dropped_logs == 1
		assert channel.dropped_progress == 0

	def test_concurrent_drops_are_all_counted(self) -> None:
		"""Drops from several threads at once are counted exactly."""
		channel = EventChannel(log_capacity=1)
		channel.send_log("fill")

		def _flood() -> None:
			for _ in range(500):
				channel.send_log("overflow")

		threads = [threading.Thread(target=_flood) for _ in range(8)]
		for thread in threads:
			thread.start()
		for thread in threads:
			thread.join()

		assert channel.dropped_logs == 4000

	def test_default_capacities(self) -> None:
		"""Ten progress events and a hundred log lines fit before dropping."""
		channel = EventChannel()

		assert all(channel.send_progress(i, 10) for i in range(10))
		assert not channel.send_progress(10, 10)
		assert all(channel.send_log(f"line {i}") for i in range(100))
		assert not channel.send_log("overflow")

	def test_terminal_event_delivered_when_full(self) -> None:
		"""Completion is delivered even if the other queues are full."""
		channel = EventChannel(progress_capacity=1, log_capacity=1)
		channel.send_progress(0, 1)
		channel.send_progress(1, 1)
		channel.send_log("line")
		channel.send_log("dropped")

		channel.complete(CompleteEvent(outcome=ScanState.COMPLETED))

		events = channel.drain()
		assert events == [ProgressEvent(0, 1), LogEvent("line"), CompleteEvent(outcome=ScanState.COMPLETED)]

	def test_terminal_event_is_last(self) -> None:
		"""Drained events end with the terminal event."""
		channel = EventChannel()
		channel.send_log("scanning")
		channel.send_progress(1, 1)
		channel.complete(CompleteEvent(outcome=ScanState.FAILED))

		events = channel.drain()

		assert isinstance(events[-1], CompleteEvent)
		assert sum(isinstance(event, CompleteEvent) for event in events) == 1

	def test_complete_twice_raises(self) -> None:
		"""A channel carries exactly one terminal event."""
		channel = EventChannel()
		channel.complete(CompleteEvent(outcome=ScanState.COMPLETED))

		with pytest.raises(RuntimeError):
			channel.complete(CompleteEvent(outcome=ScanState.FAILED))

	def test_sends_after_close_are_rejected(self) -> None:
		"""Nothing is accepted after the terminal event."""
		channel = EventChannel()
		channel.complete(CompleteEvent(outcome=ScanState.CANCELLED))

		assert channel.closed
		assert not channel.send_progress(1, 1)
		assert not channel.send_log("late")
		assert channel.drain() == [CompleteEvent(outcome=ScanState.CANCELLED)]

	def test_events_stream_from_producer_thread(self) -> None:
		"""The event iterator stops right after the terminal event."""
		channel = EventChannel()

		def _produce() -> None:
			for i in range(3):
				channel.send_progress(i + 1, 3)
				channel.send_log(f"dir {i}")
			channel.complete(CompleteEvent(outcome=ScanState.COMPLETED))

		producer = threading.Thread(target=_produce)
		producer.start()
		events = list(channel.events(poll_interval=0.01))
		producer.join()

		assert events[-1] == CompleteEvent(outcome=ScanState.COMPLETED)
		assert [event for event in events if isinstance(event, LogEvent)] == [LogEvent(f"dir {i}") for i in range(3)]
		assert list(channel.events()) == []

	def test_wait_for_completion(self) -> None:
		"""Waiting returns the terminal event."""
		channel = EventChannel()
		timer = threading.Timer(0.05, channel.complete, args=(CompleteEvent(outcome=ScanState.COMPLETED),))
		timer.start()

		event = channel.wait_for_completion(timeout=5)

		timer.join()
		assert event.outcome is ScanState.COMPLETED

	def test_wait_for_completion_timeout(self) -> None:
		"""Waiting on a channel that never completes times out."""
		with pytest.raises(TimeoutError):
			EventChannel().wait_for_completion(timeout=0.01)
