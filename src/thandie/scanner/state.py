"""States of a workspace scan."""

from enum import Enum


class ScanState(str, Enum):
	"""Lifecycle state of a scan run."""

	IDLE = "idle"
	ENUMERATING = "enumerating"
	EXTRACTING = "extracting"
	FINALIZING = "finalizing"
	COMPLETED = "completed"
	CANCELLED = "cancelled"
	FAILED = "failed"

	@property
	def is_terminal(self) -> bool:
		"""Whether no further transitions can happen from this state."""
		return self in (ScanState.COMPLETED, ScanState.CANCELLED, ScanState.FAILED)
