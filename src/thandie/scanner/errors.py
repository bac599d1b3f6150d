"""Errors raised by the scan pipeline."""

from __future__ import annotations

from pathlib import Path


class ScanError(Exception):
	"""Base exception for scan failures."""


class EnumerationError(ScanError):
	"""The workspace root could not be listed."""

	def __init__(self, path: str | Path, cause: BaseException) -> None:
		"""
		Initialize the error.

		Args:
			path: Workspace root that could not be listed
			cause: Underlying error raised by the filesystem

		"""
		self.path = str(path)
		self.cause = cause
		super().__init__(f"cannot scan {self.path}: {cause}")


class ScanCancelledError(ScanError):
	"""A scan was cancelled before it completed."""

	def __init__(self, path: str | Path, scanned: int = 0, total: int = 0) -> None:
		"""
		Initialize the error.

		Args:
			path: Workspace root of the cancelled scan
			scanned: Number of directories processed before cancellation
			total: Number of candidate directories

		"""
		self.path = str(path)
		self.scanned = scanned
		self.total = total
		super().__init__(f"scan of {self.path} cancelled after {scanned} of {total} directories")
