"""
Persistent cache of workspace scan results.

Each workspace root maps to one JSON file whose name is derived from a
SHA-256 hash of the exact path string, so re-scanning a root overwrites
its previous entry.

"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError, model_validator

from thandie.cache.errors import (
	CacheDecodeError,
	CacheError,
	CacheNotFoundError,
	CacheReadError,
	CacheWriteError,
)
from thandie.scanner.models import DirectoryRecord, Snapshot
from thandie.utils.directory_manager import DirectoryManager

if TYPE_CHECKING:
	from collections.abc import Iterable

logger = logging.getLogger(__name__)

CACHE_FILE_PREFIX = "scan_"
CACHE_FILE_SUFFIX = ".json"
# Hex characters of the path hash used in cache file names
CACHE_KEY_LENGTH = 16


class CacheEntry(BaseModel):
	"""On-disk representation of a scan result."""

	workspace_path: str
	scanned_at: datetime
	directories: list[str] = []
	"""Deprecated: paths only, kept for older readers. Use ``directory_infos``."""
	count: int = 0
	directory_infos: list[DirectoryRecord] = []

	@model_validator(mode="after")
	def _fill_infos_from_paths(self) -> CacheEntry:
		"""Upgrade entries written before ``directory_infos`` existed."""
		if not self.directory_infos and self.directories:
			self.directory_infos = [DirectoryRecord(path=path) for path in self.directories]
		return self

	@classmethod
	def from_snapshot(cls, snapshot: Snapshot) -> CacheEntry:
		"""Build a cache entry from a snapshot."""
		return cls(
			workspace_path=snapshot.workspace_path,
			scanned_at=snapshot.scanned_at,
			directories=snapshot.paths,
			count=snapshot.count,
			directory_infos=list(snapshot.records),
		)

	def to_snapshot(self) -> Snapshot:
		"""Convert the entry back into a snapshot."""
		return Snapshot(
			workspace_path=self.workspace_path,
			scanned_at=self.scanned_at,
			records=tuple(self.directory_infos),
		)


def cache_key(workspace_path: str) -> str:
	"""
	Derive the cache key of a workspace path.

	The key depends only on the exact path string: no normalization or
	symlink resolution is applied, so callers must pass a canonical path to
	get hits across equivalent spellings of the same root.

	Args:
		workspace_path: Workspace root as passed to the scanner

	Returns:
		The first 16 hex characters of the SHA-256 of the UTF-8 path

	"""
	digest = hashlib.sha256(workspace_path.encode("utf-8")).hexdigest()
	return digest[:CACHE_KEY_LENGTH]


class ResultCache:
	"""Keyed file store of scan snapshots."""

	def __init__(self, cache_dir: Path | str | None = None) -> None:
		"""
		Initialize the cache, creating its directory if needed.

		Args:
			cache_dir: Directory for cache files (default: the user cache directory)

		Raises:
			CacheError: If the cache directory cannot be created

		"""
		self._cache_dir = Path(cache_dir) if cache_dir else DirectoryManager().cache_dir
		try:
			self._cache_dir.mkdir(parents=True, exist_ok=True)
		except OSError as e:
			msg = f"Failed to create cache directory {self._cache_dir}: {e}"
			raise CacheError(msg) from e

	@property
	def cache_dir(self) -> Path:
		"""Directory holding the cache files."""
		return self._cache_dir

	def get_cache_file_path(self, workspace_path: str) -> Path:
		"""Return the cache file path for a workspace."""
		return self._cache_dir / f"{CACHE_FILE_PREFIX}{cache_key(workspace_path)}{CACHE_FILE_SUFFIX}"

	def save(self, workspace_path: str, snapshot: Snapshot) -> Path:
		"""
		Save a snapshot, replacing any previous entry for the workspace.

		The file is written to a temporary name and renamed into place, so
		readers never observe a partial entry.

		Args:
			workspace_path: Workspace root used as the cache key
			snapshot: Snapshot to persist

		Returns:
			Path of the written cache file

		Raises:
			CacheWriteError: If the entry cannot be written

		"""
		entry = CacheEntry.from_snapshot(snapshot)
		data = json.dumps(entry.model_dump(mode="json", by_alias=True), indent=2)
		cache_file = self.get_cache_file_path(workspace_path)

		tmp_path = None
		try:
			fd, tmp_path = tempfile.mkstemp(prefix=cache_file.stem, suffix=".tmp", dir=self._cache_dir)
			with os.fdopen(fd, "w", encoding="utf-8") as f:
				f.write(data)
			Path(tmp_path).replace(cache_file)
		except OSError as e:
			if tmp_path is not None:
				Path(tmp_path).unlink(missing_ok=True)
			msg = f"Failed to write cache file {cache_file}: {e}"
			raise CacheWriteError(msg) from e

		logger.debug("Cached %d directories for %s in %s", snapshot.count, workspace_path, cache_file)
		return cache_file

	def save_paths(self, workspace_path: str, directories: Iterable[str]) -> Path:
		"""
		Save a path-only scan result.

		Deprecated: use :meth:`save` with a full snapshot.

		"""
		snapshot = Snapshot(
			workspace_path=workspace_path,
			scanned_at=datetime.now(tz=UTC),
			records=tuple(DirectoryRecord(path=path) for path in directories),
		)
		return self.save(workspace_path, snapshot)

	def load(self, workspace_path: str) -> Snapshot:
		"""
		Load the most recent snapshot of a workspace.

		Raises:
			CacheNotFoundError: If no entry exists for the workspace
			CacheReadError: If the entry cannot be read
			CacheDecodeError: If the entry is not a valid scan result

		"""
		cache_file = self.get_cache_file_path(workspace_path)
		try:
			raw = cache_file.read_text(encoding="utf-8")
		except FileNotFoundError as e:
			msg = f"No cached scan result found for workspace: {workspace_path}"
			raise CacheNotFoundError(msg) from e
		except OSError as e:
			msg = f"Failed to read cache file {cache_file}: {e}"
			raise CacheReadError(msg) from e

		try:
			entry = CacheEntry.model_validate(json.loads(raw))
		except (json.JSONDecodeError, ValidationError) as e:
			msg = f"Failed to decode cache file {cache_file}: {e}"
			raise CacheDecodeError(msg) from e

		return entry.to_snapshot()

	def has(self, workspace_path: str) -> bool:
		"""Check whether a cached result exists for a workspace."""
		return self.get_cache_file_path(workspace_path).is_file()

	def clear_all(self) -> int:
		"""
		Remove every cached scan result.

		Returns:
			Number of removed entries

		Raises:
			CacheError: If the cache directory cannot be listed or an entry cannot be removed

		"""
		removed = 0
		try:
			entries = list(self._cache_dir.iterdir())
		except OSError as e:
			msg = f"Failed to read cache directory {self._cache_dir}: {e}"
			raise CacheError(msg) from e

		for entry in entries:
			if entry.suffix != CACHE_FILE_SUFFIX or not entry.is_file():
				continue
			try:
				entry.unlink()
			except OSError as e:
				msg = f"Failed to remove cache file {entry}: {e}"
				raise CacheError(msg) from e
			removed += 1

		logger.info("Removed %d cached scan results from %s", removed, self._cache_dir)
		return removed
