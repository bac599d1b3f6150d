"""Listing of the top-level directories of a workspace."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from thandie.scanner.errors import EnumerationError

if TYPE_CHECKING:
	from collections.abc import Iterable
	from pathlib import Path

logger = logging.getLogger(__name__)


def list_top_level_dirs(
	root: str | Path,
	ignore_names: Iterable[str] = (),
	include_hidden: bool = False,
) -> list[str]:
	"""
	List the immediate subdirectories of a workspace root.

	Entries are returned in the order the filesystem lists them. Symlinks are
	not followed, so a link to a directory is skipped like a regular file.

	Args:
		root: Workspace root to list
		ignore_names: Directory names to skip (exact match)
		include_hidden: Whether to keep dot-prefixed directories

	Returns:
		Paths of the matching directories, joined onto ``root``

	Raises:
		EnumerationError: If the root cannot be listed

	"""
	root_str = os.fspath(root)
	ignored = set(ignore_names)

	try:
		with os.scandir(root_str) as entries:
			dirs = []
			for entry in entries:
				try:
					if not entry.is_dir(follow_symlinks=False):
						continue
				except OSError:
					logger.debug("Skipping unreadable entry %s", entry.path)
					continue

				name = entry.name
				if not include_hidden and name.startswith("."):
					continue
				if name in ignored:
					continue

				dirs.append(os.path.join(root_str, name))
	except OSError as e:
		logger.warning("Failed to list workspace root %s: %s", root_str, e)
		raise EnumerationError(root_str, e) from e

	logger.debug("Found %d candidate directories in %s", len(dirs), root_str)
	return dirs

