"""Extraction of git repository state for a single directory using pygit2."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from pygit2 import Repository
from pygit2.enums import FileStatus, RepositoryOpenFlag

from thandie.scanner.models import STATUS_CLEAN, RepoMetadata

if TYPE_CHECKING:
	from collections.abc import Mapping
	from pathlib import Path

logger = logging.getLogger(__name__)

# Number of changed files listed in a status summary
MAX_STATUS_ENTRIES = 5

PREFERRED_REMOTE = "origin"

_INDEX_CODES = (
	(FileStatus.INDEX_NEW, "A"),
	(FileStatus.INDEX_MODIFIED, "M"),
	(FileStatus.INDEX_DELETED, "D"),
	(FileStatus.INDEX_RENAMED, "R"),
	(FileStatus.INDEX_TYPECHANGE, "T"),
)

_WORKTREE_CODES = (
	(FileStatus.WT_MODIFIED, "M"),
	(FileStatus.WT_DELETED, "D"),
	(FileStatus.WT_RENAMED, "R"),
	(FileStatus.WT_TYPECHANGE, "T"),
)

_INDEX_MASK = (
	FileStatus.INDEX_NEW
	| FileStatus.INDEX_MODIFIED
	| FileStatus.INDEX_DELETED
	| FileStatus.INDEX_RENAMED
	| FileStatus.INDEX_TYPECHANGE
)


def status_codes(flags: int) -> tuple[str, str]:
	"""
	Translate pygit2 status flags into porcelain index and worktree codes.

	Args:
		flags: Bit flags of a single path as returned by ``Repository.status()``

	Returns:
		Tuple of (index code, worktree code), each a single character

	"""
	if flags & FileStatus.CONFLICTED:
		return "U", "U"
	if flags & FileStatus.WT_NEW and not flags & _INDEX_MASK:
		return "?", "?"

	index_code = next((code for flag, code in _INDEX_CODES if flags & flag), " ")
	worktree_code = next((code for flag, code in _WORKTREE_CODES if flags & flag), " ")
	return index_code, worktree_code


def build_status_summary(status: Mapping[str, int]) -> str:
	"""
	Build the short status summary of a working tree.

	Args:
		status: Changed paths mapped to their status flags

	Returns:
		``"clean"`` when nothing changed, otherwise up to five
		``"XY path"`` entries joined by ``"; "``, with a
		``" ... (K more)"`` suffix when more paths changed

	"""
	if not status:
		return STATUS_CLEAN

	lines = []
	for path, flags in status.items():
		if len(lines) >= MAX_STATUS_ENTRIES:
			break
		index_code, worktree_code = status_codes(flags)
		lines.append(f"{index_code}{worktree_code} {path}")

	summary = "; ".join(lines)
	if len(status) > MAX_STATUS_ENTRIES:
		summary += f" ... ({len(status) - MAX_STATUS_ENTRIES} more)"
	return summary


def _get_remote_url(repo: Repository) -> str:
	"""Return the URL of ``origin``, else of the first other remote, else an empty string."""
	remotes = list(repo.remotes)
	for remote in remotes:
		if remote.name == PREFERRED_REMOTE and remote.url:
			return remote.url
	for remote in remotes:
		if remote.url:
			return remote.url
	return ""


def _get_branch(repo: Repository) -> str:
	"""Return the short name of the checked-out branch, or empty if detached."""
	if repo.head_is_detached:
		return ""
	return repo.head.shorthand or ""


def collect_repo_metadata(dir_path: str | Path) -> RepoMetadata:
	"""
	Collect git metadata for a directory.

	The directory is opened as a repository without searching its parents.
	Failures never propagate: a directory that cannot be opened is reported as
	not being a repository, and each unreadable field is left empty.

	Args:
		dir_path: Directory to inspect

	Returns:
		RepoMetadata describing the directory

	"""
	path = os.fspath(dir_path)
	try:
		repo = Repository(path, RepositoryOpenFlag.NO_SEARCH)
	except Exception as e:  # noqa: BLE001
		logger.debug("Not a git repository %s: %s", path, e)
		return RepoMetadata(is_repo=False)

	remote_url = ""
	try:
		remote_url = _get_remote_url(repo)
	except Exception as e:  # noqa: BLE001
		logger.debug("Failed to read remotes of %s: %s", path, e)

	current_branch = ""
	try:
		current_branch = _get_branch(repo)
	except Exception as e:  # noqa: BLE001
		logger.debug("Failed to read HEAD of %s: %s", path, e)

	has_uncommitted = False
	status_summary = ""
	try:
		status = repo.status()
	except Exception as e:  # noqa: BLE001
		logger.debug("Failed to read status of %s: %s", path, e)
	else:
		has_uncommitted = bool(status)
		status_summary = build_status_summary(status)

	return RepoMetadata(
		is_repo=True,
		remote_url=remote_url,
		current_branch=current_branch,
		has_uncommitted=has_uncommitted,
		status_summary=status_summary,
	)
