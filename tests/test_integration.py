"""End-to-end scans over real directories and repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.git_helpers import commit_all, init_repo, make_committed_repo, write_file
from thandie.cache import ResultCache
from thandie.config import DEFAULT_IGNORE_DIRS
from thandie.scanner import ScanState, scan_workspace, start_scan

if TYPE_CHECKING:
	from pathlib import Path


@pytest.fixture
def populated_workspace(workspace: Path) -> Path:
	"""
	A workspace holding a clean repository, a plain directory, a stray .git
	directory, a repository with two modified files and a regular file.
	"""
	make_committed_repo(workspace / "a", remotes={"origin": "https://example.com/a.git"})
	(workspace / "b").mkdir()
	(workspace / ".git").mkdir()
	charlie = init_repo(workspace / "c")
	write_file(workspace / "c", "one.txt", "one\n")
	write_file(workspace / "c", "two.txt", "two\n")
	commit_all(charlie)
	write_file(workspace / "c", "one.txt", "one changed\n")
	write_file(workspace / "c", "two.txt", "two changed\n")
	(workspace / "readme.txt").write_text("not a directory")
	return workspace


@pytest.mark.integration
@pytest.mark.git
@pytest.mark.fs
class TestWorkspaceScan:
	"""Scans of a populated workspace."""

	def test_scan_records(self, populated_workspace: Path, tmp_path: Path) -> None:
		"""Every top-level directory except ignored ones is recorded with its git state."""
		cache = ResultCache(tmp_path / "cache")

		snapshot = scan_workspace(populated_workspace, DEFAULT_IGNORE_DIRS, cache=cache)

		records = {record.name: record for record in snapshot.records}
		assert set(records) == {"a", "b", "c"}
		assert snapshot.count == 3
		assert snapshot.repo_count == 2
		assert snapshot.uncommitted_count == 1

		alpha = records["a"].git_metadata
		assert alpha is not None
		assert alpha.is_repo
		assert alpha.remote_url == "https://example.com/a.git"
		assert alpha.current_branch == "main"
		assert alpha.status_summary == "clean"

		assert records["b"].git_metadata is not None
		assert not records["b"].is_repo

		charlie = records["c"].git_metadata
		assert charlie is not None
		assert charlie.has_uncommitted
		assert sorted(charlie.status_summary.split("; ")) == [" M one.txt", " M two.txt"]
		assert "more" not in charlie.status_summary
		assert charlie.remote_url == ""

	def test_scan_is_cached(self, populated_workspace: Path, tmp_path: Path) -> None:
		"""The cached snapshot of a workspace matches the scan result."""
		cache = ResultCache(tmp_path / "cache")

		snapshot = scan_workspace(str(populated_workspace), DEFAULT_IGNORE_DIRS, cache=cache)

		assert cache.load(str(populated_workspace)).records == snapshot.records

	def test_hidden_directories_included_on_request(self, populated_workspace: Path) -> None:
		"""With hidden directories included, only the ignore list keeps .git out."""
		init_repo(populated_workspace / ".dotfiles")

		with_hidden = scan_workspace(populated_workspace, DEFAULT_IGNORE_DIRS, include_hidden=True)
		without_ignore = scan_workspace(populated_workspace, [], include_hidden=True)

		assert {record.name for record in with_hidden.records} == {"a", "b", "c", ".dotfiles"}
		assert ".git" in {record.name for record in without_ignore.records}

	def test_background_scan_matches(self, populated_workspace: Path) -> None:
		"""A scan on a worker thread produces the same records."""
		handle = start_scan(populated_workspace, DEFAULT_IGNORE_DIRS)
		complete = handle.channel.wait_for_completion(timeout=30)
		handle.join(timeout=30)

		assert complete.outcome is ScanState.COMPLETED
		assert complete.snapshot is not None
		assert complete.snapshot.records == scan_workspace(populated_workspace, DEFAULT_IGNORE_DIRS).records

	def test_unreadable_head_is_still_a_repository(self, populated_workspace: Path) -> None:
		"""A repository whose HEAD cannot be resolved is recorded and the scan completes."""
		init_repo(populated_workspace / "d")

		handle = start_scan(populated_workspace, DEFAULT_IGNORE_DIRS)
		complete = handle.channel.wait_for_completion(timeout=30)
		handle.join(timeout=30)

		assert complete.outcome is ScanState.COMPLETED
		assert complete.snapshot is not None
		record = {record.name: record for record in complete.snapshot.records}["d"]
		assert record.is_repo
		assert record.git_metadata is not None
		assert record.git_metadata.current_branch == ""
