"""Data model for workspace scans."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import PurePath

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

STATUS_CLEAN = "clean"


class RepoMetadata(BaseModel):
	"""Version-control state of a single directory."""

	model_config = ConfigDict(frozen=True)

	is_repo: bool = Field(
		default=False,
		validation_alias=AliasChoices("is_repo", "is_git_repo"),
		serialization_alias="is_git_repo",
	)
	"""Whether the directory could be opened as a git repository."""

	remote_url: str = ""
	"""URL of ``origin``, else of the first other remote, else empty."""

	current_branch: str = ""
	"""Short name of the checked-out branch; empty when detached or unreadable."""

	has_uncommitted: bool = False
	"""Whether the working tree differs from the index or HEAD."""

	status_summary: str = ""
	"""``"clean"``, a porcelain-style summary of changed files, or empty if status was not read."""

	@property
	def is_dirty(self) -> bool:
		"""Whether the status summary describes changes."""
		return self.status_summary not in ("", STATUS_CLEAN)


class DirectoryRecord(BaseModel):
	"""One top-level directory of a workspace."""

	model_config = ConfigDict(frozen=True)

	path: str
	git_metadata: RepoMetadata | None = None

	@property
	def name(self) -> str:
		"""Base name of the directory."""
		return PurePath(self.path).name

	@property
	def is_repo(self) -> bool:
		"""Whether the directory is a git repository."""
		return self.git_metadata is not None and self.git_metadata.is_repo

	@property
	def has_uncommitted(self) -> bool:
		"""Whether the directory is a repository with uncommitted changes."""
		return self.git_metadata is not None and self.git_metadata.has_uncommitted


class Snapshot(BaseModel):
	"""Immutable result of one complete scan."""

	model_config = ConfigDict(frozen=True)

	workspace_path: str
	scanned_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
	records: tuple[DirectoryRecord, ...] = ()

	@property
	def count(self) -> int:
		"""Number of scanned directories."""
		return len(self.records)

	@property
	def repo_count(self) -> int:
		"""Number of directories that are git repositories."""
		return sum(1 for record in self.records if record.is_repo)

	@property
	def uncommitted_count(self) -> int:
		"""Number of repositories with uncommitted changes."""
		return sum(1 for record in self.records if record.has_uncommitted)

	@property
	def paths(self) -> list[str]:
		"""Paths of all records in enumeration order."""
		return [record.path for record in self.records]
