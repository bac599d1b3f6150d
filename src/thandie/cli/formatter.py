"""Rich rendering of scan snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from thandie.scanner.models import STATUS_CLEAN

if TYPE_CHECKING:
	from collections.abc import Iterable

	from rich.console import Console

	from thandie.scanner.models import DirectoryRecord, Snapshot

NOT_A_REPO = "-"


def summary_line(snapshot: Snapshot) -> str:
	"""One-line summary of a snapshot."""
	return (
		f"{snapshot.count} directories, {snapshot.repo_count} git repositories, "
		f"{snapshot.uncommitted_count} with uncommitted changes"
	)


def sort_records(records: Iterable[DirectoryRecord]) -> list[DirectoryRecord]:
	"""Sort records by directory name for display."""
	return sorted(records, key=lambda record: (record.name.lower(), record.name))


def _status_cell(record: DirectoryRecord) -> Text:
	if not record.is_repo or record.git_metadata is None:
		return Text(NOT_A_REPO, style="dim")
	summary = record.git_metadata.status_summary
	if summary == STATUS_CLEAN:
		return Text(summary, style="green")
	if not summary:
		return Text("unknown", style="dim")
	return Text(summary, style="yellow")


def build_snapshot_table(records: Iterable[DirectoryRecord], title: str | None = None) -> Table:
	"""
	Build a table with one row per directory.

	Args:
		records: Records to render, in display order
		title: Optional table title

	Returns:
		The rich table

	"""
	table = Table(title=title, show_lines=False, expand=False)
	table.add_column("Directory", style="bold", no_wrap=True)
	table.add_column("Branch", style="cyan")
	table.add_column("Status")
	table.add_column("Remote", style="dim", overflow="fold")

	for record in records:
		metadata = record.git_metadata
		if record.is_repo and metadata is not None:
			branch = Text(metadata.current_branch or "(detached)")
			remote = Text(metadata.remote_url or NOT_A_REPO)
		else:
			branch = Text(NOT_A_REPO, style="dim")
			remote = Text(NOT_A_REPO)
		table.add_row(Text(record.name), branch, _status_cell(record), remote)
	return table


def print_snapshot(console: Console, snapshot: Snapshot, records: Iterable[DirectoryRecord] | None = None) -> None:
	"""Print a snapshot table followed by its summary line."""
	rows = sort_records(snapshot.records if records is None else records)
	if rows:
		console.print(build_snapshot_table(rows, title=snapshot.workspace_path))
	else:
		console.print("[dim]No directories to show.[/dim]")
	console.print(summary_line(snapshot), markup=False)
