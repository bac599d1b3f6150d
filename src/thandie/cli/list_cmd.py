"""CLI command for listing the cached scan of a workspace."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

DirtyFlag = Annotated[bool, typer.Option("--dirty", "-d", help="Only show repositories with uncommitted changes.")]

ReposFlag = Annotated[bool, typer.Option("--repos", "-r", help="Only show git repositories.")]


def register_command(app: typer.Typer) -> None:
	"""Register the list command with the CLI app."""

	@app.command(name="list")
	def list_command(
		ctx: typer.Context,
		dirty: DirtyFlag = False,
		repos: ReposFlag = False,
	) -> None:
		"""List the directories recorded by the last scan of the workspace."""
		_list_command_impl(ctx, dirty=dirty, repos=repos)


def _list_command_impl(ctx: typer.Context, dirty: bool, repos: bool) -> None:
	from thandie.cache import CacheError, CacheNotFoundError, ResultCache
	from thandie.cli.cli_types import get_state
	from thandie.cli.formatter import print_snapshot
	from thandie.utils.cli_utils import console, exit_with_error

	workspace = get_state(ctx).workspace_path()

	try:
		snapshot = ResultCache().load(workspace)
	except CacheNotFoundError as e:
		exit_with_error(
			f"No cached scan found for {workspace}.\nRun `thandie scan` to scan the workspace first.",
			exception=e,
		)
		return
	except CacheError as e:
		exit_with_error(f"Failed to load cached scan for {workspace}", exception=e)
		return

	records = list(snapshot.records)
	if repos:
		records = [record for record in records if record.is_repo]
	if dirty:
		records = [record for record in records if record.has_uncommitted]
	logger.debug("Listing %d of %d cached directories", len(records), snapshot.count)

	console.print(f"Last scanned: {snapshot.scanned_at.astimezone():%Y-%m-%d %H:%M:%S %Z}", markup=False)
	print_snapshot(console, snapshot, records)
