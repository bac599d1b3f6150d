"""CLI commands for inspecting and clearing the scan cache."""

from __future__ import annotations

import logging

import typer

from thandie.cli.cli_types import YesFlag, get_state

logger = logging.getLogger(__name__)

cache_app = typer.Typer(help="Inspect or clear cached scan results.", no_args_is_help=True)


@cache_app.command(name="path")
def cache_path_command(ctx: typer.Context) -> None:
	"""Print the cache directory and the cache file of the current workspace."""
	from thandie.cache import CacheError, ResultCache
	from thandie.utils.cli_utils import console, exit_with_error

	workspace = get_state(ctx).workspace_path()
	try:
		cache = ResultCache()
	except CacheError as e:
		exit_with_error("Cache directory is not available", exception=e)
		return

	cache_file = cache.get_cache_file_path(workspace)
	console.print(f"Cache directory: {cache.cache_dir}", markup=False, soft_wrap=True)
	status = "present" if cache.has(workspace) else "missing"
	console.print(f"Workspace cache: {cache_file} ({status})", markup=False, soft_wrap=True)


@cache_app.command(name="clear")
def cache_clear_command(yes: YesFlag = False) -> None:
	"""Remove every cached scan result."""
	import questionary

	from thandie.cache import CacheError, ResultCache
	from thandie.utils.cli_utils import console, exit_with_error

	if not yes:
		confirmed = questionary.confirm("Remove all cached scan results?", default=False).ask()
		if not confirmed:
			console.print("[yellow]Cache left unchanged.[/yellow]")
			return

	try:
		removed = ResultCache().clear_all()
	except CacheError as e:
		exit_with_error("Failed to clear the scan cache", exception=e)
		return

	console.print(f"[green]Removed {removed} cached scan result(s).[/green]")


def register_command(app: typer.Typer) -> None:
	"""Register the cache command group with the CLI app."""
	app.add_typer(cache_app, name="cache")
