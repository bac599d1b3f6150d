"""Command-line interface package for Thandie."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from thandie import __version__
from thandie.cli.cli_types import CliState, ConfigOpt, VerboseFlag, WorkspaceOpt
from thandie.config import AppConfigSchema, ConfigError, ConfigLoader
from thandie.utils.cli_utils import exit_with_error, show_warning
from thandie.utils.directory_manager import DirectoryManager
from thandie.utils.log_setup import log_environment_info, setup_logging

from .cache_cmd import register_command as register_cache_command
from .init_cmd import register_command as register_init_command
from .list_cmd import register_command as register_list_command
from .scan_cmd import register_command as register_scan_command

logger = logging.getLogger(__name__)

# Try to load from .env.local first, then fall back to .env
env_local = Path(".env.local")
if env_local.exists():
	load_dotenv(dotenv_path=env_local)
	logger.debug("Loaded environment variables from %s", env_local)
else:
	env_file = Path(".env")
	if env_file.exists():
		load_dotenv(dotenv_path=env_file)
		logger.debug("Loaded environment variables from %s", env_file)

# Initialize the main CLI app
app = typer.Typer(
	help=f"Thandie - Workspace scanner for git repositories\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)

# --- Global Options Callback ---


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"Thandie version: {__version__}")
		raise typer.Exit


def _load_config(ctx: typer.Context, config_file: Path | None) -> ConfigLoader | None:
	"""Load the configuration; a broken file only stops commands other than init."""
	try:
		return ConfigLoader(config_file=config_file)
	except ConfigError as e:
		if ctx.invoked_subcommand == "init":
			show_warning(f"Ignoring current configuration: {e}")
			return None
		exit_with_error("Failed to load configuration", exception=e)
		return None


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	workspace: WorkspaceOpt = None,
	config_file: ConfigOpt = None,
	is_verbose: VerboseFlag = False,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options, configuration and logging setup."""
	loader = _load_config(ctx, config_file)
	config = loader.get if loader is not None else AppConfigSchema()

	log_file_path = DirectoryManager().get_log_file_path() if config.logging.to_file else None
	setup_logging(
		level=config.logging.level,
		is_verbose=is_verbose,
		log_file_path=log_file_path,
		json_output=config.logging.json_output,
	)
	log_environment_info()

	ctx.obj = CliState(
		config=config,
		config_flag=config_file,
		loaded_from=loader.config_file if loader is not None else None,
		workspace_flag=workspace,
		is_verbose=is_verbose,
	)


# --- Register commands ---

register_scan_command(app)
register_list_command(app)
register_init_command(app)
register_cache_command(app)


# --- Main Entry Point ---
def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
