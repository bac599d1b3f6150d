"""Implementation of the init command with an interactive configuration wizard."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import questionary
import typer
from rich.panel import Panel

from thandie.cli.cli_types import get_state
from thandie.config import (
	DEFAULT_IGNORE_DIRS,
	LOCAL_CONFIG_FILE,
	AppConfigSchema,
	ConfigLoader,
	LoggingSchema,
	ScannerSchema,
	WorkspaceSchema,
	default_config_path,
)
from thandie.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt

if TYPE_CHECKING:
	from thandie.cli.cli_types import CliState

logger = logging.getLogger(__name__)

LOG_LEVEL_CHOICES = ["debug", "info", "warning", "error"]

ForceFlag = Annotated[
	bool,
	typer.Option(
		"--force",
		"-f",
		help="Overwrite an existing config file without asking",
	),
]


def _ask(question: Any) -> Any:  # noqa: ANN401
	"""Ask a questionary question, treating an aborted prompt as Ctrl+C."""
	answer = question.ask()
	if answer is None:
		handle_keyboard_interrupt()
	return answer


def _target_config_path(state: CliState) -> Path:
	"""Pick the file to write: the one in effect, or the per-user default."""
	if state.config_flag is not None:
		return state.config_flag
	if state.loaded_from is not None:
		return state.loaded_from
	# A local file that failed to load still shadows the per-user file
	local_config = Path(LOCAL_CONFIG_FILE)
	if local_config.exists():
		return local_config
	return default_config_path()


def _split_names(text: str) -> list[str]:
	return [name.strip() for name in text.split(",") if name.strip()]


def run_config_wizard(state: CliState) -> AppConfigSchema:
	"""
	Ask the user for every configuration value.

	Current values (from the loaded config file or defaults) are offered as
	the default answers.

	Args:
		state: CLI state holding the current configuration

	Returns:
		The new configuration

	"""
	current = state.config

	console.print("\n[bold blue]Workspace[/bold blue]")
	workspace = _ask(
		questionary.path(
			"Workspace root to scan:",
			default=current.workspace.default or state.workspace_path(),
			only_directories=True,
		)
	)

	console.print("\n[bold blue]Scanner[/bold blue]")
	include_hidden = _ask(
		questionary.confirm(
			"Scan directories whose name starts with a dot?",
			default=current.scanner.include_hidden,
		)
	)
	ignore_dirs = _ask(
		questionary.text(
			"Directory names to skip (comma-separated):",
			default=", ".join(current.scanner.ignore_dirs or DEFAULT_IGNORE_DIRS),
		)
	)

	console.print("\n[bold blue]Logging[/bold blue]")
	current_level = "warning" if current.logging.level == "warn" else current.logging.level
	level = _ask(
		questionary.select(
			"Log level:",
			choices=LOG_LEVEL_CHOICES,
			default=current_level,
		)
	)
	to_file = _ask(
		questionary.confirm(
			"Also write logs to the user log directory?",
			default=current.logging.to_file,
		)
	)

	return AppConfigSchema(
		workspace=WorkspaceSchema(default=workspace.strip(), profiles=current.workspace.profiles),
		scanner=ScannerSchema(include_hidden=include_hidden, ignore_dirs=_split_names(ignore_dirs)),
		logging=LoggingSchema(level=level, to_file=to_file, json_output=current.logging.json_output),
	)


def register_command(app: typer.Typer) -> None:
	"""Register the init command with the CLI app."""

	@app.command(name="init")
	def init_command(ctx: typer.Context, force: ForceFlag = False) -> None:
		"""Create or update the Thandie configuration file interactively."""
		state = get_state(ctx)
		config_path = _target_config_path(state)

		if config_path.exists() and not force:
			should_reconfigure = _ask(
				questionary.confirm(
					f"Configuration already exists at {config_path}. Reconfigure?",
					default=False,
				)
			)
			if not should_reconfigure:
				console.print("[yellow]Configuration left unchanged.[/yellow]")
				return

		config = run_config_wizard(state)

		try:
			ConfigLoader.write_config(config_path, config)
		except OSError as e:
			exit_with_error(f"Failed to write configuration to {config_path}", exception=e)

		console.print(
			Panel(
				f"Configuration written to [bold]{config_path}[/bold]\n"
				"Run [cyan]thandie scan[/cyan] to scan your workspace.",
				title="Thandie initialized",
				border_style="green",
			)
		)
