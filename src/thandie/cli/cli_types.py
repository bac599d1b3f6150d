"""Shared CLI state and parameter types."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from thandie.config import AppConfigSchema, resolve_workspace_path

WorkspaceOpt = Annotated[
	Path | None,
	typer.Option(
		"--workspace",
		"-w",
		help="Workspace root to use (overrides THANDIE_WORKSPACE and the config file).",
		file_okay=False,
		dir_okay=True,
	),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option(
		"--config",
		"-c",
		help="Path to config file",
		dir_okay=False,
	),
]

VerboseFlag = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]

YesFlag = Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")]


@dataclass
class CliState:
	"""State resolved by the global options and handed to every command."""

	config: AppConfigSchema
	config_flag: Path | None = None
	loaded_from: Path | None = None
	workspace_flag: Path | None = None
	is_verbose: bool = False

	def workspace_path(self) -> str:
		"""
		Resolve the workspace root as an absolute path.

		Scans and cache lookups both go through this method, so they agree on
		the cache key of a workspace.

		"""
		return os.path.abspath(resolve_workspace_path(self.workspace_flag, self.config))


def get_state(ctx: typer.Context) -> CliState:
	"""Return the CLI state stored by the global options callback."""
	state = ctx.find_object(CliState)
	if state is None:
		state = CliState(config=AppConfigSchema())
		ctx.obj = state
	return state
