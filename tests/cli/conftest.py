"""Shared fixtures for the command-line interface tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from tests.git_helpers import make_committed_repo, write_file

if TYPE_CHECKING:
	from pathlib import Path


@pytest.fixture
def runner() -> CliRunner:
	"""CLI runner."""
	return CliRunner()


@pytest.fixture
def scan_workspace_dir(isolated_env: Path) -> Path:
	"""A workspace with a clean repository, a dirty repository and a plain directory."""
	root = isolated_env / "ws"
	make_committed_repo(root / "alpha", remotes={"origin": "https://example.com/alpha.git"})
	make_committed_repo(root / "gamma")
	write_file(root / "gamma", "todo.txt")
	(root / "beta").mkdir()
	(root / "node_modules").mkdir()
	return root
