"""Tests for the cache command group."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from thandie.cache import ResultCache
from thandie.cli import app

if TYPE_CHECKING:
	from pathlib import Path

	from typer.testing import CliRunner


@pytest.mark.cli
@pytest.mark.fs
class TestCacheCommand:
	"""Test cases for the cache command group."""

	def test_cache_path(self, runner: CliRunner, isolated_env: Path) -> None:
		"""The cache directory and the workspace entry are printed."""
		workspace = isolated_env / "ws"

		result = runner.invoke(app, ["-w", str(workspace), "cache", "path"])

		assert result.exit_code == 0, result.output
		assert str(ResultCache().cache_dir) in result.output
		assert "missing" in result.output

	def test_cache_clear(self, runner: CliRunner, isolated_env: Path) -> None:
		"""Clearing with --yes removes every entry."""
		ResultCache().save_paths("/ws/one", ["/ws/one/a"])
		ResultCache().save_paths("/ws/two", ["/ws/two/a"])

		result = runner.invoke(app, ["cache", "clear", "--yes"])

		assert result.exit_code == 0, result.output
		assert "Removed 2" in result.output
		assert not ResultCache().has("/ws/one")

	def test_cache_clear_declined(self, runner: CliRunner, isolated_env: Path) -> None:
		"""Declining the confirmation keeps the cache."""
		ResultCache().save_paths("/ws/one", ["/ws/one/a"])

		with patch("questionary.confirm") as mock_confirm:
			mock_confirm.return_value.ask.return_value = False
			result = runner.invoke(app, ["cache", "clear"])

		assert result.exit_code == 0, result.output
		assert ResultCache().has("/ws/one")
