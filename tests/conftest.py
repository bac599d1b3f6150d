"""Global test fixtures and configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
	"""Undo handler and level changes made to the root logger by a test."""
	root_logger = logging.getLogger()
	handlers = [handler for handler in root_logger.handlers if not _is_pytest_handler(handler)]
	level = root_logger.level
	yield
	for handler in root_logger.handlers[:]:
		if handler not in handlers and not _is_pytest_handler(handler):
			root_logger.removeHandler(handler)
			handler.close()
	for handler in handlers:
		if handler not in root_logger.handlers:
			root_logger.addHandler(handler)
	root_logger.setLevel(level)


def _is_pytest_handler(handler: logging.Handler) -> bool:
	return type(handler).__module__.startswith("_pytest")


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
	"""
	Point every per-user location Thandie touches into ``tmp_path``.

	The working directory is an empty ``cwd`` directory, so no local
	``.thandie.yml`` is picked up.

	"""
	home = tmp_path / "home"
	cwd = tmp_path / "cwd"
	home.mkdir()
	cwd.mkdir()
	monkeypatch.setenv("HOME", str(home))
	monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
	monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))
	monkeypatch.delenv("THANDIE_WORKSPACE", raising=False)
	monkeypatch.chdir(cwd)
	with patch("thandie.config.config_loader.xdg_config_home", str(tmp_path / "xdg-config")):
		yield tmp_path


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
	"""An empty workspace root."""
	root = tmp_path / "workspace"
	root.mkdir()
	return root
