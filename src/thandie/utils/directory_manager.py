"""
Directory management utilities for Thandie.

This module resolves the per-user directories Thandie stores its scan
cache and log files in, across different operating systems.

"""

from __future__ import annotations

import logging
from pathlib import Path

import platformdirs

logger = logging.getLogger(__name__)

# Application name and author for platformdirs
APP_NAME = "thandie"
APP_AUTHOR = "thandie"

LOG_FILE_NAME = "thandie.log"


class DirectoryManager:
	"""Manages Thandie directory structure and operations."""

	def __init__(self) -> None:
		"""Initialize the directory manager."""
		self.user_cache_dir = Path(platformdirs.user_cache_dir(APP_NAME, APP_AUTHOR))
		self.user_log_dir = Path(platformdirs.user_log_dir(APP_NAME, APP_AUTHOR))

	def get_log_file_path(self, name: str | None = None) -> Path:
		"""
		Get the path to a log file.

		Args:
		    name: Specific name for the log file (default: thandie.log)

		Returns:
		    Path to the log file

		"""
		return self.logs_dir / (name or LOG_FILE_NAME)

	@property
	def cache_dir(self) -> Path:
		"""Get the scan cache directory."""
		return self.user_cache_dir / "cache"

	@property
	def logs_dir(self) -> Path:
		"""Get the logs directory."""
		return self.user_log_dir
