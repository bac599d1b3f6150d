"""
Configuration loader for Thandie.

This module provides functionality for loading the YAML configuration file
and resolving the workspace root from flags, environment and configuration.

"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from thandie.config.config_schema import AppConfigSchema

if TYPE_CHECKING:
	from collections.abc import Mapping

logger = logging.getLogger(__name__)

APP_DIR_NAME = "thandie"
CONFIG_FILE_NAME = "config.yml"
LOCAL_CONFIG_FILE = ".thandie.yml"
WORKSPACE_ENV_VAR = "THANDIE_WORKSPACE"
DEFAULT_WORKSPACE_DIR = "Workspace"


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigFileNotFoundError(ConfigError):
	"""Exception raised when configuration file is not found."""


class ConfigParsingError(ConfigError):
	"""Exception raised when configuration file cannot be parsed."""


def default_config_path() -> Path:
	"""Return the per-user configuration file path."""
	return Path(xdg_config_home) / APP_DIR_NAME / CONFIG_FILE_NAME


class ConfigLoader:
	"""
	Loads the Thandie configuration into an :class:`AppConfigSchema`.

	The configuration is loaded once at construction and exposed through
	:attr:`get`; callers pass the loader (or the schema) explicitly to the
	code that needs it.

	"""

	def __init__(self, config_file: Path | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
			config_file: Path to configuration file (optional)

		Raises:
			ConfigFileNotFoundError: If ``config_file`` is given but does not exist
			ConfigParsingError: If the configuration file cannot be parsed

		"""
		self._config_file = config_file
		self._resolved_config_file = self._resolve_config_file(config_file)
		self._app_config = self._load_config()
		logger.debug("ConfigLoader initialized from %s", self._resolved_config_file or "defaults")

	@property
	def config_file(self) -> Path | None:
		"""Configuration file in use, or None when running on defaults."""
		return self._resolved_config_file

	@property
	def get(self) -> AppConfigSchema:
		"""
		Get the current application configuration.

		Returns:
			AppConfigSchema: The current configuration
		"""
		return self._app_config

	@staticmethod
	def _resolve_config_file(config_file: Path | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. ./.thandie.yml in the current directory
		2. $XDG_CONFIG_HOME/thandie/config.yml
		3. ~/.config/thandie/config.yml (fallback if XDG_CONFIG_HOME points elsewhere)

		Args:
			config_file: Explicitly provided config file path (optional)

		Returns:
			Optional[Path]: Resolved config file path or None if no suitable file found

		Raises:
			ConfigFileNotFoundError: If the explicitly provided file does not exist

		"""
		if config_file:
			path = config_file.expanduser().resolve()
			if not path.exists():
				msg = f"Config file not found: {path}"
				raise ConfigFileNotFoundError(msg)
			return path

		local_config = Path(LOCAL_CONFIG_FILE)
		if local_config.exists():
			return local_config

		xdg_config_file = default_config_path()
		if xdg_config_file.exists():
			return xdg_config_file

		home_config = Path.home() / ".config" / APP_DIR_NAME / CONFIG_FILE_NAME
		if home_config.exists():
			return home_config

		return None

	@staticmethod
	def _parse_yaml_file(file_path: Path) -> dict[str, Any]:
		"""
		Parse a YAML file into a dictionary.

		Args:
			file_path: Path to the YAML file to parse

		Returns:
			Parsed YAML content as a dictionary

		Raises:
			yaml.YAMLError: If the file cannot be parsed as valid YAML
		"""
		with file_path.open(encoding="utf-8") as f:
			content = yaml.safe_load(f)
			if content is None:  # Empty file
				return {}
			if not isinstance(content, dict):
				msg = f"File {file_path} does not contain a valid YAML dictionary"
				raise yaml.YAMLError(msg)
			return content

	def _load_config(self) -> AppConfigSchema:
		"""
		Load configuration from file and parse it into AppConfigSchema.

		Returns:
			AppConfigSchema: Loaded and parsed configuration.

		Raises:
			ConfigParsingError: If configuration file exists but cannot be loaded or parsed.

		"""
		file_config_dict: dict[str, Any] = {}
		if self._resolved_config_file:
			try:
				file_config_dict = self._parse_yaml_file(self._resolved_config_file)
				logger.info("Loaded configuration from %s", self._resolved_config_file)
			except yaml.YAMLError as e:
				msg = f"Configuration file {self._resolved_config_file} is not valid YAML: {e}"
				logger.exception(msg)
				raise ConfigParsingError(msg) from e
			except OSError as e:
				msg = f"Error accessing configuration file {self._resolved_config_file}: {e}"
				logger.exception(msg)
				raise ConfigParsingError(msg) from e
		else:
			logger.info("No configuration file specified or found. Using default configuration.")

		try:
			return AppConfigSchema(**file_config_dict)
		except ValidationError as e:
			msg = f"Error parsing configuration into schema: {e}"
			logger.exception(msg)
			raise ConfigParsingError(msg) from e

	@staticmethod
	def write_config(path: Path, config: AppConfigSchema) -> Path:
		"""
		Write a configuration to a YAML file, creating parent directories.

		Args:
			path: Destination file
			config: Configuration to write

		Returns:
			The written path

		"""
		path.parent.mkdir(parents=True, exist_ok=True)
		with path.open("w", encoding="utf-8") as f:
			yaml.safe_dump(config.model_dump(by_alias=True), f, sort_keys=False)
		logger.info("Wrote configuration to %s", path)
		return path


def resolve_workspace_path(
	flag_value: str | Path | None,
	config: AppConfigSchema | None = None,
	environ: Mapping[str, str] | None = None,
) -> str:
	"""
	Resolve the workspace root.

	Precedence:
	1. The ``--workspace`` flag
	2. The ``THANDIE_WORKSPACE`` environment variable
	3. ``workspace.default`` from the configuration file
	4. ``~/Workspace`` (or the current directory if the home directory is unknown)

	Args:
		flag_value: Value of the command-line flag, if given
		config: Loaded configuration
		environ: Environment to read (default: ``os.environ``)

	Returns:
		The workspace root, with ``~`` expanded

	"""
	environ = os.environ if environ is None else environ

	if flag_value:
		return os.path.expanduser(os.fspath(flag_value))

	env_path = environ.get(WORKSPACE_ENV_VAR, "")
	if env_path:
		return os.path.expanduser(env_path)

	if config is not None and config.workspace.default:
		return os.path.expanduser(config.workspace.default)

	try:
		return str(Path.home() / DEFAULT_WORKSPACE_DIR)
	except RuntimeError:
		return "."
