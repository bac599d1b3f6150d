"""Configuration for Thandie."""

from thandie.config.config_loader import (
	LOCAL_CONFIG_FILE,
	ConfigError,
	ConfigFileNotFoundError,
	ConfigLoader,
	ConfigParsingError,
	default_config_path,
	resolve_workspace_path,
)
from thandie.config.config_schema import (
	DEFAULT_IGNORE_DIRS,
	AppConfigSchema,
	LoggingSchema,
	ScannerSchema,
	WorkspaceProfileSchema,
	WorkspaceSchema,
)

__all__ = [
	"LOCAL_CONFIG_FILE",
	"DEFAULT_IGNORE_DIRS",
	"AppConfigSchema",
	"ConfigError",
	"ConfigFileNotFoundError",
	"ConfigLoader",
	"ConfigParsingError",
	"LoggingSchema",
	"ScannerSchema",
	"WorkspaceProfileSchema",
	"WorkspaceSchema",
	"default_config_path",
	"resolve_workspace_path",
]
