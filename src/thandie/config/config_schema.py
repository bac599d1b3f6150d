"""Schemas for the Thandie configuration file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_IGNORE_DIRS = [".git", "node_modules", "vendor"]


class WorkspaceProfileSchema(BaseModel):
	"""A named workspace root."""

	name: str
	path: str
	tags: list[str] = Field(default_factory=list)


class WorkspaceSchema(BaseModel):
	"""Workspace settings."""

	default: str = ""
	"""Workspace root used when no flag or environment variable is given."""

	profiles: list[WorkspaceProfileSchema] = Field(default_factory=list)


class ScannerSchema(BaseModel):
	"""Scanner settings."""

	include_hidden: bool = False
	ignore_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE_DIRS))

	@field_validator("ignore_dirs", mode="before")
	@classmethod
	def _none_means_empty(cls, value: object) -> object:
		return [] if value is None else value


class LoggingSchema(BaseModel):
	"""Logging settings."""

	model_config = ConfigDict(populate_by_name=True)

	level: Literal["debug", "info", "warn", "warning", "error"] = "info"
	to_file: bool = False
	json_output: bool = Field(default=False, alias="json")

	@field_validator("level", mode="before")
	@classmethod
	def _lowercase_level(cls, value: object) -> object:
		return value.lower() if isinstance(value, str) else value


class AppConfigSchema(BaseModel):
	"""Root of the configuration file."""

	version: int = 1
	workspace: WorkspaceSchema = Field(default_factory=WorkspaceSchema)
	scanner: ScannerSchema = Field(default_factory=ScannerSchema)
	logging: LoggingSchema = Field(default_factory=LoggingSchema)
