"""Errors raised by the result cache."""


class CacheError(Exception):
	"""Base exception for result cache failures."""


class CacheNotFoundError(CacheError):
	"""No cached result exists for a workspace."""


class CacheReadError(CacheError):
	"""A cache entry exists but could not be read."""


class CacheDecodeError(CacheError):
	"""A cache entry could not be decoded."""


class CacheWriteError(CacheError):
	"""A cache entry could not be written."""
