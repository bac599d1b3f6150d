"""Persistent cache of workspace scan results."""

from thandie.cache.errors import (
	CacheDecodeError,
	CacheError,
	CacheNotFoundError,
	CacheReadError,
	CacheWriteError,
)
from thandie.cache.result_cache import CacheEntry, ResultCache, cache_key

__all__ = [
	"CacheDecodeError",
	"CacheEntry",
	"CacheError",
	"CacheNotFoundError",
	"CacheReadError",
	"CacheWriteError",
	"ResultCache",
	"cache_key",
]
