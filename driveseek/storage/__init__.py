"""Persistent storage for the folder tree cache."""

from .folder_cache import (
    CACHE_FILE_NAME,
    CACHE_TTL,
    CACHE_VERSION,
    METADATA_FILE_NAME,
    CachedFolder,
    CacheMetadata,
    CacheStats,
    FolderTreeCache,
)

__all__ = [
    "CACHE_FILE_NAME",
    "CACHE_TTL",
    "CACHE_VERSION",
    "METADATA_FILE_NAME",
    "CachedFolder",
    "CacheMetadata",
    "CacheStats",
    "FolderTreeCache",
]
