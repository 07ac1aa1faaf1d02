"""File search over the Drive folder hierarchy."""

from .models import (
    MAX_PAGE_SIZE,
    FileOwner,
    SearchFile,
    SearchRequest,
    SearchResponse,
    SearchStats,
)
from .orchestrator import SearchOrchestrator, dedupe_and_sort
from .paths import MAX_PATH_DEPTH, PathResolver
from .query import build_search_query

__all__ = [
    "MAX_PAGE_SIZE",
    "MAX_PATH_DEPTH",
    "FileOwner",
    "PathResolver",
    "SearchFile",
    "SearchOrchestrator",
    "SearchRequest",
    "SearchResponse",
    "SearchStats",
    "build_search_query",
    "dedupe_and_sort",
]
