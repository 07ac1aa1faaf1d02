"""Folder tree indexing - freshness policy and crawler."""

from .crawler import CrawlProgress, CrawlResult, FolderCrawler, folder_children_query
from .freshness import CacheDecision, decide

__all__ = [
    "CacheDecision",
    "CrawlProgress",
    "CrawlResult",
    "FolderCrawler",
    "decide",
    "folder_children_query",
]
