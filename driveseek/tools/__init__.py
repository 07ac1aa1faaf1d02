"""Agent-facing Drive tools."""

import logging

from openai import AsyncOpenAI

from driveseek.config import Settings
from driveseek.drive import DriveClient
from driveseek.errors import ConfigurationError
from driveseek.indexer import FolderCrawler
from driveseek.reader import FileContentExtractor, ProgressiveSummarizer
from driveseek.search import SearchOrchestrator
from driveseek.storage import FolderTreeCache

from .base import Tool, ToolRegistry, ToolResult
from .read import ReadFileTool
from .search import SearchFilesTool

logger = logging.getLogger(__name__)

__all__ = [
    "ReadFileTool",
    "SearchFilesTool",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "create_crawler",
    "create_tool_registry",
]


def create_crawler(settings: Settings, client: DriveClient) -> FolderCrawler:
    """Build a crawler over the persisted folder tree cache."""
    cache = FolderTreeCache(settings.cache_dir)
    cache.load()
    return FolderCrawler(client, cache)


def create_tool_registry(
    settings: Settings,
    client: DriveClient | None = None,
    openai_client: AsyncOpenAI | None = None,
) -> ToolRegistry:
    """Create a registry with the search and read tools.

    Raises:
        ConfigurationError: credentials or identifiers are missing
    """
    if not settings.google_service_account_key_path:
        raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_KEY_PATH is not set")
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY is not set")

    if client is None:
        client = DriveClient.from_service_account(settings.google_service_account_key_path)
    if openai_client is None:
        openai_client = AsyncOpenAI(api_key=settings.openai_api_key)

    root_folder_id = settings.google_drive_folder_id
    crawler = create_crawler(settings, client) if root_folder_id else None
    if not root_folder_id:
        logger.info("GOOGLE_DRIVE_FOLDER_ID is not set, searches will cover the whole drive")

    registry = ToolRegistry()
    registry.register(SearchFilesTool(SearchOrchestrator(client, root_folder_id, crawler)))
    registry.register(
        ReadFileTool(
            FileContentExtractor(client),
            ProgressiveSummarizer(openai_client, settings.openai_model),
        )
    )
    return registry
