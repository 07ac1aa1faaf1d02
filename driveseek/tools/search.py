"""Tool for searching files in Drive."""

from driveseek.drive.mime import FILE_TYPES
from driveseek.search import MAX_PAGE_SIZE, SearchOrchestrator, SearchRequest

from .base import Tool, ToolResult


class SearchFilesTool(Tool):
    """Search for files, recursing through the configured folder tree."""

    name = "search_files"
    description = (
        "Search for files in Google Drive using query terms with recursive folder traversal. "
        "Returns files newest first with their full folder path."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search query to find files (searches both filename and content)",
            },
            "pageToken": {
                "type": "string",
                "description": "Token for the next page of results (global search only; leave blank for first page)",
            },
            "pageSize": {
                "type": "integer",
                "description": f"Number of results per page (max {MAX_PAGE_SIZE}, default: 10)",
            },
            "mimeType": {
                "type": "string",
                "description": "Filter by MIME type (e.g., 'application/pdf', 'application/vnd.google-apps.document')",
            },
            "recursive": {
                "type": "boolean",
                "description": "Whether to search recursively in subfolders (default: true)",
            },
            "nameOnly": {
                "type": "boolean",
                "description": "Search only in file names, not content (faster and more reliable)",
            },
            "modifiedSince": {
                "type": "string",
                "description": "Only return files modified after this date (ISO format: YYYY-MM-DD)",
            },
            "fileTypes": {
                "type": "array",
                "items": {"type": "string", "enum": list(FILE_TYPES)},
                "description": "Filter by file types (more user-friendly than mimeType)",
            },
        },
        "required": ["query"],
    }

    def __init__(self, orchestrator: SearchOrchestrator) -> None:
        self.orchestrator = orchestrator

    async def execute(
        self,
        query: str,
        pageToken: str | None = None,
        pageSize: int = 10,
        mimeType: str | None = None,
        recursive: bool = True,
        nameOnly: bool = False,
        modifiedSince: str | None = None,
        fileTypes: list[str] | None = None,
    ) -> ToolResult:
        request = SearchRequest(
            query=query,
            mime_type=mimeType or None,
            file_types=fileTypes or None,
            modified_since=modifiedSince or None,
            recursive=recursive,
            name_only=nameOnly,
            page_size=pageSize,
            page_token=pageToken or None,
        )
        response = await self.orchestrator.search(request)
        stats = response.search_stats

        if not response.files:
            message = f"No files found for '{query}' ({stats.folders_searched} folders searched)"
        else:
            message = (
                f"Found {len(response.files)} files for '{query}' "
                f"({stats.folders_searched} folders searched)"
            )
            if response.incomplete_search:
                message += ", more results may exist"

        return ToolResult(success=True, data=response.to_dict(), message=message)
