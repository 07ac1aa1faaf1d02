"""Scoped and global file search across Drive folders."""

import asyncio
import logging
import time
from collections import deque
from datetime import datetime

from driveseek.drive import DriveClient
from driveseek.indexer import FolderCrawler, folder_children_query

from .models import SearchFile, SearchRequest, SearchResponse, SearchStats
from .paths import PathResolver
from .query import build_search_query

logger = logging.getLogger(__name__)

FILE_FIELDS = (
    "nextPageToken, incompleteSearch, files(id, name, mimeType, size, modifiedTime, "
    "createdTime, webViewLink, iconLink, owners(displayName, emailAddress), parents)"
)
DISCOVERY_FIELDS = "nextPageToken, files(id, name, parents)"

# Page size used when discovering subfolders live
DISCOVERY_PAGE_SIZE = 100

# Per-folder cap on a single list call
FOLDER_PAGE_SIZE = 50

ORDER_BY = "modifiedTime desc"


def modified_timestamp(data: dict) -> float:
    """Sort key for raw file records; missing or bad timestamps count as epoch."""
    value = data.get("modifiedTime")
    if not value:
        return 0.0
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0


def dedupe_and_sort(files: list[dict]) -> list[dict]:
    """Drop repeated file IDs, keeping the first, then sort newest first.

    The sort is stable, so ties keep discovery order.
    """
    seen: set[str] = set()
    unique = []
    for f in files:
        if f.get("id") in seen:
            continue
        seen.add(f.get("id"))
        unique.append(f)
    return sorted(unique, key=modified_timestamp, reverse=True)


class SearchOrchestrator:
    """Runs a search request over a scope root's folders or the whole drive.

    With a crawler, the candidate folders come from the folder tree cache;
    without one they are discovered live with a breadth-first listing.
    """

    def __init__(
        self,
        client: DriveClient,
        root_folder_id: str | None = None,
        crawler: FolderCrawler | None = None,
    ) -> None:
        self.client = client
        self.root_folder_id = root_folder_id
        self.crawler = crawler

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Run one search and return a single page of results.

        Remote failures for individual folders are logged and skipped, so a
        result page is always returned.

        Args:
            request: Query text plus filters and paging.

        Returns:
            SearchResponse with files newest first, each carrying its folder path.
            incomplete_search is set when the page filled before every folder was
            searched or when the folder tree was cut short by the crawl budget.
        """
        start = time.monotonic()
        max_results = request.effective_page_size
        resolver = PathResolver(self.client, stop_at=self.root_folder_id)

        folder_ids: list[str] = []
        if self.root_folder_id:
            folder_ids = await self._candidate_folders(request.recursive, resolver)
        truncated_tree = (
            bool(folder_ids)
            and request.recursive
            and self.crawler is not None
            and self.crawler.last_crawl_incomplete
        )

        found: list[dict] = []
        folders_searched = 0
        next_page_token = None

        if folder_ids:
            for folder_id in folder_ids:
                if len(found) >= max_results:
                    break
                folders_searched += 1
                found.extend(await self._search_folder(request, folder_id, max_results - len(found)))
        else:
            folders_searched = 1
            found, next_page_token = await self._search_global(request, max_results)

        unique = dedupe_and_sort(found)
        page = unique[:max_results]

        paths = await asyncio.gather(*(resolver.resolve(f.get("parents")) for f in page))
        files = [SearchFile.from_api(data, path) for data, path in zip(page, paths)]

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            f"Search '{request.query}' found {len(unique)} files "
            f"in {folders_searched} folders ({duration_ms} ms)"
        )

        return SearchResponse(
            files=files,
            next_page_token=next_page_token,
            incomplete_search=truncated_tree or (bool(folder_ids) and len(found) >= max_results),
            search_stats=SearchStats(
                total_found=len(unique),
                folders_searched=folders_searched,
                search_duration_ms=duration_ms,
            ),
        )

    async def _candidate_folders(self, recursive: bool, resolver: PathResolver) -> list[str]:
        root = self.root_folder_id
        if not recursive:
            return [root]

        if self.crawler is not None:
            folder_ids = await self.crawler.ensure_structure(root)
            for folder_id in folder_ids:
                cached = self.crawler.cache.get(folder_id)
                if cached and folder_id != root:
                    parents = [cached.parent_id] if cached.parent_id else []
                    resolver.remember(folder_id, cached.name, parents)
            return folder_ids or [root]

        return await self._discover_folders(root, resolver)

    async def _discover_folders(self, root: str, resolver: PathResolver) -> list[str]:
        """Breadth-first listing of every folder under root, root first."""
        folder_ids = [root]
        seen = {root}
        queue = deque([root])

        while queue:
            parent_id = queue.popleft()
            page_token = None
            while True:
                try:
                    response = await self.client.list_files(
                        folder_children_query(parent_id),
                        DISCOVERY_FIELDS,
                        DISCOVERY_PAGE_SIZE,
                        page_token=page_token,
                    )
                except Exception as e:
                    logger.warning(f"Failed to get subfolders for {parent_id}: {e}")
                    break

                for folder in response.get("files", []):
                    folder_id = folder.get("id")
                    if not folder_id or folder_id in seen:
                        continue
                    seen.add(folder_id)
                    resolver.remember(folder_id, folder.get("name") or "Unknown", folder.get("parents"))
                    folder_ids.append(folder_id)
                    queue.append(folder_id)

                page_token = response.get("nextPageToken")
                if not page_token:
                    break

        return folder_ids

    async def _search_folder(self, request: SearchRequest, folder_id: str, remaining: int) -> list[dict]:
        query = build_search_query(
            request.query,
            mime_type=request.mime_type,
            folder_id=folder_id,
            name_only=request.name_only,
            modified_since=request.modified_since,
            file_types=request.file_types,
        )
        try:
            response = await self.client.list_files(
                query,
                FILE_FIELDS,
                min(remaining, FOLDER_PAGE_SIZE),
                order_by=ORDER_BY,
            )
        except Exception as e:
            logger.warning(f"Search failed for folder {folder_id}: {e}")
            return []
        return response.get("files", [])

    async def _search_global(self, request: SearchRequest, max_results: int) -> tuple[list[dict], str | None]:
        query = build_search_query(
            request.query,
            mime_type=request.mime_type,
            name_only=request.name_only,
            modified_since=request.modified_since,
            file_types=request.file_types,
        )
        try:
            response = await self.client.list_files(
                query,
                FILE_FIELDS,
                max_results,
                page_token=request.page_token,
                order_by=ORDER_BY,
            )
        except Exception as e:
            logger.error(f"Global search failed: {e}")
            return [], None
        return response.get("files", []), response.get("nextPageToken")
