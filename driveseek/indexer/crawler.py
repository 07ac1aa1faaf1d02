"""Breadth-first crawler that materializes the folder tree cache."""

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from driveseek.drive import FOLDER_MIME_TYPE, DriveClient
from driveseek.storage import CACHE_VERSION, CachedFolder, CacheMetadata, FolderTreeCache

from .freshness import CacheDecision, decide

logger = logging.getLogger(__name__)

# Folders listed concurrently per batch
BATCH_SIZE = 10

# Page size for child folder listings
LIST_PAGE_SIZE = 1000

CHILD_FOLDER_FIELDS = "nextPageToken, files(id, name, modifiedTime, parents)"


def folder_children_query(folder_id: str) -> str:
    """Query matching the non-trashed direct child folders of a folder."""
    return f"'{folder_id}' in parents and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"


def child_path(parent_path: str, name: str) -> str:
    if parent_path == "/":
        return f"/{name}"
    return f"{parent_path}/{name}"


@dataclass
class CrawlProgress:
    """Progress report emitted after each batch or patched folder."""

    message: str
    progress: float
    folders_processed: int = 0


@dataclass
class CrawlResult:
    """Outcome of a full crawl."""

    folder_ids: list[str] = field(default_factory=list)
    incomplete: bool = False


@dataclass
class _QueuedFolder:
    id: str
    path: str
    name: str
    parent_id: str | None = None
    modified_time: str = ""


class FolderCrawler:
    """Walks the remote hierarchy and writes it into a FolderTreeCache."""

    def __init__(
        self,
        client: DriveClient,
        cache: FolderTreeCache,
        batch_size: int = BATCH_SIZE,
        max_folders: int | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.batch_size = max(1, batch_size)
        self.max_folders = max_folders
        self.last_crawl_incomplete = False

    async def ensure_structure(
        self,
        root_folder_id: str,
        on_progress: Callable[[CrawlProgress], None] | None = None,
        now: float | None = None,
    ) -> list[str]:
        """Return every folder ID under the root, rebuilding the cache if stale."""
        decision = decide(self.cache.metadata, len(self.cache), root_folder_id, now=now)
        if decision is CacheDecision.REUSE:
            logger.info("Using cached directory structure")
            self.last_crawl_incomplete = False
            return self.cache.all_ids()

        logger.info("Building fresh directory structure...")
        result = await self.crawl(root_folder_id, on_progress)
        return result.folder_ids

    async def crawl(
        self,
        root_folder_id: str,
        on_progress: Callable[[CrawlProgress], None] | None = None,
    ) -> CrawlResult:
        """Rebuild the whole cache from the remote tree under root_folder_id.

        Args:
            root_folder_id: Folder whose subtree is mirrored. It becomes the "/" path.
            on_progress: Optional callback invoked after each listed batch.

        Returns:
            CrawlResult with the visited folder IDs in breadth-first order, and
            incomplete set when the folder budget stopped the walk early.
        """
        root = await self._root_entry(root_folder_id)
        queue: deque[_QueuedFolder] = deque([root])
        seen = {root_folder_id}
        folders: list[CachedFolder] = []
        incomplete = False

        while queue:
            if self.max_folders is not None and len(folders) >= self.max_folders:
                logger.warning(
                    f"Folder budget of {self.max_folders} reached, "
                    f"{len(queue)} folders left unvisited"
                )
                incomplete = True
                break

            batch_size = min(self.batch_size, len(queue))
            if self.max_folders is not None:
                batch_size = min(batch_size, self.max_folders - len(folders))
            batch = [queue.popleft() for _ in range(batch_size)]
            listings = await asyncio.gather(*(self._list_children(item.id) for item in batch))

            for item, children in zip(batch, listings):
                folders.append(
                    CachedFolder(
                        id=item.id,
                        name=item.name,
                        path=item.path,
                        parent_id=item.parent_id,
                        children=[c["id"] for c in children],
                        last_updated=_now(),
                        modified_time=item.modified_time,
                    )
                )
                for child in children:
                    if child["id"] in seen:
                        logger.warning(f"Folder {child['id']} already visited, skipping")
                        continue
                    seen.add(child["id"])
                    name = child.get("name") or "Unknown"
                    queue.append(
                        _QueuedFolder(
                            id=child["id"],
                            path=child_path(item.path, name),
                            name=name,
                            parent_id=item.id,
                            modified_time=child.get("modifiedTime", ""),
                        )
                    )

            if on_progress:
                processed = len(folders)
                on_progress(
                    CrawlProgress(
                        message=f"Processing directories... ({processed} folders processed)",
                        progress=min(processed / max(processed + len(queue), 1) * 100, 99),
                        folders_processed=processed,
                    )
                )

        # A truncated tree is kept but stamped as never synced, so the next
        # freshness check rebuilds it
        metadata = CacheMetadata(
            root_folder_id=root_folder_id,
            last_full_sync=0.0 if incomplete else _now(),
            version=CACHE_VERSION,
            total_folders=len(folders),
        )
        self.cache.replace(folders, metadata)
        self.cache.save()
        self.last_crawl_incomplete = incomplete

        logger.info(f"Crawled {len(folders)} folders under {root_folder_id}")
        return CrawlResult(folder_ids=[f.id for f in folders], incomplete=incomplete)

    async def incremental_update(
        self,
        folder_ids: list[str],
        on_progress: Callable[[CrawlProgress], None] | None = None,
    ) -> int:
        """Re-list the children of known folders without touching anything else.

        Returns the number of folders updated.
        """
        logger.info(f"Performing incremental update for {len(folder_ids)} folders")
        updated = 0

        for i, folder_id in enumerate(folder_ids):
            cached = self.cache.get(folder_id) if folder_id else None
            if cached is None:
                continue

            try:
                children = await self._fetch_children(folder_id)
            except Exception as e:
                logger.warning(f"Failed to update folder {folder_id}: {e}")
                continue

            cached.children = [c["id"] for c in children]
            cached.last_updated = _now()
            updated += 1

            if on_progress:
                on_progress(
                    CrawlProgress(
                        message=f"Updating folder {i + 1}/{len(folder_ids)}",
                        progress=(i + 1) / len(folder_ids) * 100,
                        folders_processed=updated,
                    )
                )

        self.cache.save()
        return updated

    async def _root_entry(self, root_folder_id: str) -> _QueuedFolder:
        try:
            info = await self.client.get_file(root_folder_id, "id, name, modifiedTime")
        except Exception as e:
            logger.warning(f"Could not fetch root folder {root_folder_id}: {e}")
            info = {}
        return _QueuedFolder(
            id=root_folder_id,
            path="/",
            name=info.get("name") or "Root",
            modified_time=info.get("modifiedTime", ""),
        )

    async def _list_children(self, folder_id: str) -> list[dict]:
        """List child folders, treating a failure as an empty folder."""
        try:
            return await self._fetch_children(folder_id)
        except Exception as e:
            logger.warning(f"Failed to process folder {folder_id}: {e}")
            return []

    async def _fetch_children(self, folder_id: str) -> list[dict]:
        children: list[dict] = []
        page_token = None
        while True:
            response = await self.client.list_files(
                folder_children_query(folder_id),
                CHILD_FOLDER_FIELDS,
                LIST_PAGE_SIZE,
                page_token=page_token,
            )
            children.extend(f for f in response.get("files", []) if f.get("id"))
            page_token = response.get("nextPageToken")
            if not page_token:
                return children


def _now() -> float:
    return datetime.now(UTC).timestamp()
