"""Resolve display paths by walking parent folder links."""

import logging
from dataclasses import dataclass, field

from driveseek.drive import DriveClient

logger = logging.getLogger(__name__)

# Upper bound on parent hops, guards against cyclic or very deep chains
MAX_PATH_DEPTH = 20


@dataclass
class FolderInfo:
    name: str
    parents: list[str] = field(default_factory=list)


class PathResolver:
    """Builds '/A/B' style paths for files from their parent IDs.

    Folder lookups are memoized for the lifetime of the resolver, which is one
    search request. The walk stops at the scope root, which is not part of the
    path, at a folder with no parents, or after MAX_PATH_DEPTH hops.
    """

    def __init__(self, client: DriveClient, stop_at: str | None = None) -> None:
        self.client = client
        self.stop_at = stop_at
        self._folders: dict[str, FolderInfo] = {}

    def remember(self, folder_id: str, name: str, parents: list[str] | None = None) -> None:
        self._folders[folder_id] = FolderInfo(name=name, parents=list(parents or []))

    async def folder_info(self, folder_id: str) -> FolderInfo:
        info = self._folders.get(folder_id)
        if info is not None:
            return info

        try:
            data = await self.client.get_file(folder_id, "id, name, parents")
            info = FolderInfo(name=data.get("name") or "Unknown", parents=data.get("parents") or [])
        except Exception as e:
            logger.warning(f"Error fetching folder info for {folder_id}: {e}")
            info = FolderInfo(name="Unknown")

        self._folders[folder_id] = info
        return info

    async def resolve(self, parents: list[str] | None) -> str:
        parts: list[str] = []
        current = parents or []

        while current and len(parts) < MAX_PATH_DEPTH:
            parent_id = current[0]
            if not parent_id or parent_id == self.stop_at:
                break
            info = await self.folder_info(parent_id)
            parts.insert(0, info.name)
            current = info.parents

        return "/" + "/".join(parts)
