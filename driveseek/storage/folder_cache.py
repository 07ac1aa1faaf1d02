"""Persistent mirror of the remote folder tree."""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

CACHE_VERSION = "1.0"

# Seconds before a full rebuild is required
CACHE_TTL = 24 * 60 * 60

CACHE_FILE_NAME = "directory_structure.json"
METADATA_FILE_NAME = "cache_metadata.json"


@dataclass
class CachedFolder:
    """Mirrored state of one remote folder."""

    id: str
    name: str
    path: str
    parent_id: str | None = None
    children: list[str] = field(default_factory=list)
    last_updated: float = 0.0
    modified_time: str = ""

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "children": self.children,
            "lastUpdated": self.last_updated,
            "modifiedTime": self.modified_time,
        }
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CachedFolder":
        """Build a folder from its stored form.

        Raises:
            ValueError: If a field has the wrong type.
        """
        children = data.get("children", [])
        if not isinstance(children, list) or not all(isinstance(c, str) for c in children):
            raise ValueError(f"children must be a list of IDs, got {children!r}")
        parent_id = data.get("parentId")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "Unknown")),
            path=str(data.get("path", "")),
            parent_id=None if parent_id is None else str(parent_id),
            children=list(children),
            last_updated=float(data.get("lastUpdated", 0.0)),
            modified_time=str(data.get("modifiedTime", "")),
        )


@dataclass
class CacheMetadata:
    """Global state of the cache, replaced on every full rebuild."""

    root_folder_id: str
    last_full_sync: float
    version: str
    total_folders: int

    def to_dict(self) -> dict:
        return {
            "rootFolderId": self.root_folder_id,
            "lastFullSync": self.last_full_sync,
            "version": self.version,
            "totalFolders": self.total_folders,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CacheMetadata":
        """Build metadata from its stored form.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a field cannot be read as its type.
        """
        last_full_sync = data["lastFullSync"]
        if isinstance(last_full_sync, bool) or not isinstance(last_full_sync, (int, float)):
            raise ValueError(f"lastFullSync must be a timestamp, got {last_full_sync!r}")
        return cls(
            root_folder_id=str(data["rootFolderId"]),
            last_full_sync=float(last_full_sync),
            version=str(data["version"]),
            total_folders=int(data.get("totalFolders", 0)),
        )


@dataclass
class CacheStats:
    """Summary of the cache for display."""

    total_folders: int
    cache_age_seconds: float
    last_sync: datetime
    cache_size: str

    def to_dict(self) -> dict:
        return {
            "totalFolders": self.total_folders,
            "cacheAgeSeconds": self.cache_age_seconds,
            "lastSync": self.last_sync.isoformat(),
            "cacheSize": self.cache_size,
        }


class FolderTreeCache:
    """Folder map and metadata persisted as two JSON documents.

    Lookups never raise for unknown folders. Storage problems degrade to an
    empty cache on load and are logged on save.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir
        self.cache_file = cache_dir / CACHE_FILE_NAME
        self.metadata_file = cache_dir / METADATA_FILE_NAME
        self._folders: dict[str, CachedFolder] = {}
        self.metadata: CacheMetadata | None = None

    def __len__(self) -> int:
        return len(self._folders)

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self._folders

    def load(self) -> None:
        """Restore folders and metadata from disk."""
        folders_data = self._read_document(self.cache_file)
        metadata_data = self._read_document(self.metadata_file)

        folders: dict[str, CachedFolder] = {}
        for folder_id, data in folders_data.items():
            try:
                folders[folder_id] = CachedFolder.from_dict({"id": folder_id, **data})
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed cache entry {folder_id}: {e}")

        metadata = None
        if metadata_data.get("version"):
            try:
                metadata = CacheMetadata.from_dict(metadata_data)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Ignoring malformed cache metadata: {e}")

        self._folders = folders
        self.metadata = metadata
        logger.info(f"Loaded folder cache ({len(folders)} folders)")

    def _read_document(self, path: Path) -> dict:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to read {path.name}, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Unexpected content in {path.name}, starting empty")
            return {}
        return data

    def save(self) -> None:
        """Write folders and metadata to disk.

        Both documents are staged as temp files before either is replaced, so
        a failed write leaves the previous pair in place.
        """
        folders_data = {folder_id: f.to_dict() for folder_id, f in self._folders.items()}
        metadata_data = self.metadata.to_dict() if self.metadata else {}

        staged: list[tuple[Path, Path]] = []
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            for target, data in (
                (self.cache_file, folders_data),
                (self.metadata_file, metadata_data),
            ):
                tmp = target.with_suffix(target.suffix + ".tmp")
                tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
                staged.append((tmp, target))

            for tmp, target in staged:
                os.replace(tmp, target)
            logger.info(f"Saved folder cache to {self.cache_dir}")
        except OSError as e:
            logger.error(f"Failed to save folder cache: {e}")
            for tmp, _ in staged:
                tmp.unlink(missing_ok=True)

    def get(self, folder_id: str) -> CachedFolder | None:
        return self._folders.get(folder_id)

    def children(self, folder_id: str) -> list[str]:
        folder = self._folders.get(folder_id)
        return list(folder.children) if folder else []

    def path(self, folder_id: str) -> str:
        folder = self._folders.get(folder_id)
        return folder.path if folder else ""

    def all_ids(self) -> list[str]:
        """All folder IDs, in the order the crawl visited them."""
        return list(self._folders)

    def put(self, folder: CachedFolder) -> None:
        self._folders[folder.id] = folder

    def replace(self, folders: list[CachedFolder], metadata: CacheMetadata) -> None:
        """Swap in the result of a full rebuild."""
        self._folders = {f.id: f for f in folders}
        self.metadata = metadata

    def clear(self) -> None:
        """Drop in-memory state and delete the persisted documents."""
        self._folders = {}
        self.metadata = None
        for path in (self.cache_file, self.metadata_file):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Failed to delete {path}: {e}")

    def stats(self, now: float | None = None) -> CacheStats:
        now = datetime.now(UTC).timestamp() if now is None else now
        size = self.cache_file.stat().st_size if self.cache_file.exists() else 0

        if self.metadata:
            age = now - self.metadata.last_full_sync
            last_sync = datetime.fromtimestamp(self.metadata.last_full_sync, UTC)
        else:
            age = 0.0
            last_sync = datetime.fromtimestamp(0, UTC)

        return CacheStats(
            total_folders=len(self._folders),
            cache_age_seconds=age,
            last_sync=last_sync,
            cache_size=f"{size / 1024:.2f} KB",
        )
