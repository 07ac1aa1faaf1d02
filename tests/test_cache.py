"""Tests for the folder tree cache and freshness policy."""

import json
from pathlib import Path

from driveseek.indexer import CacheDecision, decide
from driveseek.storage import (
    CACHE_FILE_NAME,
    CACHE_TTL,
    CACHE_VERSION,
    METADATA_FILE_NAME,
    CachedFolder,
    CacheMetadata,
    FolderTreeCache,
)


def make_metadata(root: str = "R", synced: float = 1000.0, version: str = CACHE_VERSION) -> CacheMetadata:
    return CacheMetadata(root_folder_id=root, last_full_sync=synced, version=version, total_folders=2)


def populated_cache(cache_dir: Path) -> FolderTreeCache:
    cache = FolderTreeCache(cache_dir)
    cache.replace(
        [
            CachedFolder(id="R", name="Root", path="/", children=["A"], last_updated=1000.0),
            CachedFolder(
                id="A",
                name="Alpha",
                path="/Alpha",
                parent_id="R",
                last_updated=1000.0,
                modified_time="2024-01-01T00:00:00.000Z",
            ),
        ],
        make_metadata(),
    )
    return cache


class TestCachedFolder:
    """Tests for CachedFolder serialization."""

    def test_to_dict_uses_camel_case(self):
        folder = CachedFolder(id="A", name="Alpha", path="/Alpha", parent_id="R", last_updated=5.0)
        data = folder.to_dict()
        assert data["parentId"] == "R"
        assert data["lastUpdated"] == 5.0
        assert "parent_id" not in data

    def test_root_has_no_parent_key(self):
        data = CachedFolder(id="R", name="Root", path="/").to_dict()
        assert "parentId" not in data

    def test_from_dict(self):
        folder = CachedFolder.from_dict(
            {"id": "A", "name": "Alpha", "path": "/Alpha", "parentId": "R", "children": ["B"]}
        )
        assert folder.parent_id == "R"
        assert folder.children == ["B"]
        assert folder.modified_time == ""


class TestFolderTreeCache:
    """Tests for FolderTreeCache."""

    def test_save_and_load(self, cache_dir: Path):
        populated_cache(cache_dir).save()

        cache = FolderTreeCache(cache_dir)
        cache.load()

        assert len(cache) == 2
        assert "A" in cache
        assert cache.get("A").name == "Alpha"
        assert cache.children("R") == ["A"]
        assert cache.path("A") == "/Alpha"
        assert cache.metadata == make_metadata()

    def test_documents_on_disk(self, cache_dir: Path):
        populated_cache(cache_dir).save()

        folders = json.loads((cache_dir / CACHE_FILE_NAME).read_text())
        metadata = json.loads((cache_dir / METADATA_FILE_NAME).read_text())

        assert set(folders) == {"R", "A"}
        assert folders["A"]["parentId"] == "R"
        assert metadata == {
            "rootFolderId": "R",
            "lastFullSync": 1000.0,
            "version": CACHE_VERSION,
            "totalFolders": 2,
        }
        assert not list(cache_dir.glob("*.tmp"))

    def test_load_missing_files(self, folder_cache: FolderTreeCache):
        assert len(folder_cache) == 0
        assert folder_cache.metadata is None

    def test_load_corrupt_folders(self, cache_dir: Path):
        populated_cache(cache_dir).save()
        (cache_dir / CACHE_FILE_NAME).write_text("{not json")

        cache = FolderTreeCache(cache_dir)
        cache.load()

        assert len(cache) == 0
        assert cache.metadata is not None

    def test_load_non_object_document(self, cache_dir: Path):
        cache_dir.mkdir()
        (cache_dir / CACHE_FILE_NAME).write_text("[1, 2, 3]")
        (cache_dir / METADATA_FILE_NAME).write_text('"1.0"')

        cache = FolderTreeCache(cache_dir)
        cache.load()

        assert len(cache) == 0
        assert cache.metadata is None

    def test_metadata_without_version_is_ignored(self, cache_dir: Path):
        cache_dir.mkdir()
        (cache_dir / METADATA_FILE_NAME).write_text('{"rootFolderId": "R", "lastFullSync": 1}')

        cache = FolderTreeCache(cache_dir)
        cache.load()

        assert cache.metadata is None

    def test_metadata_with_wrong_types_is_ignored(self, cache_dir: Path):
        cache_dir.mkdir()
        (cache_dir / METADATA_FILE_NAME).write_text(
            json.dumps({"rootFolderId": "R", "lastFullSync": "yesterday", "version": CACHE_VERSION})
        )

        cache = FolderTreeCache(cache_dir)
        cache.load()

        assert cache.metadata is None
        assert decide(cache.metadata, len(cache), "R") is CacheDecision.REBUILD

    def test_metadata_with_bad_folder_count_is_ignored(self, cache_dir: Path):
        cache_dir.mkdir()
        (cache_dir / METADATA_FILE_NAME).write_text(
            json.dumps(
                {"rootFolderId": "R", "lastFullSync": 1.0, "version": CACHE_VERSION, "totalFolders": "many"}
            )
        )

        cache = FolderTreeCache(cache_dir)
        cache.load()

        assert cache.metadata is None

    def test_folder_with_non_list_children_is_skipped(self, cache_dir: Path):
        populated_cache(cache_dir).save()
        folders = json.loads((cache_dir / CACHE_FILE_NAME).read_text())
        folders["A"]["children"] = "abc"
        (cache_dir / CACHE_FILE_NAME).write_text(json.dumps(folders))

        cache = FolderTreeCache(cache_dir)
        cache.load()

        assert "A" not in cache
        assert cache.children("R") == ["A"]

    def test_unknown_folder_lookups(self, folder_cache: FolderTreeCache):
        assert folder_cache.get("missing") is None
        assert folder_cache.children("missing") == []
        assert folder_cache.path("missing") == ""

    def test_children_returns_copy(self, cache_dir: Path):
        cache = populated_cache(cache_dir)
        cache.children("R").append("X")
        assert cache.children("R") == ["A"]

    def test_all_ids_keeps_insertion_order(self, cache_dir: Path):
        cache = populated_cache(cache_dir)
        cache.put(CachedFolder(id="B", name="Beta", path="/Beta", parent_id="R"))
        assert cache.all_ids() == ["R", "A", "B"]

    def test_clear_removes_files(self, cache_dir: Path):
        cache = populated_cache(cache_dir)
        cache.save()

        cache.clear()

        assert len(cache) == 0
        assert cache.metadata is None
        assert not (cache_dir / CACHE_FILE_NAME).exists()
        assert not (cache_dir / METADATA_FILE_NAME).exists()

    def test_stats(self, cache_dir: Path):
        cache = populated_cache(cache_dir)
        cache.save()

        stats = cache.stats(now=1600.0)

        assert stats.total_folders == 2
        assert stats.cache_age_seconds == 600.0
        assert stats.last_sync.timestamp() == 1000.0
        assert stats.cache_size.endswith(" KB")
        assert stats.to_dict()["totalFolders"] == 2

    def test_stats_empty(self, folder_cache: FolderTreeCache):
        stats = folder_cache.stats(now=50.0)
        assert stats.total_folders == 0
        assert stats.cache_age_seconds == 0.0
        assert stats.cache_size == "0.00 KB"


class TestFreshness:
    """Tests for the cache freshness decision."""

    def test_rebuild_without_metadata(self):
        assert decide(None, 10, "R", now=1000.0) is CacheDecision.REBUILD

    def test_rebuild_when_empty(self):
        assert decide(make_metadata(), 0, "R", now=1000.0) is CacheDecision.REBUILD

    def test_rebuild_for_other_root(self):
        assert decide(make_metadata(root="Other"), 2, "R", now=1000.0) is CacheDecision.REBUILD

    def test_rebuild_for_other_version(self):
        assert decide(make_metadata(version="0.9"), 2, "R", now=1000.0) is CacheDecision.REBUILD

    def test_reuse_within_ttl(self):
        assert decide(make_metadata(), 2, "R", now=1000.0 + CACHE_TTL) is CacheDecision.REUSE

    def test_rebuild_after_ttl(self):
        assert decide(make_metadata(), 2, "R", now=1000.0 + CACHE_TTL + 1) is CacheDecision.REBUILD

    def test_custom_ttl(self):
        assert decide(make_metadata(), 2, "R", now=1100.0, ttl=60) is CacheDecision.REBUILD

    def test_same_inputs_same_decision(self):
        metadata = make_metadata()
        decisions = {decide(metadata, 2, "R", now=2000.0) for _ in range(5)}
        assert decisions == {CacheDecision.REUSE}
