"""Decide whether the folder cache can serve a request."""

from datetime import UTC, datetime
from enum import Enum

from driveseek.storage import CACHE_TTL, CACHE_VERSION, CacheMetadata


class CacheDecision(str, Enum):
    REBUILD = "rebuild"
    REUSE = "reuse"


def decide(
    metadata: CacheMetadata | None,
    folder_count: int,
    root_folder_id: str,
    now: float | None = None,
    ttl: float = CACHE_TTL,
    version: str = CACHE_VERSION,
) -> CacheDecision:
    """Return REBUILD when the cache is missing, foreign, outdated or expired."""
    if metadata is None or folder_count == 0:
        return CacheDecision.REBUILD
    if metadata.root_folder_id != root_folder_id:
        return CacheDecision.REBUILD
    if metadata.version != version:
        return CacheDecision.REBUILD

    now = datetime.now(UTC).timestamp() if now is None else now
    if now - metadata.last_full_sync > ttl:
        return CacheDecision.REBUILD

    return CacheDecision.REUSE
