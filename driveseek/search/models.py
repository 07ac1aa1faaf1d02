"""Search request and result records."""

from dataclasses import dataclass, field

# Hard cap on results per page
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


@dataclass
class SearchRequest:
    """Parameters of a search call."""

    query: str
    mime_type: str | None = None
    file_types: list[str] | None = None
    modified_since: str | None = None
    recursive: bool = True
    name_only: bool = False
    page_size: int = DEFAULT_PAGE_SIZE
    page_token: str | None = None

    @property
    def effective_page_size(self) -> int:
        return max(1, min(self.page_size, MAX_PAGE_SIZE))


@dataclass
class FileOwner:
    display_name: str | None = None
    email_address: str | None = None

    def to_dict(self) -> dict:
        return {"displayName": self.display_name, "emailAddress": self.email_address}


@dataclass
class SearchFile:
    """One file in a result page. Built per query, never cached."""

    id: str
    name: str
    mime_type: str
    size: str | None = None
    modified_time: str | None = None
    created_time: str | None = None
    web_view_link: str | None = None
    icon_link: str | None = None
    owners: list[FileOwner] = field(default_factory=list)
    parents: list[str] = field(default_factory=list)
    path: str = "/"

    @classmethod
    def from_api(cls, data: dict, path: str) -> "SearchFile":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            mime_type=data.get("mimeType", ""),
            size=data.get("size"),
            modified_time=data.get("modifiedTime"),
            created_time=data.get("createdTime"),
            web_view_link=data.get("webViewLink"),
            icon_link=data.get("iconLink"),
            owners=[
                FileOwner(
                    display_name=o.get("displayName"),
                    email_address=o.get("emailAddress"),
                )
                for o in data.get("owners") or []
            ],
            parents=list(data.get("parents") or []),
            path=path,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "mimeType": self.mime_type,
            "size": self.size,
            "modifiedTime": self.modified_time,
            "createdTime": self.created_time,
            "webViewLink": self.web_view_link,
            "iconLink": self.icon_link,
            "owners": [o.to_dict() for o in self.owners],
            "parents": self.parents,
            "path": self.path,
        }


@dataclass
class SearchStats:
    total_found: int
    folders_searched: int
    search_duration_ms: int

    def to_dict(self) -> dict:
        return {
            "totalFound": self.total_found,
            "foldersSearched": self.folders_searched,
            "searchDuration": self.search_duration_ms,
        }


@dataclass
class SearchResponse:
    files: list[SearchFile]
    search_stats: SearchStats
    incomplete_search: bool = False
    next_page_token: str | None = None

    def to_dict(self) -> dict:
        return {
            "files": [f.to_dict() for f in self.files],
            "nextPageToken": self.next_page_token,
            "incompleteSearch": self.incomplete_search,
            "searchStats": self.search_stats.to_dict(),
        }
