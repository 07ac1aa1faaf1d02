"""Drive query string construction."""

import re
from datetime import date, datetime

from driveseek.drive.mime import mime_types_for_file_types

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def escape_query_value(value: str) -> str:
    """Escape a literal for use inside a single-quoted Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def format_modified_since(value: str | date | datetime) -> str:
    """Render a lower bound for modifiedTime as an RFC 3339 timestamp."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return f"{value.isoformat()}T00:00:00"
    value = value.strip()
    if _DATE_ONLY.match(value):
        return f"{value}T00:00:00"
    return value


def build_search_query(
    query: str,
    mime_type: str | None = None,
    folder_id: str | None = None,
    name_only: bool = False,
    modified_since: str | date | datetime | None = None,
    file_types: list[str] | None = None,
) -> str:
    """Build the files.list predicate for one search call."""
    conditions = ["trashed=false"]

    if query.strip():
        term = escape_query_value(query.strip().strip('"'))
        if name_only:
            conditions.append(f"name contains '{term}'")
        else:
            conditions.append(f"(name contains '{term}' or fullText contains '{term}')")

    if mime_type:
        conditions.append(f"mimeType='{escape_query_value(mime_type)}'")

    mime_types = mime_types_for_file_types(file_types)
    if mime_types:
        mime_conditions = " or ".join(f"mimeType='{mt}'" for mt in mime_types)
        conditions.append(f"({mime_conditions})")

    if modified_since:
        conditions.append(f"modifiedTime >= '{format_modified_since(modified_since)}'")

    if folder_id:
        conditions.append(f"'{escape_query_value(folder_id)}' in parents")

    return " and ".join(conditions)
