"""Google Drive access."""

from .client import DriveClient
from .mime import FOLDER_MIME_TYPE, is_text_mime, mime_types_for_file_types

__all__ = [
    "DriveClient",
    "FOLDER_MIME_TYPE",
    "is_text_mime",
    "mime_types_for_file_types",
]
