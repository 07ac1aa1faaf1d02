"""Async wrapper around the Google Drive v3 API."""

import asyncio
import io
import logging
from pathlib import Path
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseDownload

from driveseek.errors import RemoteError

logger = logging.getLogger(__name__)

DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"


class DriveClient:
    """Read-only access to Drive listings, metadata and content.

    The googleapiclient calls are blocking, so each one runs in a worker
    thread and the coroutine suspends until it finishes.
    """

    def __init__(self, service: Any) -> None:
        self.service = service

    @classmethod
    def from_service_account(cls, key_path: Path) -> "DriveClient":
        """Build a client authenticated with a service account key file."""
        credentials = service_account.Credentials.from_service_account_file(
            str(key_path), scopes=[DRIVE_READONLY_SCOPE]
        )
        service = build("drive", "v3", credentials=credentials, cache_discovery=False)
        return cls(service)

    async def list_files(
        self,
        query: str,
        fields: str,
        page_size: int,
        page_token: str | None = None,
        order_by: str | None = None,
    ) -> dict:
        """Run a files.list query and return the raw response."""
        params: dict[str, Any] = {"q": query, "fields": fields, "pageSize": page_size}
        if page_token:
            params["pageToken"] = page_token
        if order_by:
            params["orderBy"] = order_by

        try:
            response = await asyncio.to_thread(self.service.files().list(**params).execute)
        except Exception as e:
            raise RemoteError(f"files.list failed for query {query!r}: {e}") from e

        return {
            "files": response.get("files", []),
            "nextPageToken": response.get("nextPageToken"),
            "incompleteSearch": response.get("incompleteSearch", False),
        }

    async def get_file(self, file_id: str, fields: str) -> dict:
        """Fetch metadata for a single file or folder."""
        try:
            return await asyncio.to_thread(
                self.service.files().get(fileId=file_id, fields=fields).execute
            )
        except Exception as e:
            raise RemoteError(f"files.get failed for {file_id}: {e}") from e

    async def export_file(self, file_id: str, mime_type: str) -> bytes:
        """Export a native Google file in the given MIME type."""
        request = self.service.files().export_media(fileId=file_id, mimeType=mime_type)
        try:
            return await self._download(request)
        except Exception as e:
            raise RemoteError(f"Export of {file_id} as {mime_type} failed: {e}") from e

    async def download_file(self, file_id: str) -> bytes:
        """Download a file's raw bytes."""
        request = self.service.files().get_media(fileId=file_id)
        try:
            return await self._download(request)
        except Exception as e:
            raise RemoteError(f"Download of {file_id} failed: {e}") from e

    async def _download(self, request: Any) -> bytes:
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request)
        done = False
        while not done:
            status, done = await asyncio.to_thread(downloader.next_chunk)
            if status:
                logger.debug(f"Downloaded {int(status.progress() * 100)}%")
        return buffer.getvalue()
