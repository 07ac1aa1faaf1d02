"""Fetch Drive files and turn them into text."""

import base64
import logging
from dataclasses import dataclass

from driveseek.drive import DriveClient, is_text_mime
from driveseek.drive.mime import export_mime_type
from driveseek.errors import FileMetadataError, RemoteError
from driveseek.processors import decode_binary

logger = logging.getLogger(__name__)

METADATA_FIELDS = "name, mimeType, size, parents"


@dataclass
class FetchedFile:
    """Raw result of an export or download."""

    name: str
    mime_type: str
    source_mime_type: str
    raw_content: bytes
    is_text: bool


@dataclass
class ExtractedContent:
    """Text representation of a file, ready for summarization."""

    file_name: str
    mime_type: str
    content: str
    encoding: str
    size: int
    is_text: bool
    opaque: bool = False

    def text_for_summary(self) -> str:
        """Content to hand to the summarizer; opaque blobs are described, not sent."""
        if self.opaque:
            return (
                f"[Binary file {self.file_name} ({self.mime_type}), {self.size} bytes. "
                "No text could be extracted from this format.]"
            )
        return self.content


async def fetch_metadata(client: DriveClient, file_id: str) -> dict:
    """Fetch the name and MIME type a read cannot proceed without."""
    try:
        metadata = await client.get_file(file_id, METADATA_FIELDS)
    except Exception as e:
        raise FileMetadataError(file_id, str(e)) from e

    if not metadata.get("name") or not metadata.get("mimeType"):
        raise FileMetadataError(file_id, "missing name or mimeType")
    return metadata


async def fetch_content(
    client: DriveClient,
    file_id: str,
    metadata: dict,
    export_format: str | None = None,
) -> FetchedFile:
    """Export native Google files, download everything else.

    Raises:
        RemoteError: the export or download failed
    """
    name = metadata["name"]
    source_mime_type = metadata["mimeType"]
    logger.info(f"Reading file: {name} ({source_mime_type})")

    target = export_mime_type(source_mime_type, export_format)
    if target:
        content = await client.export_file(file_id, target)
        logger.info(f"Exported file {name} to {target}")
        result_mime_type = target
    else:
        content = await client.download_file(file_id)
        logger.info(f"Downloaded file {name}")
        result_mime_type = source_mime_type

    if isinstance(content, str):
        content = content.encode("utf-8")

    return FetchedFile(
        name=name,
        mime_type=result_mime_type,
        source_mime_type=source_mime_type,
        raw_content=content,
        is_text=is_text_mime(result_mime_type),
    )


class FileContentExtractor:
    """Produces a text rendition of any Drive file.

    Text content is decoded as UTF-8. Binary content goes through the decoder
    chain for its format; when no decoder exists the bytes are returned as a
    base64 blob. Only a metadata failure raises (FileMetadataError); a failed
    export, download or decode yields a placeholder.
    """

    def __init__(self, client: DriveClient) -> None:
        self.client = client

    async def extract(self, file_id: str, export_format: str | None = None) -> ExtractedContent:
        """Fetch a file and render it as text.

        Args:
            file_id: Drive file ID
            export_format: Target MIME type for Google Workspace exports, or None
                for the default export

        Returns:
            ExtractedContent with the text (or base64 blob) and its encoding

        Raises:
            FileMetadataError: If the file metadata cannot be fetched
        """
        metadata = await fetch_metadata(self.client, file_id)
        try:
            fetched = await fetch_content(self.client, file_id, metadata, export_format)
        except RemoteError as e:
            logger.error(f"Error reading file {metadata['name']}: {e}")
            content = f"[FILE - {metadata['name']}]\n\nError fetching file content: {e}"
            return ExtractedContent(
                file_name=metadata["name"],
                mime_type=metadata["mimeType"],
                content=content,
                encoding="utf-8",
                size=len(content.encode("utf-8")),
                is_text=False,
            )

        raw = fetched.raw_content
        opaque = False

        if fetched.is_text:
            content = raw.decode("utf-8", errors="replace")
            encoding = "utf-8"
        else:
            decoded = decode_binary(raw, fetched.name, fetched.mime_type, fetched.source_mime_type)
            if decoded is None:
                content = base64.b64encode(raw).decode("ascii")
                opaque = True
                encoding = "base64"
            elif decoded.success:
                content = decoded.text
                encoding = "utf-8"
            else:
                content = decoded.text
                encoding = "base64"

        size = len(content.encode("utf-8")) if encoding == "utf-8" else len(raw)
        logger.info(f"Successfully read file: {fetched.name}, content size: {size} bytes, encoding: {encoding}")

        return ExtractedContent(
            file_name=fetched.name,
            mime_type=fetched.mime_type,
            content=content,
            encoding=encoding,
            size=size,
            is_text=fetched.is_text,
            opaque=opaque,
        )
