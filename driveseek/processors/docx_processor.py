"""Word document processors."""

import io
import logging
import tempfile
from pathlib import Path

from docx import Document

from .base import FileProcessor

logger = logging.getLogger(__name__)


def document_text(document) -> str:
    """Paragraph text followed by table rows, cells separated by tabs."""
    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))
    return "\n".join(lines).strip()


class DocxProcessor(FileProcessor):
    """Parses a DOCX package straight from memory."""

    file_type = "docx"

    def extract(self, data: bytes, filename: str) -> str:
        if len(data) < 4:
            raise ValueError("Buffer too small to be a valid DOCX file")
        if not data.startswith(b"PK"):
            logger.debug(f"{filename} lacks a ZIP signature, trying anyway")
        return document_text(Document(io.BytesIO(data)))


class DocxTempFileProcessor(FileProcessor):
    """Writes the bytes to a temporary .docx and parses that file.

    Used as the second attempt when the in-memory parse fails.
    """

    file_type = "docx"

    def extract(self, data: bytes, filename: str) -> str:
        with tempfile.NamedTemporaryFile(suffix=".docx", delete=False) as tmp:
            tmp.write(data)
            tmp_path = Path(tmp.name)

        try:
            text = document_text(Document(str(tmp_path)))
        finally:
            tmp_path.unlink(missing_ok=True)

        logger.info(f"Extracted text from DOCX using temp file method: {filename}")
        return text
