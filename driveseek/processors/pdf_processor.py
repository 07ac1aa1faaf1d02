"""PDF text layer extraction."""

import logging

import fitz  # PyMuPDF

from .base import FileProcessor

logger = logging.getLogger(__name__)

# Per-document extraction limits
MAX_PAGES = 200
MAX_CHARS = 200_000


class PDFProcessor(FileProcessor):
    """Reads the embedded text of each page; scanned pages yield nothing."""

    file_type = "pdf"

    def __init__(self, max_pages: int = MAX_PAGES, max_chars: int = MAX_CHARS) -> None:
        self.max_pages = max_pages
        self.max_chars = max_chars

    def extract(self, data: bytes, filename: str) -> str:
        sections: list[str] = []
        budget = self.max_chars

        with fitz.open(stream=data, filetype="pdf") as doc:
            page_count = len(doc)
            for number, page in enumerate(doc, start=1):
                if number > self.max_pages:
                    break
                page_text = page.get_text()
                sections.append(f"--- Page {number} ---")
                if len(page_text) > budget:
                    sections.append(page_text[:budget])
                    sections.append("... (truncated)")
                    break
                sections.append(page_text)
                budget -= len(page_text)

        logger.debug(f"Read {min(page_count, self.max_pages)} of {page_count} pages from {filename}")
        return "\n\n".join(sections)
