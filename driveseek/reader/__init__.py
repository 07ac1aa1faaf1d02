"""Reading Drive files - content extraction and progressive summarization."""

from .extractor import ExtractedContent, FetchedFile, FileContentExtractor, fetch_content, fetch_metadata
from .summarizer import (
    FALLBACK_MARKER,
    ProgressiveSummarizer,
    ReadSummary,
    fallback_summary,
    parse_summary_reply,
)

__all__ = [
    "FALLBACK_MARKER",
    "ExtractedContent",
    "FetchedFile",
    "FileContentExtractor",
    "ProgressiveSummarizer",
    "ReadSummary",
    "fallback_summary",
    "fetch_content",
    "fetch_metadata",
    "parse_summary_reply",
]
