"""Format decoders for binary Drive content."""

import base64
import logging
from dataclasses import dataclass

from driveseek.drive.mime import PDF_MIME_TYPE, SPREADSHEET_MIME_TYPES, WORD_MIME_TYPES

from .base import FileProcessor, ProcessedContent
from .docx_processor import DocxProcessor, DocxTempFileProcessor
from .pdf_processor import PDFProcessor
from .spreadsheet_processor import LegacySpreadsheetProcessor, SpreadsheetProcessor

logger = logging.getLogger(__name__)

__all__ = [
    "DecoderChain",
    "DocxProcessor",
    "DocxTempFileProcessor",
    "FileProcessor",
    "LegacySpreadsheetProcessor",
    "PDFProcessor",
    "ProcessedContent",
    "SpreadsheetProcessor",
    "decode_binary",
    "get_decoder_chain",
]


@dataclass
class DecoderChain:
    """Ordered decoders for one format family. The first success wins."""

    label: str
    processors: list[FileProcessor]

    def run(self, data: bytes, filename: str) -> ProcessedContent:
        errors: list[str] = []
        for processor in self.processors:
            result = processor.process(data, filename)
            if result.success:
                return result
            errors.append(result.error or "unknown error")

        return ProcessedContent(
            text=self.placeholder(data, filename, errors),
            file_type=self.processors[0].file_type,
            success=False,
            error=errors[0],
        )

    def placeholder(self, data: bytes, filename: str, errors: list[str]) -> str:
        lines = [
            f"[{self.label} FILE - {filename}]",
            "",
            f"Error extracting text from {self.label}: {errors[0]}",
        ]
        for error in errors[1:]:
            lines.append(f"Alternative method error: {error}")
        preview = base64.b64encode(data[:150]).decode("ascii")
        lines.extend(["", f"File size: {len(data)} bytes", f"Base64 content: {preview}..."])
        return "\n".join(lines)


def get_decoder_chain(*mime_types: str | None) -> DecoderChain | None:
    """Pick the decoder chain for the first MIME type that has one."""
    for mime_type in mime_types:
        if not mime_type:
            continue
        if mime_type == PDF_MIME_TYPE:
            return DecoderChain("PDF", [PDFProcessor()])
        if mime_type in WORD_MIME_TYPES:
            return DecoderChain("DOCX", [DocxProcessor(), DocxTempFileProcessor()])
        if mime_type in SPREADSHEET_MIME_TYPES:
            return DecoderChain("EXCEL", [SpreadsheetProcessor(), LegacySpreadsheetProcessor()])
    return None


def decode_binary(data: bytes, filename: str, *mime_types: str | None) -> ProcessedContent | None:
    """Decode binary content to text, or None when no decoder applies."""
    chain = get_decoder_chain(*mime_types)
    if chain is None:
        return None
    result = chain.run(data, filename)
    if result.success:
        logger.info(f"Extracted text from {chain.label}: {filename}")
    return result
