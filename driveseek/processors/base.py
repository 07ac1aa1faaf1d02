"""Decoder interface shared by the binary format processors."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ProcessedContent:
    """Text decoded from a file's bytes, or the reason decoding failed."""

    text: str
    file_type: str
    success: bool = True
    error: str | None = None


class FileProcessor(ABC):
    """Turns the raw bytes of one file format into plain text.

    Subclasses implement extract() and may raise freely; process() converts
    any exception into an unsuccessful ProcessedContent so that the next
    decoder in a chain can take over.
    """

    file_type: str = "unknown"

    @abstractmethod
    def extract(self, data: bytes, filename: str) -> str:
        """Return the text of the file. Raise on unreadable input."""

    def process(self, data: bytes, filename: str = "") -> ProcessedContent:
        try:
            text = self.extract(data, filename)
        except Exception as e:
            logger.warning(f"{type(self).__name__} could not decode {filename or 'file'}: {e}")
            return self._error_result(str(e) or type(e).__name__)
        return ProcessedContent(text=text, file_type=self.file_type)

    def _error_result(self, error: str) -> ProcessedContent:
        return ProcessedContent(text="", file_type=self.file_type, success=False, error=error)
