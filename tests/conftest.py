"""Shared test fixtures."""

import io
import re
from pathlib import Path

import fitz
import pytest
import xlwt
from docx import Document
from openpyxl import Workbook

from driveseek.drive.mime import FOLDER_MIME_TYPE
from driveseek.errors import RemoteError
from driveseek.storage import FolderTreeCache


class FakeDrive:
    """In-memory stand-in for DriveClient.

    Understands the handful of query clauses driveseek builds: parent
    membership, mimeType equality (any of), and name/fullText contains.
    Page tokens are stringified offsets.
    """

    def __init__(self) -> None:
        self.items: dict[str, dict] = {}
        self.contents: dict[str, bytes] = {}
        self.exports: dict[tuple[str, str], bytes] = {}
        self.failing_folders: set[str] = set()
        self.failing_files: set[str] = set()
        self.list_calls: list[dict] = []
        self.get_calls: list[str] = []
        self.export_calls: list[tuple[str, str]] = []

    def add_folder(self, folder_id: str, name: str, parent: str | None = None, **extra) -> dict:
        item = {"id": folder_id, "name": name, "mimeType": FOLDER_MIME_TYPE, **extra}
        item["parents"] = [parent] if parent else []
        self.items[folder_id] = item
        return item

    def add_file(
        self,
        file_id: str,
        name: str,
        mime_type: str = "text/plain",
        parents: list[str] | None = None,
        modified_time: str | None = None,
        content: bytes | None = None,
        text: str = "",
    ) -> dict:
        item = {"id": file_id, "name": name, "mimeType": mime_type, "parents": list(parents or [])}
        if modified_time:
            item["modifiedTime"] = modified_time
        if text:
            item["text"] = text
        self.items[file_id] = item
        if content is not None:
            self.contents[file_id] = content
        return item

    def _matches(self, item: dict, query: str) -> bool:
        parent = re.search(r"'([^']+)' in parents", query)
        if parent and parent.group(1) not in item["parents"]:
            return False

        mime_types = re.findall(r"mimeType='([^']+)'", query)
        if mime_types and item["mimeType"] not in mime_types:
            return False

        term = re.search(r"name contains '([^']*)'", query)
        if term:
            needle = term.group(1).lower()
            in_name = needle in item["name"].lower()
            in_text = "fullText contains" in query and needle in item.get("text", "").lower()
            if not (in_name or in_text):
                return False
        return True

    async def list_files(self, query, fields, page_size, page_token=None, order_by=None) -> dict:
        self.list_calls.append({"query": query, "page_size": page_size, "page_token": page_token})
        parent = re.search(r"'([^']+)' in parents", query)
        if parent and parent.group(1) in self.failing_folders:
            raise RemoteError(f"Listing failed for {parent.group(1)}")

        matches = [
            {k: v for k, v in item.items() if k != "text"}
            for item in self.items.values()
            if self._matches(item, query)
        ]
        start = int(page_token or 0)
        end = start + page_size
        return {
            "files": matches[start:end],
            "nextPageToken": str(end) if end < len(matches) else None,
            "incompleteSearch": False,
        }

    async def get_file(self, file_id, fields) -> dict:
        self.get_calls.append(file_id)
        if file_id in self.failing_files or file_id not in self.items:
            raise RemoteError(f"File not found: {file_id}")
        return {k: v for k, v in self.items[file_id].items() if k != "text"}

    async def export_file(self, file_id, mime_type) -> bytes:
        self.export_calls.append((file_id, mime_type))
        if (file_id, mime_type) not in self.exports:
            raise RemoteError(f"Export of {file_id} to {mime_type} failed")
        return self.exports[(file_id, mime_type)]

    async def download_file(self, file_id) -> bytes:
        if file_id not in self.contents:
            raise RemoteError(f"Download of {file_id} failed")
        return self.contents[file_id]


def build_tree(drive: FakeDrive, root_id: str, depth: int, branching: int) -> None:
    """Add a uniform folder tree below root_id, naming children by position."""
    level = [root_id]
    for d in range(depth):
        next_level = []
        for parent in level:
            for i in range(branching):
                folder_id = f"{parent}.{i}"
                drive.add_folder(folder_id, f"L{d + 1}-{i}", parent)
                next_level.append(folder_id)
        level = next_level


def make_docx() -> bytes:
    document = Document()
    document.add_paragraph("Quarterly revenue grew 12%.")
    document.add_paragraph("Costs were flat.")
    table = document.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Region"
    table.cell(0, 1).text = "EMEA"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def make_xlsx(data_rows: int = 12) -> bytes:
    """Workbook with a Sales sheet (header plus data_rows rows) and an empty sheet."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Sales"
    sheet.append(["Region", "Total"])
    for i in range(data_rows):
        sheet.append([f"R{i}", i * 10])
    workbook.create_sheet("Empty")
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def make_xls(data_rows: int = 12) -> bytes:
    """Binary .xls counterpart of make_xlsx."""
    workbook = xlwt.Workbook()
    sheet = workbook.add_sheet("Sales")
    sheet.write(0, 0, "Region")
    sheet.write(0, 1, "Total")
    for i in range(data_rows):
        sheet.write(i + 1, 0, f"R{i}")
        sheet.write(i + 1, 1, i * 10)
    workbook.add_sheet("Empty")
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def drive() -> FakeDrive:
    """Empty fake drive with a scope root folder named Root."""
    fake = FakeDrive()
    fake.add_folder("R", "Root")
    return fake


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def folder_cache(cache_dir: Path) -> FolderTreeCache:
    """Freshly loaded, empty folder cache."""
    cache = FolderTreeCache(cache_dir)
    cache.load()
    return cache


@pytest.fixture
def key_file(tmp_path: Path) -> Path:
    """Placeholder service account key file."""
    path = tmp_path / "service-account.json"
    path.write_text('{"type": "service_account"}')
    return path
