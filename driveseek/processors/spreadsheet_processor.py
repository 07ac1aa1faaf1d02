"""Workbook overview with a short CSV preview per sheet."""

import csv
import io
import logging

import pandas as pd
from openpyxl import load_workbook

from .base import FileProcessor

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 10


def rows_to_csv(rows: list[tuple]) -> str:
    """Render rows as CSV lines, empty cells as blanks."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue().rstrip("\n")


def render_sheet(index: int, name: str, rows: list[tuple], preview_rows: int = PREVIEW_ROWS) -> str:
    lines = [f"=== SHEET {index}: {name} ===", f"Rows: {len(rows)}"]
    if not rows:
        lines += ["", "(No data found)"]
        return "\n".join(lines) + "\n"

    preview = rows[:preview_rows]
    lines += [
        f"Columns: {len(rows[0])}",
        "",
        f"Preview (first {len(preview)} rows):",
        rows_to_csv(preview),
    ]
    if len(rows) > preview_rows:
        lines.append(f"... ({len(rows) - preview_rows} more rows)")
    return "\n".join(lines) + "\n"


def render_workbook(filename: str, sheets: list[tuple[str, list[tuple]]], preview_rows: int = PREVIEW_ROWS) -> str:
    """Full overview text for a workbook given (sheet name, rows) pairs in order."""
    names = [name for name, _ in sheets]
    logger.debug(f"Found {len(names)} sheets in {filename}: {', '.join(names)}")

    parts = [
        f"[EXCEL FILE - {filename}]",
        "",
        f"Total Sheets: {len(names)}",
        f"Sheet Names: {', '.join(names)}",
        "",
    ]
    for index, (name, rows) in enumerate(sheets, start=1):
        parts.append(render_sheet(index, name, rows, preview_rows))
    return "\n".join(parts).rstrip() + "\n"


class SpreadsheetProcessor(FileProcessor):
    """Lists every sheet of an OOXML workbook with its size and first rows.

    Formulas are reported by their cached values; fully empty rows are skipped.
    """

    file_type = "spreadsheet"

    def __init__(self, preview_rows: int = PREVIEW_ROWS) -> None:
        self.preview_rows = preview_rows

    def extract(self, data: bytes, filename: str) -> str:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            sheets = [
                (
                    name,
                    [
                        row
                        for row in workbook[name].iter_rows(values_only=True)
                        if any(cell is not None for cell in row)
                    ],
                )
                for name in workbook.sheetnames
            ]
        finally:
            workbook.close()

        return render_workbook(filename, sheets, self.preview_rows)


class LegacySpreadsheetProcessor(SpreadsheetProcessor):
    """Reads binary .xls workbooks through pandas and xlrd.

    Used after SpreadsheetProcessor, which only understands OOXML packages.
    """

    def extract(self, data: bytes, filename: str) -> str:
        frames = pd.read_excel(io.BytesIO(data), sheet_name=None, header=None, engine="xlrd")

        sheets = []
        for name, df in frames.items():
            df = df.dropna(how="all")
            rows = [
                tuple(None if pd.isna(cell) else cell for cell in row)
                for row in df.itertuples(index=False, name=None)
            ]
            sheets.append((str(name), rows))

        logger.info(f"Read legacy workbook {filename} with pandas")
        return render_workbook(filename, sheets, self.preview_rows)
