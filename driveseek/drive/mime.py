"""MIME type tables for Google Drive content."""

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

GOOGLE_DOCUMENT = "application/vnd.google-apps.document"
GOOGLE_SPREADSHEET = "application/vnd.google-apps.spreadsheet"
GOOGLE_PRESENTATION = "application/vnd.google-apps.presentation"

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PPTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
XLS_MIME_TYPE = "application/vnd.ms-excel"
DOC_MIME_TYPE = "application/msword"
PPT_MIME_TYPE = "application/vnd.ms-powerpoint"
PDF_MIME_TYPE = "application/pdf"
CSV_MIME_TYPE = "text/csv"

FILE_TYPES = (
    "document",
    "spreadsheet",
    "presentation",
    "pdf",
    "image",
    "video",
    "audio",
    "folder",
    "other",
)

FILE_TYPE_MIME_TYPES: dict[str, list[str]] = {
    "document": [
        GOOGLE_DOCUMENT,
        DOC_MIME_TYPE,
        DOCX_MIME_TYPE,
        "text/plain",
        "text/rtf",
    ],
    "spreadsheet": [
        GOOGLE_SPREADSHEET,
        XLS_MIME_TYPE,
        XLSX_MIME_TYPE,
        CSV_MIME_TYPE,
    ],
    "presentation": [
        GOOGLE_PRESENTATION,
        PPT_MIME_TYPE,
        PPTX_MIME_TYPE,
    ],
    "pdf": [PDF_MIME_TYPE],
    "image": ["image/jpeg", "image/png", "image/gif", "image/bmp", "image/svg+xml"],
    "video": ["video/mp4", "video/avi", "video/quicktime", "video/x-msvideo"],
    "audio": ["audio/mpeg", "audio/wav", "audio/ogg", "audio/mp3"],
    "folder": [FOLDER_MIME_TYPE],
    "other": [],
}

# Native Google types are exported; this is the format used when no override is given.
EXPORT_DEFAULTS: dict[str, str] = {
    GOOGLE_DOCUMENT: DOCX_MIME_TYPE,
    GOOGLE_SPREADSHEET: XLSX_MIME_TYPE,
    GOOGLE_PRESENTATION: PPTX_MIME_TYPE,
}

# Document, spreadsheet and presentation family. Only the native Google types
# can be exported by Drive; the office and CSV members are downloaded as-is.
EXPORTABLE_MIME_TYPES = frozenset(
    {
        *EXPORT_DEFAULTS,
        DOCX_MIME_TYPE,
        DOC_MIME_TYPE,
        XLSX_MIME_TYPE,
        XLS_MIME_TYPE,
        CSV_MIME_TYPE,
        PPTX_MIME_TYPE,
        PPT_MIME_TYPE,
    }
)

TEXT_MIME_TYPES = frozenset({"application/json", "application/xml", "application/javascript"})

WORD_MIME_TYPES = frozenset({DOCX_MIME_TYPE})
SPREADSHEET_MIME_TYPES = frozenset({XLSX_MIME_TYPE, XLS_MIME_TYPE, GOOGLE_SPREADSHEET})


def mime_types_for_file_types(file_types: list[str] | None) -> list[str]:
    """Expand friendly file type names into concrete MIME types."""
    if not file_types:
        return []
    mime_types: list[str] = []
    for file_type in file_types:
        mime_types.extend(FILE_TYPE_MIME_TYPES.get(file_type, []))
    return mime_types


def is_text_mime(mime_type: str) -> bool:
    """Check whether content of this MIME type can be read as text directly."""
    if not mime_type:
        return False
    return mime_type.startswith("text/") or "plain" in mime_type or mime_type in TEXT_MIME_TYPES


def export_mime_type(source_mime_type: str, export_format: str | None = None) -> str | None:
    """Return the MIME type to export a native Google file as, or None to download."""
    if source_mime_type not in EXPORT_DEFAULTS:
        return None
    return export_format or EXPORT_DEFAULTS[source_mime_type]
