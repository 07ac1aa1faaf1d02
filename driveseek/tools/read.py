"""Tool for reading and summarizing a Drive file."""

from driveseek.errors import FileMetadataError
from driveseek.reader import FileContentExtractor, ProgressiveSummarizer

from .base import Tool, ToolResult


class ReadFileTool(Tool):
    """Read a file and fold it into the running summary for a search."""

    name = "read_file"
    description = (
        "Read the contents of a file from Google Drive and summarize it for the search intent. "
        "Pass the cumulativeSummary from the previous read as cumulativeFindings, and stop "
        "reading when shouldContinueReading is false."
    )
    parameters = {
        "type": "object",
        "properties": {
            "fileId": {
                "type": "string",
                "description": "ID of the file to read",
            },
            "exportFormat": {
                "type": "string",
                "description": (
                    "Export format for Google Workspace files (e.g., 'text/plain', 'text/csv') "
                    "(leave blank for auto-detection)"
                ),
            },
            "searchContext": {
                "type": "string",
                "description": "Original search query/intent for focused summarization",
            },
            "cumulativeFindings": {
                "type": "string",
                "description": "Summary of previous files read",
            },
        },
        "required": ["fileId", "searchContext"],
    }

    def __init__(self, extractor: FileContentExtractor, summarizer: ProgressiveSummarizer) -> None:
        self.extractor = extractor
        self.summarizer = summarizer

    async def execute(
        self,
        fileId: str,
        searchContext: str,
        exportFormat: str | None = None,
        cumulativeFindings: str | None = None,
    ) -> ToolResult:
        try:
            extracted = await self.extractor.extract(fileId, exportFormat or None)
        except FileMetadataError as e:
            return ToolResult.failure(str(e))

        result = await self.summarizer.summarize(
            extracted.text_for_summary(),
            extracted.file_name,
            searchContext,
            cumulativeFindings or None,
        )

        data = {
            **result.to_dict(),
            "mimeType": extracted.mime_type,
            "fileName": extracted.file_name,
            "size": extracted.size,
            "encoding": extracted.encoding,
        }
        hint = "continue reading" if result.should_continue_reading else "enough information gathered"
        return ToolResult(
            success=True,
            data=data,
            message=f"Read file: {extracted.file_name} ({extracted.size} bytes, {hint})",
        )
