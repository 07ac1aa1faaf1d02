"""Error types raised by driveseek."""


class DriveSeekError(Exception):
    """Base error for driveseek."""


class ConfigurationError(DriveSeekError):
    """Raised when required credentials or identifiers are missing."""


class RemoteError(DriveSeekError):
    """Raised when a call to the remote Drive API fails."""


class FileMetadataError(DriveSeekError):
    """Raised when a file's metadata cannot be resolved."""

    def __init__(self, file_id: str, reason: str = "") -> None:
        self.file_id = file_id
        message = f"Could not read metadata for file {file_id}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
