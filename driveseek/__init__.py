"""driveseek - search, read and summarize Google Drive files for an agent."""

__version__ = "0.1.0"
