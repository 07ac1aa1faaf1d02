"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google Drive
    google_service_account_key_path: Path
    google_drive_folder_id: str | None = None

    # OpenAI
    openai_api_key: str
    openai_model: str = "gpt-4o-mini"

    # Folder tree cache
    cache_dir: Path = Path("./cache")

    @field_validator("google_service_account_key_path")
    @classmethod
    def validate_key_path(cls, v: Path) -> Path:
        """Ensure the service account key file exists."""
        if not v.exists():
            raise ValueError(f"Service account key does not exist: {v}")
        if not v.is_file():
            raise ValueError(f"Service account key is not a file: {v}")
        return v.resolve()

    @field_validator("google_drive_folder_id")
    @classmethod
    def normalize_folder_id(cls, v: str | None) -> str | None:
        """Treat a blank folder ID as unset."""
        if v is None:
            return None
        return v.strip() or None


def get_settings() -> Settings:
    """Load settings from environment."""
    return Settings()
