"""
Configuration Module

Process-wide settings for CCRM using Pydantic Settings. Values can be
overridden with ``CCRM_``-prefixed environment variables or a ``.env`` file.
"""

from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_folder() -> Path:
    return Path.home() / "ccrm_data"


class Settings(BaseSettings):
    """Application-wide configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CCRM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    data_folder: Path = Field(default_factory=_default_data_folder, description="Base directory for exports and backups")

    # Enrollment rules
    max_credits: int = Field(default=18, ge=1, description="Credit ceiling per student")

    # REST server
    rest_host: str = "127.0.0.1"
    rest_port: int = 8000

    @field_validator("data_folder")
    @classmethod
    def expand_data_folder(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def export_folder(self) -> Path:
        """Directory the registries are exported into."""
        return self.data_folder / "export"

    def timestamp(self) -> str:
        """Current UTC instant, safe to use as a path segment."""
        return datetime.now(timezone.utc).isoformat().replace(":", "-").replace("+", "_")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
