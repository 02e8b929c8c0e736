"""Application settings, read from ``STOREFRONT_*`` environment variables.

A ``.env`` file in the working directory is honoured too.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):

    data_dir: Path = Field(_DEFAULT_DATA_DIR, description="Directory holding the JSON stores")
    environment: str = Field("development", description="development, staging or production")
    log_level: str = Field("INFO", description="Root log level")
    json_logs: bool = Field(False, description="Render log events as JSON lines")

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "staging")


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
