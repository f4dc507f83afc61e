"""
Configuration settings for tablestore.

Uses Pydantic Settings to load environment variables for the storage backend,
identifier generation and logging.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

StorageBackend = Literal["memory", "file", "session"]


class Settings(BaseSettings):
    # Storage
    storage_backend: StorageBackend = Field("memory", alias="TABLESTORE_STORAGE")
    data_dir: Path = Field(Path(".tablestore"), alias="TABLESTORE_DATA_DIR")

    # Identifiers
    id_length: int = Field(7, ge=4, le=32, alias="TABLESTORE_ID_LENGTH")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "StorageBackend", "get_settings"]
