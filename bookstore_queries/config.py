"""
Configuration settings for the bookstore query runner.

Uses Pydantic Settings to load environment variables for the MongoDB
connection, logging, pagination, and failure handling. Values may also come
from a local `.env` file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

FailurePolicy = Literal["tolerant", "strict"]


class Settings(BaseSettings):
    # Database
    mongo_uri: str = Field("mongodb://localhost:27017/", alias="MONGO_URI")
    mongo_db_name: str = Field("plp_bookstore", alias="MONGO_DB_NAME")
    mongo_collection: str = Field("books", alias="MONGO_COLLECTION")
    mongo_server_selection_timeout_ms: int = Field(
        5000, alias="MONGO_SERVER_SELECTION_TIMEOUT_MS", gt=0
    )

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Query runner defaults
    page: int = Field(1, alias="PAGE", ge=1)
    page_size: int = Field(5, alias="PAGE_SIZE", ge=1)
    failure_policy: FailurePolicy = Field("tolerant", alias="FAILURE_POLICY")

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


__all__ = ["FailurePolicy", "Settings", "get_settings"]
