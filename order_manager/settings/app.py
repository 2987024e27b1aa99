"""Application-level settings (API metadata, logging, CORS)."""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Central application settings.

    Loaded from ``APP_*`` environment variables or the .env file.
    """

    title: str = "Order Manager API"
    description: str = (
        "REST API for managing orders and order items. "
        "Orders own their items: deleting an order deletes its items, "
        "and removing an item from an order deletes it."
    )
    version: str = "1.0.0"
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="APP_",
        extra="ignore",
    )


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings()
