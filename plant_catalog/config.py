"""
Configuration settings for the plant catalog.

Uses Pydantic Settings to load environment variables for database connections,
the remote plant service, the sort-order cache, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_CODELAB_ASSETS = (
    "googlecodelabs/kotlin-coroutines/master/advanced-coroutines-codelab/"
    "sunflower/src/main/assets"
)


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("plant_catalog", alias="DB_NAME")
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(4, alias="DB_POOL_MAX_SIZE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Remote plant service
    plants_base_url: str = Field("https://raw.githubusercontent.com/", alias="PLANTS_BASE_URL")
    plants_path: str = Field(f"{_CODELAB_ASSETS}/plants.json", alias="PLANTS_PATH")
    sort_order_path: str = Field(
        f"{_CODELAB_ASSETS}/custom_plant_sort_order.json", alias="SORT_ORDER_PATH"
    )
    network_timeout_seconds: float = Field(10.0, alias="NETWORK_TIMEOUT_SECONDS")
    network_retry_attempts: int = Field(3, alias="NETWORK_RETRY_ATTEMPTS")
    network_retry_backoff_seconds: float = Field(0.5, alias="NETWORK_RETRY_BACKOFF_SECONDS")

    # Sort-order cache
    sort_order_wait_timeout_seconds: Optional[float] = Field(
        None, alias="SORT_ORDER_WAIT_TIMEOUT_SECONDS"
    )
    sort_order_cache_failures: bool = Field(True, alias="SORT_ORDER_CACHE_FAILURES")

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


__all__ = ["Settings", "get_settings"]
