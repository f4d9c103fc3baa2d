"""Application configuration handling."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the text analysis service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:5173"]

    google_search_api_key: Optional[str] = None
    google_search_engine_id: Optional[str] = None
    google_search_base_url: str = "https://www.googleapis.com/customsearch/v1"
    search_timeout_seconds: float = 10.0
    search_max_concurrency: int = 8

    max_text_chars: int = 1_000_000
    max_file_bytes: int = 10 * 1024 * 1024
    allowed_file_extensions: List[str] = [".txt", ".log"]

    default_shingle_size: int = 5
    default_sample_step: int = 5


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
