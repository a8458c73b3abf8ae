"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="SHAREBOX_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "Sharebox"
    secret_key: str = "change-me"

    # Database
    database_url: str = "sqlite+aiosqlite:///./sharebox.db"

    # Security
    session_max_age_minutes: int = 60 * 24 * 7
    allowed_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    session_cookie_secure: bool = True

    # Initial administrator, created at startup when both are set
    admin_email: str | None = None
    admin_password: str | None = None

    # Storage
    storage_capacity_bytes: int = 1024 * 1024 * 1024  # 1 GiB
    slug_length: int = 6
    slug_max_attempts: int = 10

    # Scheduler
    storage_check_interval_seconds: int = 300
    storage_warning_ratio: float = 0.1

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()


settings = get_settings()
