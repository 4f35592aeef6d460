"""Configuration utilities for the xmlrelay services."""

from __future__ import annotations

import os
import tempfile
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent

DEFAULT_MAX_UPLOAD_SIZE = 25 * 1024 * 1024


def _load_environment() -> None:
    """Load environment variables from a ``.env`` file if present."""

    explicit_path = os.getenv("XMLRELAY_ENV_FILE")
    candidates = []

    if explicit_path:
        candidates.append(Path(explicit_path))

    candidates.append(PROJECT_ROOT / ".env")

    for candidate in candidates:
        try_path = candidate.expanduser()
        if try_path.exists():
            load_dotenv(try_path, override=False)


_load_environment()


def _database_url_default() -> str:
    return (
        os.getenv("DATABASE_URL") or os.getenv("DB_URL") or "sqlite:///./xmlrelay.db"
    )


def _staging_dir_default() -> Path:
    raw = os.getenv("STAGING_DIR")
    if raw and raw.strip():
        return Path(raw.strip())
    return Path(tempfile.gettempdir()) / "xmlrelay-staging"


class Settings(BaseModel):
    """Process-wide configuration loaded from environment variables."""

    database_url: str = Field(default_factory=_database_url_default)
    staging_dir: Path = Field(default_factory=_staging_dir_default)
    max_upload_size: int = Field(
        default_factory=lambda: int(
            os.getenv("MAX_UPLOAD_SIZE", str(DEFAULT_MAX_UPLOAD_SIZE))
        )
    )
    storage_service_url: str = Field(
        default_factory=lambda: os.getenv(
            "STORAGE_SERVICE_URL", "http://localhost:5189"
        )
    )
    storage_receive_path: str = Field(
        default_factory=lambda: os.getenv(
            "STORAGE_RECEIVE_PATH", "/ReceiveProcessedFile"
        )
    )
    api_key: str = Field(
        default_factory=lambda: os.getenv("PROCESSED_FILES_API_KEY", ""),
        repr=False,
    )
    forward_connect_timeout_s: float = Field(
        default_factory=lambda: float(os.getenv("FORWARD_CONNECT_TIMEOUT_S", "10"))
    )
    forward_read_timeout_s: float = Field(
        default_factory=lambda: float(os.getenv("FORWARD_READ_TIMEOUT_S", "60"))
    )
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    ingestion_port: int = Field(
        default_factory=lambda: int(os.getenv("INGESTION_PORT", "5188"))
    )
    storage_port: int = Field(
        default_factory=lambda: int(os.getenv("STORAGE_PORT", "5189"))
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))

    @field_validator("staging_dir", mode="after")
    @classmethod
    def _ensure_staging_dir(cls, value: Path) -> Path:
        value.mkdir(parents=True, exist_ok=True)
        return value

    @field_validator("max_upload_size", mode="after")
    @classmethod
    def _normalise_upload_size(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_MAX_UPLOAD_SIZE

    @field_validator("storage_service_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("storage_receive_path", mode="after")
    @classmethod
    def _ensure_leading_slash(cls, value: str) -> str:
        value = value.strip() or "/ReceiveProcessedFile"
        return value if value.startswith("/") else f"/{value}"

    @property
    def receive_url(self) -> str:
        """Absolute URL of the Storage Service receive endpoint."""

        return f"{self.storage_service_url}{self.storage_receive_path}"


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached settings so that subsequent calls reload from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache", "PROJECT_ROOT"]
