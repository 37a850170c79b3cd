"""Engine configuration loaded from environment variables."""

from __future__ import annotations

import locale
import logging
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

from notes_engine.models import SortMode
from notes_engine.storage import DEFAULT_STORAGE_KEY

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from .env file and NOTES_* variables."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NOTES_",
        "extra": "ignore",
    }

    # Storage
    storage_backend: Literal["memory", "file", "redis", "none"] = "file"
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_path: Path = Path("notes_data.json")

    # Redis
    redis_url: str = "redis://localhost:6379"
    redis_prefix: str = ""

    # View defaults
    default_sort_mode: SortMode = SortMode.UPDATED
    collation_locale: str = ""  # "" uses the host environment

    # Logging
    log_level: str = "INFO"


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler with the shared line format."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def configure_collation(name: str = "") -> None:
    """Set LC_COLLATE used for alphabetical note ordering."""
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as exc:
        logger.warning("Collation locale %r unavailable, keeping current: %s", name, exc)


settings = Settings()
