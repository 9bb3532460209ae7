"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _default_data_dir() -> Path:
    return Path.home() / ".parcel"


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `PARCEL_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    data_dir : Path
        Application data directory; the notes document lives at
        ``<data_dir>/parcel/notes.json``. Maps from `PARCEL_DATA_DIR`.
    history_size : int
        Capacity of the undo/redo stack; maps from `PARCEL_HISTORY_SIZE`.
    autosave_delay_ms : int
        Quiescence interval before a debounced save fires; maps from
        `PARCEL_AUTOSAVE_DELAY_MS`.
    """

    environment: EnvName = Field(default="dev", alias="PARCEL_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    data_dir: Path = Field(default_factory=_default_data_dir, alias="PARCEL_DATA_DIR")
    history_size: int = Field(default=50, ge=1, alias="PARCEL_HISTORY_SIZE")
    autosave_delay_ms: int = Field(default=600, ge=0, alias="PARCEL_AUTOSAVE_DELAY_MS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("PARCEL_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "parcel") -> logging.Logger:
    """Return a logger under the ``parcel`` namespace configured to `LOG_LEVEL`.

    Only the ``parcel`` root logger gets a handler; child loggers such as
    ``parcel.core.store.persistence`` inherit it through propagation.
    """
    root = logging.getLogger("parcel")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        root.addHandler(handler)
        root.propagate = False
    level = load_settings().log_level_numeric()
    root.setLevel(level)

    if name == "parcel":
        return root
    logger = logging.getLogger(name if name.startswith("parcel.") else f"parcel.{name}")
    logger.setLevel(level)
    return logger
