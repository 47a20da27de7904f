"""
Runtime settings

Loads settings from environment variables and provides defaults.
Reads a .env file from the working directory using python-dotenv.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .models.config import DEFAULT_CONFIG, FeedConfig
from .services.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Process-level settings for a feedrank deployment."""

    # JSON file holding persisted interactions/preferences. None keeps them in memory.
    storage_path: Optional[Path] = None
    # Optional JSON file with FeedConfig overrides (see FeedConfig.from_dict).
    config_path: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables (after reading .env)."""
        load_dotenv(find_dotenv(usecwd=True))

        def _path_env(key: str) -> Optional[Path]:
            v = os.getenv(key, "").strip()
            return Path(v).expanduser() if v else None

        return cls(
            storage_path=_path_env("FEEDRANK_STORAGE_PATH"),
            config_path=_path_env("FEEDRANK_CONFIG_PATH"),
            log_level=os.getenv("FEEDRANK_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the settings.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        if self.config_path is not None and not self.config_path.is_file():
            errors.append(f"Config file not found: {self.config_path}")
        if self.storage_path is not None and self.storage_path.is_dir():
            errors.append(f"Storage path is a directory: {self.storage_path}")
        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            errors.append(f"Unknown log level: {self.log_level}")
        return len(errors) == 0, errors


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_feed_config(settings: Settings) -> FeedConfig:
    """FeedConfig from settings.config_path, or DEFAULT_CONFIG when unset."""
    if settings.config_path is None:
        return DEFAULT_CONFIG
    with open(settings.config_path) as f:
        return FeedConfig.from_dict(json.load(f))


def create_kv_store(settings: Settings) -> KeyValueStore:
    """JSON file store when storage_path is set, else in-memory."""
    if settings.storage_path is not None:
        logger.info("[startup] key-value store: json file %s", settings.storage_path)
        return JsonFileKeyValueStore(settings.storage_path)
    logger.info("[startup] key-value store: in-memory")
    return InMemoryKeyValueStore()


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global _settings
    _settings = None
    return get_settings()
