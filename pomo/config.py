"""Application configuration management."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from pomo.models import AppConfig

log = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".config" / "pomo"
_DATA_DIR = Path.home() / ".local" / "share" / "pomo"

_CONFIG_FILE = _CONFIG_DIR / "config.json"
_SETTINGS_FILE = _CONFIG_DIR / "settings.json"

DB_FILENAME = "pomo.db"


def load_config() -> AppConfig:
    """Load config from disk, returning defaults if none exists."""
    if _CONFIG_FILE.exists():
        try:
            data = json.loads(_CONFIG_FILE.read_text())
            return AppConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError):
            log.warning("Ignoring unreadable config file %s", _CONFIG_FILE, exc_info=True)
    return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Write config to disk. Returns the config file path."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    _CONFIG_FILE.write_text(config.model_dump_json(indent=2))
    return _CONFIG_FILE


def get_data_dir() -> Path:
    """Resolve the data directory from config (or default), creating it."""
    config = load_config()
    data_dir = Path(config.data_dir) if config.data_dir is not None else _DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """Return the session database path inside the data directory."""
    return get_data_dir() / DB_FILENAME


def get_settings_path() -> Path:
    """Return the path of the timer settings file."""
    return _SETTINGS_FILE


def set_data_dir(path: str) -> AppConfig:
    """Store session data under a custom directory and save config."""
    resolved = Path(path).expanduser().resolve()
    resolved.mkdir(parents=True, exist_ok=True)
    config = load_config()
    config.data_dir = str(resolved)
    save_config(config)
    return config


def reset_data_dir() -> AppConfig:
    """Go back to the default local data directory."""
    config = load_config()
    config.data_dir = None
    save_config(config)
    return config
