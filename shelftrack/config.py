"""Configuration management for shelftrack.

Settings live in a small JSON file in the platform configuration directory:
where the library database is, how long a book is assumed to be when a
reading session does not say, and how patient the metadata search should be.
Missing keys always fall back to ``DEFAULT_CONFIG``.
"""

import json
import logging
import os
import platform
from functools import lru_cache
from pathlib import Path
from typing import Any

from shelftrack.exceptions import ValidationError

logger = logging.getLogger(__name__)

APP_DIR_NAME = "shelftrack"
CONFIG_FILE_NAME = "config.json"
DATABASE_FILE_NAME = "shelftrack.db"

DEFAULT_CONFIG: dict[str, Any] = {
    "log_level": "INFO",
    "database_path": "",  # filled in with <data dir>/shelftrack.db on first use
    "estimated_total_words": 80_000,
    "metadata_timeout": 5.0,
    "metadata_max_results": 10,
}

# Stored as numbers; values from the command line arrive as strings
NUMERIC_KEYS = {
    "estimated_total_words": int,
    "metadata_timeout": float,
    "metadata_max_results": int,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_config_dir() -> Path:
    """Return the per-user configuration directory, creating it if needed."""
    home = Path.home()
    system = platform.system()

    if system == "Windows":
        base = Path(os.getenv("APPDATA", str(home / "AppData" / "Roaming")))
    elif system == "Darwin":
        base = home / "Library" / "Application Support"
    else:
        base = home / ".config"

    config_dir = base / APP_DIR_NAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_data_dir() -> Path:
    """Return the directory holding the library database."""
    data_dir = get_config_dir() / "data"
    data_dir.mkdir(exist_ok=True)
    return data_dir


@lru_cache(maxsize=1)
def get_config_file_path() -> Path:
    """Return the location of ``config.json``."""
    return get_config_dir() / CONFIG_FILE_NAME


def _default_database_path() -> str:
    return str(get_data_dir() / DATABASE_FILE_NAME)


def load_config() -> dict[str, Any]:
    """Read the configuration, merged over the defaults.

    On first run the file does not exist yet; it is written with the
    defaults and a database path inside the data directory. An unreadable
    or corrupt file is logged and the defaults are used for this run.
    """
    config_file = get_config_file_path()
    config = DEFAULT_CONFIG.copy()

    if not config_file.exists():
        config["database_path"] = _default_database_path()
        logger.info("Creating configuration file at %s", config_file)
        save_config(config)
        return config

    try:
        with open(config_file, encoding="utf-8") as f:
            stored = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read configuration from %s: %s", config_file, e)
        logger.info("Falling back to default configuration")
        return config

    config.update(stored)
    logger.debug("Loaded configuration from %s", config_file)
    return config


def save_config(config: dict[str, Any]) -> bool:
    """Write the configuration file.

    Returns:
        bool: True if the file was written
    """
    config_file = get_config_file_path()
    try:
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
    except OSError as e:
        logger.error("Could not write configuration to %s: %s", config_file, e)
        return False

    logger.debug("Saved configuration to %s", config_file)
    return True


def get_config_value(key: str, default: Any = None) -> Any:
    """Look up a single setting, returning ``default`` for unknown keys."""
    return load_config().get(key, default)


def _coerce_value(key: str, value: Any) -> Any:
    if key in NUMERIC_KEYS:
        try:
            return NUMERIC_KEYS[key](value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid value for {key}: {value!r}") from e

    if key == "log_level":
        level = str(value).upper()
        if level not in LOG_LEVELS:
            raise ValidationError(f"Invalid log level: {level} (choose from {', '.join(LOG_LEVELS)})")
        return level

    return value


def set_config_value(key: str, value: Any) -> bool:
    """Change a single setting and save the file.

    Args:
        key: One of the keys in ``DEFAULT_CONFIG``
        value: New value; numeric settings and the log level are normalized

    Returns:
        bool: True if the file was written

    Raises:
        ValidationError: If the key is unknown or the value is unusable
    """
    if key not in DEFAULT_CONFIG:
        raise ValidationError(f"Unknown configuration key: {key}")

    config = load_config()
    config[key] = _coerce_value(key, value)
    return save_config(config)


def get_database_path() -> str:
    """Return the library database path, storing the default if none is set."""
    path = get_config_value("database_path", "")
    if path:
        return path

    path = _default_database_path()
    set_config_value("database_path", path)
    return path


def list_config() -> dict[str, Any]:
    """All settings plus the location of the configuration file, for display."""
    listing = load_config()
    listing["config_file"] = str(get_config_file_path())
    return listing
