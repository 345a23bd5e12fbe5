"""Configuration loader for TomatoStats.

Handles loading, saving, and default creation of config.json.
Resolves platform-appropriate data directories:
  - macOS:   ~/Library/Application Support/TomatoStats
  - Windows: %APPDATA%/TomatoStats
  - Other:   ~/.tomatostats
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tomatostats.core.calendar_anchor import CalendarAnchor
from tomatostats.core.errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "TomatoStats"


def get_data_directory() -> Path:
    """Return the platform-appropriate data directory for TomatoStats."""
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    else:
        base = Path.home()
        return base / ".tomatostats"
    return base / "TomatoStats"


def get_default_config() -> dict[str, Any]:
    """Return the default configuration dictionary."""
    data_dir = get_data_directory()
    return {
        "first_weekday": 0,  # Monday
        "timezone": None,    # system local time
        "storage_key": DEFAULT_STORAGE_KEY,
        "database_path": str(data_dir / "tomatostats.db"),
        "web": {
            "host": "127.0.0.1",
            "port": 5556,
        },
        "log_level": "INFO",
    }


def get_default_config_path() -> Path:
    """Return the default path for config.json."""
    return get_data_directory() / "config.json"


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a JSON file.

    If *path* is ``None``, the platform default location is used.
    When the file does not exist, a default configuration is created,
    written to disk, and returned.  If the file exists but is invalid
    JSON, the error is logged and defaults are returned.
    """
    config_path = Path(path) if path is not None else get_default_config_path()

    if not config_path.exists():
        logger.info("Config file not found at %s, creating defaults.", config_path)
        defaults = get_default_config()
        save_config(defaults, config_path)
        return defaults

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError("Top-level JSON value must be an object")
        return data
    except (json.JSONDecodeError, ValueError, OSError) as exc:
        logger.error("Failed to load config from %s: %s, using defaults.", config_path, exc)
        return get_default_config()


def save_config(config: dict[str, Any], path: str | Path | None = None) -> None:
    """Write *config* to a JSON file.

    If *path* is ``None``, the platform default location is used.
    Parent directories are created automatically.
    """
    config_path = Path(path) if path is not None else get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as fh:
        json.dump(config, fh, indent=2, ensure_ascii=False)
        fh.write("\n")


def anchor_from_config(config: dict[str, Any]) -> CalendarAnchor:
    """Build the process-wide CalendarAnchor from *config*.

    Raises InvalidInputError for an unknown timezone name or an
    out-of-range first weekday.
    """
    tz_name = config.get("timezone")
    tz = None
    if tz_name:
        try:
            tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise InvalidInputError(f"Unknown timezone: {tz_name!r}") from exc
    return CalendarAnchor(first_weekday=config.get("first_weekday", 0), tz=tz)
