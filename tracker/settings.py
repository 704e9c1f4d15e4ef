from __future__ import annotations

"""Utility functions for loading and saving user settings.

The settings are stored as a list of dictionaries to preserve order.
Each dictionary contains ``key``, ``value`` and ``type`` entries.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from tracker import DATA_DIR, DEFAULT_API_URL

logger = logging.getLogger(__name__)

# Path to the JSON file where settings are persisted.
SETTINGS_PATH = DATA_DIR / "settings.json"

# Environment variable that takes precedence over the stored API URL.
API_URL_ENV = "WORKOUT_API_URL"

# Default settings to initialize the file on first run.
DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    {"key": "api_base_url", "value": DEFAULT_API_URL, "type": "str"},
    {"key": "request_timeout", "value": 30.0, "type": "float"},
]

# Internal cache so settings are only read from disk once.
_settings_cache: List[Dict[str, Any]] | None = None


def load_settings(path: Path | None = None) -> List[Dict[str, Any]]:
    """Load settings from :data:`SETTINGS_PATH` or create defaults."""
    path = path or SETTINGS_PATH
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
            if isinstance(data, list):
                return data
            logger.warning("Ignoring malformed settings file %s", path)
        except (OSError, json.JSONDecodeError):
            logger.exception("Could not read settings from %s", path)
    defaults = [item.copy() for item in DEFAULT_SETTINGS]
    save_settings(defaults, path)
    return defaults


def save_settings(settings: List[Dict[str, Any]], path: Path | None = None) -> None:
    """Persist ``settings`` to :data:`SETTINGS_PATH`."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(settings, fh)


def get_settings() -> List[Dict[str, Any]]:
    """Return the cached settings list, loading from disk if needed."""
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = load_settings()
    return _settings_cache


def reset_cache() -> None:
    """Forget cached settings so the next access reads from disk."""
    global _settings_cache
    _settings_cache = None


def get_value(key: str) -> Any:
    """Fetch the value associated with ``key``."""
    for item in get_settings():
        if item.get("key") == key:
            return item.get("value")
    for item in DEFAULT_SETTINGS:
        if item["key"] == key:
            return item["value"]
    return None


def set_value(key: str, value: Any) -> None:
    """Update ``key`` with ``value`` and persist the change."""
    settings = get_settings()
    for item in settings:
        if item.get("key") == key:
            item["value"] = value
            break
    else:
        settings.append({"key": key, "value": value, "type": type(value).__name__})
    save_settings(settings)


def api_base_url() -> str:
    """Return the API URL, preferring the ``WORKOUT_API_URL`` environment variable."""
    return os.environ.get(API_URL_ENV) or get_value("api_base_url") or DEFAULT_API_URL


def request_timeout() -> float:
    return float(get_value("request_timeout"))
