"""Shared constants for the workout tracker modules."""

from __future__ import annotations

from pathlib import Path

# Number of series the planning selector defaults to for each exercise
DEFAULT_SERIES_COUNT = 3

# Allowed range when planning series for an exercise
MIN_SERIES_COUNT = 1
MAX_SERIES_COUNT = 10

# Default rest duration between series in seconds
DEFAULT_REST_TIME = 90

# Base URL of the workout API when no setting or environment override exists
DEFAULT_API_URL = "http://localhost:3000"

# Folder holding settings and stored credentials
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

__all__ = [
    "DEFAULT_SERIES_COUNT",
    "MIN_SERIES_COUNT",
    "MAX_SERIES_COUNT",
    "DEFAULT_REST_TIME",
    "DEFAULT_API_URL",
    "DATA_DIR",
]
