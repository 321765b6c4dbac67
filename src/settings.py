"""Static configuration for searchgate.

All user-editable settings (database, prefilter thresholds, logging) live in
a single JSON file for quick edits without touching Python.
"""

import json
import os

from dotenv import load_dotenv

from core.config import build_prefilter_config

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# SEARCHGATE_CONFIG (from the environment or .env) can point elsewhere.
load_dotenv()
CONFIG_PATH = os.getenv("SEARCHGATE_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database holding search history.
_database = _CONFIG.get("database", {})
DB_PATH = _resolve_path(_database.get("path", "searchgate.db"))

# Prefilter switches and thresholds.
# - include_episodes: search single-episode torrents too
# - include_non_videos: search torrents containing non-video files
# - exclude_older: skip items first searched longer ago than this
# - exclude_recent_search: skip items searched more recently than this
PREFILTER = build_prefilter_config(_CONFIG.get("prefilter", {}))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
