"""JSON-based settings persistence for the availability calendar."""

import json
import os

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".availability-calendar-settings.json")

_DEFAULTS = {
    "data_path": None,
    "export_path": None,
    "backup_path": None,
    "name": "",
    "email": "",
    "log_level": "INFO",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(path or _SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
        if not isinstance(stored, dict):
            return settings
        for key in ("data_path", "export_path", "backup_path"):
            if key in stored and isinstance(stored[key], str) and stored[key]:
                settings[key] = os.path.expanduser(stored[key])
        for key in ("name", "email"):
            if key in stored and isinstance(stored[key], str):
                settings[key] = stored[key]
        level = stored.get("log_level")
        if isinstance(level, str) and level.upper() in _LOG_LEVELS:
            settings["log_level"] = level.upper()
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        pass
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    with open(path or _SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
