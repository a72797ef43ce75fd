"""JSON-based settings and completed-days persistence for the mini heatmap."""

import json
import logging
import os
from datetime import MAXYEAR, MINYEAR, date

from heatmap_logic import MONDAY, SUNDAY, parse_completed_dates

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-heatmap-settings.json")

_DEFAULTS = {
    "year": None,
    "square_size": 18,
    "padding": 2.5,
    "month_gap": 20,
    "week_start": "sunday",
    "completed_dates": [],
    "window_x": None,
    "window_y": None,
}

_WEEK_STARTS = {"sunday": SUNDAY, "monday": MONDAY}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or invalid keys."""
    settings = dict(_DEFAULTS)
    settings["completed_dates"] = []
    try:
        with open(path or _SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file: %s", exc)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file without a JSON object")
        return settings

    for key in ("year", "window_x", "window_y"):
        if isinstance(stored.get(key), int) and not isinstance(stored[key], bool):
            settings[key] = stored[key]
    if settings["year"] is not None and not MINYEAR <= settings["year"] <= MAXYEAR:
        logger.warning("Ignoring out-of-range year %r", settings["year"])
        settings["year"] = None
    if _is_number(stored.get("square_size")) and stored["square_size"] > 0:
        settings["square_size"] = stored["square_size"]
    for key in ("padding", "month_gap"):
        if _is_number(stored.get(key)) and stored[key] >= 0:
            settings[key] = stored[key]
    if stored.get("week_start") in _WEEK_STARTS:
        settings["week_start"] = stored["week_start"]
    if isinstance(stored.get("completed_dates"), list):
        settings["completed_dates"] = [d for d in stored["completed_dates"] if isinstance(d, str)]
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    with open(path or _SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)


def first_weekday(settings: dict) -> int:
    return _WEEK_STARTS[settings.get("week_start", "sunday")]


def toggle_completed(settings: dict, d: date) -> list[str]:
    """Mark *d* completed, or un-mark it if it already was; return the new list."""
    key = d.isoformat()
    target = parse_completed_dates([key])
    kept = [s for s in settings.get("completed_dates", [])
            if not parse_completed_dates([s]) & target]
    if len(kept) == len(settings.get("completed_dates", [])):
        kept.append(key)
    settings["completed_dates"] = sorted(kept)
    return settings["completed_dates"]
