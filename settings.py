"""JSON-based settings persistence for the mini Jalali calendar."""

import json
import logging
import os

from picker import YEAR_ANCHORS

logger = logging.getLogger(__name__)

_DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".mini-jalali-calendar.json")

_DEFAULTS = {
    "year_span_before": 50,
    "year_span_after": 49,
    "year_anchor": "cursor",
    "holidays": [],
    "holiday_color": "#CC0000",
    "window_x": None,
    "window_y": None,
}


def settings_path() -> str:
    """Return the settings file path (``MINI_JALALI_SETTINGS`` overrides it)."""
    return os.environ.get("MINI_JALALI_SETTINGS") or _DEFAULT_PATH


def load_settings() -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    settings = dict(_DEFAULTS)
    settings["holidays"] = []
    path = settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings in %s: expected a JSON object", path)
        return settings

    for key in ("year_span_before", "year_span_after"):
        value = stored.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            settings[key] = value
    for key in ("window_x", "window_y"):
        value = stored.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            settings[key] = value
    if stored.get("year_anchor") in YEAR_ANCHORS:
        settings["year_anchor"] = stored["year_anchor"]
    if isinstance(stored.get("holidays"), list):
        settings["holidays"] = [k for k in stored["holidays"] if isinstance(k, str)]
    if isinstance(stored.get("holiday_color"), str):
        settings["holiday_color"] = stored["holiday_color"]
    return settings


def save_settings(settings: dict) -> None:
    """Persist settings to disk."""
    with open(settings_path(), "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2, ensure_ascii=False)
