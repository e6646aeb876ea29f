import os
import sys
import json
import math
import logging

logger = logging.getLogger("Soundscape.Preferences")

def _get_prefs_dir():
    """Get the writable data directory for preferences."""
    override = os.environ.get("SOUNDSCAPE_PREFS_DIR")
    if override:
        return override
    if getattr(sys, 'frozen', False) and sys.platform == 'darwin':
        return os.path.join(os.path.expanduser("~"), "Library", "Application Support", "Soundscape")
    else:
        return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")

# Keys that survive a restart. Favorites and mixes are deliberately absent.
MIXER_PREF_KEYS = ("volume", "loop_enabled", "fade_in_seconds", "fade_out_seconds")


def get_prefs_file():
    return os.path.join(_get_prefs_dir(), "user_preferences.json")

def load_preferences():
    """Load user preferences from JSON."""
    prefs_file = get_prefs_file()
    if not os.path.exists(prefs_file):
        return {}

    try:
        with open(prefs_file, 'r') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Error loading preferences: {e}")
        return {}

def save_preferences(prefs):
    """Save user preferences dictionary to JSON."""
    prefs_file = get_prefs_file()
    try:
        data_dir = os.path.dirname(prefs_file)
        if not os.path.exists(data_dir):
            os.makedirs(data_dir, exist_ok=True)

        # Merge with existing
        current = load_preferences()
        current.update(prefs)

        with open(prefs_file, 'w') as f:
            json.dump(current, f, indent=2)

    except OSError as e:
        logger.error(f"Error saving preferences: {e}")

def get_theme_preference():
    """Get the name of the saved theme."""
    prefs = load_preferences()
    return prefs.get("theme", None)

def set_theme_preference(theme_name):
    """Save the theme preference."""
    save_preferences({"theme": theme_name})

def _coerce_mixer_value(key, value):
    """Return a usable value for a mixer key, or None if the saved one is bad."""
    if key == "loop_enabled":
        return value if isinstance(value, bool) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    if key == "volume":
        return max(0.0, min(1.0, value))
    return max(0.0, value)

def get_mixer_preferences():
    """
    Return the saved mixer settings (only known keys).

    Hand-edited values of the wrong type are dropped so callers fall back
    to their defaults; out-of-range numbers are clamped.
    """
    prefs = load_preferences()
    settings = {}
    for key in MIXER_PREF_KEYS:
        if key not in prefs:
            continue
        value = _coerce_mixer_value(key, prefs[key])
        if value is None:
            logger.warning(f"Ignoring invalid saved {key}: {prefs[key]!r}")
            continue
        settings[key] = value
    return settings

def set_mixer_preferences(state):
    """Persist volume/loop/fade settings from a MixerState snapshot."""
    save_preferences({
        "volume": state.shared_volume,
        "loop_enabled": state.loop_enabled,
        "fade_in_seconds": state.fade_in_seconds,
        "fade_out_seconds": state.fade_out_seconds,
    })
