"""
Configuration constants for Soundscape.

All tunable parameters in one place for easy adjustment and debugging.
Modify these values to fine-tune fades, the sleep timer, and UI appearance.
"""

import sys
import os
from themes import THEMES, DEFAULT_THEME
from utils.preferences import get_theme_preference

# =============================================================================
# PATHS
# =============================================================================

# HELPER: Detect if we are running as a compiled exe or a script
def get_base_path():
    if getattr(sys, 'frozen', False):
        # We are running as an exe - use the folder the exe is sitting in
        return os.path.dirname(sys.executable)
    else:
        # We are running as a script - use the script's folder
        return os.path.dirname(os.path.abspath(__file__))

# ROOT DIR
BASE_DIR = get_base_path()

# ASSET DIR (For bundled read-only files like the sound loops)
# If using --onefile, internal assets are in sys._MEIPASS
def get_asset_path(relative_path):
    if getattr(sys, 'frozen', False):
        base = sys._MEIPASS
    else:
        base = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(base, relative_path)

# Folder holding the ambient loops (<resource_ref>.<ext>)
# Can be overridden with the SOUNDSCAPE_SOUNDS_DIR environment variable
SOUNDS_DIR = os.environ.get("SOUNDSCAPE_SOUNDS_DIR") or get_asset_path("sounds")

# =============================================================================
# AUDIO OUTPUT SETTINGS
# =============================================================================

# Sample rate for the output device (Hz)
SAMPLE_RATE = 44100

# Number of audio channels (2 = stereo)
CHANNELS = 2

# Pygame mixer buffer size (lower = less latency, but more CPU)
# Ambient loops don't need low latency, 2048 is kind to older machines
MIXER_BUFFER_SIZE = 2048

# Number of simultaneous pygame channels.
# Must be >= the number of tracks in the catalog or starts will fail
MIXER_NUM_CHANNELS = 16

# Set this environment variable to run without a sound card (tests, CI)
FORCE_MOCK_AUDIO_ENV = "SOUNDSCAPE_FORCE_MOCK_AUDIO"

# =============================================================================
# MIXER DEFAULTS
# =============================================================================

# Master volume applied to every active track (0.0 - 1.0)
DEFAULT_VOLUME = 0.5

# Whether tracks loop forever or play once
DEFAULT_LOOP_ENABLED = False

# =============================================================================
# FADE SETTINGS
# =============================================================================

# Fade durations (seconds)
# TUNABLE: Longer fades are gentler when falling asleep
DEFAULT_FADE_IN_S = 2.0
DEFAULT_FADE_OUT_S = 2.0

# Slider bounds for the settings panel
FADE_MIN_S = 0.0
FADE_MAX_S = 5.0

# How many volume updates per second a fade writes to the handle
# Below ~20 the ramp becomes audibly stepped
FADE_UPDATE_HZ = 50

# =============================================================================
# SLEEP TIMER SETTINGS
# =============================================================================

# Choices offered in the settings panel (minutes, 0 = off)
SLEEP_TIMER_CHOICES = (0, 15, 30, 60, 120)

# Seconds per timer "minute" (only changed by tests)
SLEEP_TIMER_UNIT_S = 60.0

# =============================================================================
# MONITOR THREAD SETTINGS
# =============================================================================

# How often the facade checks for tracks that finished on their own (seconds)
MONITOR_INTERVAL = 0.25

# How often the UI polls the event queue (milliseconds)
UI_POLL_MS = 16

# How often the sleep timer countdown label refreshes (milliseconds)
UI_COUNTDOWN_MS = 500

# =============================================================================
# UI SETTINGS - WINDOW
# =============================================================================

WINDOW_TITLE = "Soothing Sounds"
WINDOW_WIDTH = 900
WINDOW_HEIGHT = 680
WINDOW_MIN_WIDTH = 640
WINDOW_MIN_HEIGHT = 480

# =============================================================================
# UI SETTINGS - COLORS (DYNAMIC LOADING)
# =============================================================================

# Global variables to hold current theme colors
COLOR_BG_DARK = ""
COLOR_BG_MEDIUM = ""
COLOR_BTN_PRIMARY = ""
COLOR_BTN_SUCCESS = ""
COLOR_BTN_DANGER = ""
COLOR_BTN_TEXT = "#ffffff"
COLOR_BTN_DISABLED = "#3a4a3b"
COLOR_TEXT = ""
COLOR_TEXT_DIM = ""
COLOR_FAVORITE = "#f5c542"
APPEARANCE_MODE = "dark"

def load_theme():
    """Loads the user's theme preference and updates global color variables."""
    global COLOR_BG_DARK, COLOR_BG_MEDIUM, COLOR_BTN_PRIMARY, COLOR_BTN_SUCCESS, \
           COLOR_BTN_DANGER, COLOR_BTN_TEXT, COLOR_TEXT, COLOR_TEXT_DIM, \
           APPEARANCE_MODE

    # 1. Load User Preference
    _user_theme = get_theme_preference()
    if not _user_theme or _user_theme not in THEMES:
        _user_theme = DEFAULT_THEME

    # 2. Get the Palette
    _palette = THEMES[_user_theme]

    # 3. Apply Colors
    COLOR_BG_DARK = _palette["bg_primary"]
    COLOR_BG_MEDIUM = _palette["bg_secondary"]
    COLOR_BTN_PRIMARY = _palette["fg_primary"]
    COLOR_BTN_TEXT = _palette.get("btn_text", "#ffffff")
    COLOR_BTN_SUCCESS = _palette.get("btn_success", "#2cc985")
    COLOR_BTN_DANGER = _palette.get("btn_danger", "#d63031")
    COLOR_TEXT = _palette["text_main"]
    COLOR_TEXT_DIM = _palette["text_dim"]

    # Light or dark widgets depending on background brightness
    bg_brightness = int(COLOR_BG_DARK[1:3], 16) + int(COLOR_BG_DARK[3:5], 16) + int(COLOR_BG_DARK[5:7], 16)
    APPEARANCE_MODE = "light" if bg_brightness > 382 else "dark"


# Load the theme immediately when config is imported
load_theme()


# =============================================================================
# UI SETTINGS - LAYOUT
# =============================================================================

# Sound grid
GRID_COLUMNS = 4
TILE_WIDTH = 170
TILE_HEIGHT = 110

# Button sizes
BTN_HEIGHT = 36
BTN_FONT_SIZE = 13

# Spacing
PADDING_SMALL = 5
PADDING_MEDIUM = 10
PADDING_LARGE = 20

# =============================================================================
# FILE SETTINGS
# =============================================================================

# Supported audio formats, tried in this order when resolving a resource
SUPPORTED_FORMATS = ('.mp3', '.ogg', '.wav', '.flac')
