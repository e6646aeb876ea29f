#!/usr/bin/env python3
"""
Soundscape - Ambient Sound Mixer

Mix looping ambient sounds (rain, waves, fireplace, ...) with shared volume,
fades, and a sleep timer.

Usage:
    python main.py [--sounds DIR] [--mock-audio] [--debug]
"""

import os
import sys

# Must be done BEFORE importing pygame (which happens in backend imports)
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = "1"

import logging
import argparse
from datetime import datetime

from config import (
    BASE_DIR, DEFAULT_VOLUME, DEFAULT_LOOP_ENABLED, DEFAULT_FADE_IN_S, DEFAULT_FADE_OUT_S,
)

# =============================================================================
# UTILS
# =============================================================================

def setup_logging(debug: bool = False) -> logging.Logger:
    log_dir = os.path.join(BASE_DIR, "logs")
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"soundscape_{timestamp}.log")

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout), logging.FileHandler(log_file)]
    )
    return logging.getLogger("Soundscape")

def check_dependencies():
    missing = []
    for dep in ['pygame', 'numpy', 'customtkinter']:
        try:
            __import__(dep)
        except ImportError:
            missing.append(dep)
    if missing:
        print(f"Missing: {', '.join(missing)}")
        sys.exit(1)

def build_facade(sounds_dir=None, force_mock=False):
    """Create the mixer with the user's saved settings."""
    from soundscape import MixerFacade
    from soundscape.backends import create_backends
    from utils.preferences import get_mixer_preferences

    playback, output = create_backends(sounds_dir=sounds_dir, force_mock=force_mock or None)
    prefs = get_mixer_preferences()
    return MixerFacade(
        playback=playback,
        output=output,
        volume=prefs.get("volume", DEFAULT_VOLUME),
        loop_enabled=prefs.get("loop_enabled", DEFAULT_LOOP_ENABLED),
        fade_in_seconds=prefs.get("fade_in_seconds", DEFAULT_FADE_IN_S),
        fade_out_seconds=prefs.get("fade_out_seconds", DEFAULT_FADE_OUT_S),
    )


# =============================================================================
# MAIN
# =============================================================================

def main():
    parser = argparse.ArgumentParser(description="Soundscape ambient sound mixer")
    parser.add_argument("--sounds", default=None, help="Folder containing the sound loops")
    parser.add_argument("--mock-audio", action="store_true", help="Run without producing sound")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    check_dependencies()
    logger = setup_logging(debug=args.debug)
    logger.info("Soundscape Starting")

    facade = build_facade(sounds_dir=args.sounds, force_mock=args.mock_audio)
    if not facade.start():
        logger.warning("Starting without audio output - sounds will fail until the device is available")

    try:
        from frontend.app import SoundscapeApp

        app = SoundscapeApp(facade)
        app.run()
    except Exception as e:
        logger.exception(f"Critical Error: {e}")
    finally:
        facade.shutdown()
        logger.info("Soundscape Exiting")

if __name__ == "__main__":
    main()
