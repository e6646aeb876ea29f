"""Chooses the playback primitive and output session for the mixer."""

import os
import logging

from config import FORCE_MOCK_AUDIO_ENV, SOUNDS_DIR
from .mock_backend import MockOutput, MockPlayback

logger = logging.getLogger("Soundscape.Backends")


def create_backends(sounds_dir=None, force_mock=None):
    """
    Build the (playback, output) pair.

    Args:
        sounds_dir: Folder with the sound files (defaults to config.SOUNDS_DIR)
        force_mock: Use the silent mock backend. Defaults to the
                    SOUNDSCAPE_FORCE_MOCK_AUDIO environment variable.
    """
    if force_mock is None:
        force_mock = bool(os.environ.get(FORCE_MOCK_AUDIO_ENV))

    if force_mock:
        logger.warning("Using mock audio backend - no sound will be produced")
        return MockPlayback(), MockOutput()

    from .pygame_backend import PygameOutput, PygamePlayback

    return PygamePlayback(sounds_dir or SOUNDS_DIR), PygameOutput()
