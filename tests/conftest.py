import os
import time

import pytest

# Facades built without explicit backends must never open a real device
os.environ.setdefault("SOUNDSCAPE_FORCE_MOCK_AUDIO", "1")

from soundscape.catalog import SoundCatalog
from soundscape.fade_controller import FadeController
from soundscape.mixer_facade import MixerFacade
from soundscape.mock_backend import MockOutput, MockPlayback
from soundscape.track_mixer import TrackMixer

FAST_FADE = 0.05
TIMER_UNIT = 0.01


def wait_until(predicate, timeout=2.0, interval=0.005):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def catalog():
    return SoundCatalog()


@pytest.fixture
def playback():
    return MockPlayback()


@pytest.fixture
def output():
    return MockOutput()


@pytest.fixture
def mixer(catalog, playback):
    return TrackMixer(
        catalog, playback, FadeController(),
        volume=0.5,
        fade_in_seconds=FAST_FADE,
        fade_out_seconds=FAST_FADE,
    )


@pytest.fixture
def facade(catalog, playback, output):
    facade = MixerFacade(
        catalog, playback, output,
        volume=0.5,
        fade_in_seconds=FAST_FADE,
        fade_out_seconds=FAST_FADE,
        timer_unit_seconds=TIMER_UNIT,
        monitor_interval=0.02,
    )
    facade.start()
    yield facade
    facade.shutdown()


@pytest.fixture
def prefs_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("SOUNDSCAPE_PREFS_DIR", str(tmp_path))
    return tmp_path
