"""
Mixing core for Soundscape.

Contains the track mixer, fades, the sleep timer and the facade the UI talks
to. These modules are UI-agnostic and can be used independently for testing.
"""

from .catalog import Category, SoundCatalog, TrackDescriptor
from .errors import (
    MixerError, OutputAcquisitionFailed, PlaybackError, ResourceNotFound, ResourceUnreadable,
)
from .fade_controller import FadeController
from .mixer_facade import MixerFacade, MixerState
from .sleep_timer import SleepTimer, SleepTimerState, TimerStatus
from .track_mixer import ActiveTrack, TrackMixer

__all__ = [
    'ActiveTrack',
    'Category',
    'FadeController',
    'MixerError',
    'MixerFacade',
    'MixerState',
    'OutputAcquisitionFailed',
    'PlaybackError',
    'ResourceNotFound',
    'ResourceUnreadable',
    'SleepTimer',
    'SleepTimerState',
    'SoundCatalog',
    'TimerStatus',
    'TrackDescriptor',
    'TrackMixer',
]
