"""
pygame playback backend for Soundscape.

Each track gets its own pygame.mixer.Sound and plays on its own Channel.
Sounds always play with loops=-1 so looping happens at the C/SDL layer; when
loop mode is off, a timer stops the channel at the end of the current pass.
That lets loop mode be switched on and off while a track is playing.
"""

import os
import time
import logging
import threading
from typing import Optional

# Must be set BEFORE pygame is imported
os.environ.setdefault('PYGAME_HIDE_SUPPORT_PROMPT', "1")

import pygame

from config import (
    SAMPLE_RATE, CHANNELS, MIXER_BUFFER_SIZE, MIXER_NUM_CHANNELS,
    SOUNDS_DIR, SUPPORTED_FORMATS,
)
from .errors import (
    OutputAcquisitionFailed, PlaybackError, ResourceNotFound, ResourceUnreadable,
)

logger = logging.getLogger("Soundscape.Pygame")


class PygameHandle:
    """A single ambient track on its own pygame channel."""

    def __init__(self, resource_ref: str, sound: pygame.mixer.Sound):
        self.resource_ref = resource_ref
        self.sound = sound
        self.length = sound.get_length()
        self.channel: Optional[pygame.mixer.Channel] = None

        self._volume = 0.0
        self._loop = False
        self._play_started = 0.0   # time.monotonic() when play() was called
        self._end_timer: Optional[threading.Timer] = None

        self.lock = threading.RLock()

    @property
    def volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        with self.lock:
            self._volume = max(0.0, min(1.0, volume))
            if self.sound is not None:
                self.sound.set_volume(self._volume)

    def set_loop(self, enabled: bool) -> None:
        with self.lock:
            self._loop = enabled
            if self.channel is None:
                return
            if enabled:
                self._cancel_end_timer()
            else:
                self._schedule_end_of_pass()

    def play(self) -> None:
        with self.lock:
            if self.sound is None:
                raise PlaybackError(f"Handle for '{self.resource_ref}' was already released")
            channel = pygame.mixer.find_channel()
            if channel is None:
                raise PlaybackError(f"No free output channel for '{self.resource_ref}'")

            self.sound.set_volume(self._volume)
            channel.play(self.sound, loops=-1)
            self.channel = channel
            self._play_started = time.monotonic()
            if not self._loop:
                self._schedule_end_of_pass()
            logger.debug(f"[PLAY] '{self.resource_ref}' on channel (loop={self._loop})")

    def stop(self) -> None:
        with self.lock:
            self._cancel_end_timer()
            if self.channel is not None:
                self.channel.stop()
                self.channel = None
                logger.debug(f"[STOP] '{self.resource_ref}'")

    def release(self) -> None:
        with self.lock:
            self.stop()
            self.sound = None

    def is_playing(self) -> bool:
        with self.lock:
            return self.channel is not None and self.channel.get_busy()

    def _schedule_end_of_pass(self):
        """Stop the channel when the current pass through the sound ends."""
        self._cancel_end_timer()
        if self.length <= 0:
            return
        elapsed = time.monotonic() - self._play_started
        remaining = self.length - (elapsed % self.length)
        self._end_timer = threading.Timer(remaining, self._on_pass_end)
        self._end_timer.daemon = True
        self._end_timer.start()

    def _cancel_end_timer(self):
        if self._end_timer is not None:
            self._end_timer.cancel()
            self._end_timer = None

    def _on_pass_end(self):
        with self.lock:
            if not self._loop and self.channel is not None:
                logger.info(f"'{self.resource_ref}' reached its end (loop off)")
                self.channel.stop()
            self._end_timer = None


class PygamePlayback:
    """Resolves resource refs to files under the sounds folder and decodes them."""

    def __init__(self, sounds_dir: str = SOUNDS_DIR):
        self.sounds_dir = sounds_dir

    def resolve(self, resource_ref: str) -> Optional[str]:
        for ext in SUPPORTED_FORMATS:
            path = os.path.join(self.sounds_dir, resource_ref + ext)
            if os.path.isfile(path):
                return path
        return None

    def acquire(self, resource_ref: str) -> PygameHandle:
        path = self.resolve(resource_ref)
        if path is None:
            raise ResourceNotFound(resource_ref, f"No audio file for '{resource_ref}' in {self.sounds_dir}")

        if not pygame.mixer.get_init():
            raise OutputAcquisitionFailed("Audio output is not initialised")

        try:
            sound = pygame.mixer.Sound(path)
        except pygame.error as e:
            raise ResourceUnreadable(resource_ref, e) from e

        logger.debug(f"Loaded {os.path.basename(path)} ({sound.get_length():.1f}s)")
        return PygameHandle(resource_ref, sound)


class PygameOutputSession:
    """The process-wide pygame mixer, released exactly once."""

    def __init__(self, mixable: bool):
        self.mixable = mixable
        self._released = False

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        pygame.mixer.quit()
        logger.info("Audio output released")


class PygameOutput:
    def acquire_shared(self, mixable: bool = True) -> PygameOutputSession:
        # SDL output is always shared with other applications, so `mixable`
        # only documents intent here
        try:
            pygame.mixer.init(
                frequency=SAMPLE_RATE,
                size=-16,
                channels=CHANNELS,
                buffer=MIXER_BUFFER_SIZE
            )
            pygame.mixer.set_num_channels(MIXER_NUM_CHANNELS)
        except pygame.error as e:
            raise OutputAcquisitionFailed(f"Could not open audio output: {e}") from e

        logger.info(f"Audio output acquired ({SAMPLE_RATE} Hz, {MIXER_NUM_CHANNELS} channels, mixable={mixable})")
        return PygameOutputSession(mixable)
