"""Mock audio backend used by tests and headless runs."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional

from .errors import OutputAcquisitionFailed, PlaybackError, ResourceNotFound

logger = logging.getLogger("Soundscape.Mock")


class MockHandle:
    """Records every call instead of producing sound."""

    def __init__(self, resource_ref: str, fail_on_play: bool = False):
        self.resource_ref = resource_ref
        self.fail_on_play = fail_on_play
        self.volume_history: List[float] = []
        self.loop = False
        self.playing = False
        self.stopped = False
        self.released = False
        self._volume = 0.0
        self.lock = threading.Lock()

    @property
    def volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        with self.lock:
            self._volume = volume
            self.volume_history.append(volume)

    def set_loop(self, enabled: bool) -> None:
        self.loop = enabled

    def play(self) -> None:
        if self.fail_on_play:
            raise PlaybackError(f"[MOCK] refusing to play {self.resource_ref}")
        logger.info("[MOCK] Playing %s", self.resource_ref)
        self.playing = True

    def stop(self) -> None:
        self.playing = False
        self.stopped = True

    def release(self) -> None:
        self.playing = False
        self.released = True

    def is_playing(self) -> bool:
        return self.playing

    def finish(self) -> None:
        """Simulate the sound reaching its end with loop mode off."""
        self.playing = False


class MockPlayback:
    """
    Hands out MockHandles.

    With `resources` given, only those refs exist and anything else raises
    ResourceNotFound. Without it every ref is accepted.
    """

    def __init__(self, resources: Optional[Iterable[str]] = None):
        self.resources = set(resources) if resources is not None else None
        self.unplayable: set = set()
        self.handles: List[MockHandle] = []

    def acquire(self, resource_ref: str) -> MockHandle:
        if self.resources is not None and resource_ref not in self.resources:
            raise ResourceNotFound(resource_ref)
        handle = MockHandle(resource_ref, fail_on_play=resource_ref in self.unplayable)
        self.handles.append(handle)
        return handle

    def handles_for(self, resource_ref: str) -> List[MockHandle]:
        return [h for h in self.handles if h.resource_ref == resource_ref]


class MockOutputSession:
    def __init__(self, output: "MockOutput", mixable: bool):
        self.output = output
        self.mixable = mixable
        self.released = False

    def release(self) -> None:
        if not self.released:
            self.released = True
            self.output.releases += 1


class MockOutput:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.acquisitions = 0
        self.releases = 0

    def acquire_shared(self, mixable: bool = True) -> MockOutputSession:
        if self.fail:
            raise OutputAcquisitionFailed("[MOCK] output unavailable")
        self.acquisitions += 1
        logger.info("[MOCK] Output acquired (mixable=%s)", mixable)
        return MockOutputSession(self, mixable)
