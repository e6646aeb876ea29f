"""Interfaces between the mixer and its audio collaborators.

Kept separate from the backends so the core never imports pygame when
only the shared protocols are needed.
"""

from __future__ import annotations

from typing import Protocol


class PlaybackHandle(Protocol):
    """One decoded track that can be played, faded and released."""

    @property
    def volume(self) -> float: ...

    def set_volume(self, volume: float) -> None: ...

    def set_loop(self, enabled: bool) -> None: ...

    def play(self) -> None: ...

    def stop(self) -> None: ...

    def release(self) -> None: ...

    def is_playing(self) -> bool: ...


class PlaybackProvider(Protocol):
    def acquire(self, resource_ref: str) -> PlaybackHandle: ...


class OutputSession(Protocol):
    def release(self) -> None: ...


class OutputProvider(Protocol):
    def acquire_shared(self, mixable: bool = True) -> OutputSession: ...
