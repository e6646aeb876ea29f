"""
Track Mixer for Soundscape.

Owns the set of concurrently playing tracks. Each track id maps to at most
one ActiveTrack holding an exclusively owned playback handle. Starting fades
the handle up to the shared volume; stopping fades it to silence, and only
then stops and releases the handle and drops the entry. Observers therefore
keep seeing a track as active for the whole fade-out.

Fade-out completions arrive on fade threads. They are handed to `dispatch`
so an owner (the MixerFacade) can serialize them with every other mutation.
Without an owner they run immediately.
"""

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from config import (
    DEFAULT_VOLUME, DEFAULT_LOOP_ENABLED, DEFAULT_FADE_IN_S, DEFAULT_FADE_OUT_S,
)
from .fade_controller import FadeController
from .types import PlaybackHandle, PlaybackProvider

logger = logging.getLogger("Soundscape.TrackMixer")


def _call_now(fn, *args):
    fn(*args)


def _done(result=True) -> Future:
    future = Future()
    future.set_result(result)
    return future


def gather(futures: List[Future]) -> Future:
    """Future that resolves once every future in the list has resolved."""
    if not futures:
        return _done(True)

    result = Future()
    lock = threading.Lock()
    remaining = [len(futures)]

    def _on_done(_):
        with lock:
            remaining[0] -= 1
            finished = remaining[0] == 0
        if finished:
            result.set_result(all(f.exception() is None and f.result() for f in futures))

    for future in futures:
        future.add_done_callback(_on_done)
    return result


def clamp_volume(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(eq=False)
class ActiveTrack:
    """
    A track that is playing or fading out.

    Attributes:
        track_id: Catalog id (also the key in the mixer)
        handle: Playback handle owned by this entry alone
        loop_enabled: Loop mode last applied to the handle
        stopping: True while the fade-out runs
        stop_future: Resolves when the stop completes (True) or is revived (False)
        stop_fade: The fade-out whose completion finishes this stop
    """
    track_id: str
    handle: PlaybackHandle
    loop_enabled: bool
    stopping: bool = False
    stop_future: Optional[Future] = None
    stop_fade: Optional[Future] = None

    @property
    def current_volume(self) -> float:
        return self.handle.volume


class TrackMixer:
    """
    Mapping of track id -> ActiveTrack, with shared volume and loop mode.

    Usage:
        mixer = TrackMixer(catalog, playback)
        mixer.start("rain")              # fades in to the shared volume
        mixer.set_shared_volume(0.8)
        mixer.stop("rain").result()      # waits for fade-out + release
    """

    def __init__(
        self,
        catalog,
        playback: PlaybackProvider,
        fades: Optional[FadeController] = None,
        *,
        volume: float = DEFAULT_VOLUME,
        loop_enabled: bool = DEFAULT_LOOP_ENABLED,
        fade_in_seconds: float = DEFAULT_FADE_IN_S,
        fade_out_seconds: float = DEFAULT_FADE_OUT_S,
        dispatch: Callable = _call_now,
    ):
        self.catalog = catalog
        self.playback = playback
        self.fades = fades or FadeController()
        self.dispatch = dispatch

        self.shared_volume = clamp_volume(volume)
        self.loop_enabled = loop_enabled
        self.fade_in_seconds = max(0.0, fade_in_seconds)
        self.fade_out_seconds = max(0.0, fade_out_seconds)

        # Called with the track id once a track is fully stopped and released
        self.on_stopped: Optional[Callable[[str], None]] = None

        self._active: Dict[str, ActiveTrack] = {}
        self.lock = threading.RLock()

    # =========================================================================
    # START / STOP
    # =========================================================================

    def start(self, track_id: str) -> bool:
        """
        Start a track, fading it in to the current shared volume.

        Returns:
            True if the track was started (or revived from a fade-out),
            False if it was already playing.

        Raises:
            ResourceNotFound: unknown id or missing audio resource
            PlaybackError: the handle could not start
        """
        with self.lock:
            entry = self._active.get(track_id)
            if entry is not None:
                if entry.stopping:
                    pending = self._revive(entry)
                else:
                    logger.debug(f"'{track_id}' already active, ignoring start")
                    return False
            else:
                pending = None
                self._start_new(track_id)

        if pending is not None:
            pending.set_result(False)
        return True

    def _start_new(self, track_id):
        descriptor = self.catalog.get(track_id)
        handle = self.playback.acquire(descriptor.resource_ref)
        try:
            handle.set_volume(0.0)
            handle.set_loop(self.loop_enabled)
            handle.play()
        except Exception:
            handle.release()
            raise

        # Registered before the fade so observers see it playing right away
        self._active[track_id] = ActiveTrack(track_id, handle, self.loop_enabled)
        self.fades.fade(handle, 0.0, self.shared_volume, self.fade_in_seconds)
        logger.info(f"[START] '{track_id}' fading in to {self.shared_volume:.2f} over {self.fade_in_seconds:.1f}s")

    def _revive(self, entry: ActiveTrack) -> Optional[Future]:
        """Turn a fading-out track around on the same handle."""
        pending = entry.stop_future
        entry.stopping = False
        entry.stop_future = None
        entry.stop_fade = None
        start = entry.handle.volume
        self.fades.fade(entry.handle, start, self.shared_volume, self.fade_in_seconds)
        logger.info(f"[START] '{entry.track_id}' revived during fade-out (from {start:.2f})")
        return pending

    def stop(self, track_id: str, fade_out: Optional[float] = None) -> Future:
        """
        Fade a track out, then stop and release it.

        Args:
            track_id: Track to stop
            fade_out: Override for the fade-out duration (seconds)

        Returns:
            Future resolving True once the handle is released, or False if
            a start revived the track first. Already-stopped tracks return a
            resolved future.
        """
        with self.lock:
            entry = self._active.get(track_id)
            if entry is None:
                return _done(True)

            duration = self.fade_out_seconds if fade_out is None else max(0.0, fade_out)
            if entry.stopping and fade_out is None:
                return entry.stop_future

            if not entry.stopping:
                entry.stopping = True
                entry.stop_future = Future()

            start = entry.handle.volume
            fade = self.fades.fade(entry.handle, start, 0.0, duration)
            entry.stop_fade = fade
            logger.info(f"[STOP] '{track_id}' fading out from {start:.2f} over {duration:.1f}s")
            fade.add_done_callback(lambda f, e=entry: self.dispatch(self._finish_stop, e, f))
            return entry.stop_future

    def stop_all(self, fade_out: Optional[float] = None) -> Future:
        """Stop every active track concurrently; resolves when all are done."""
        with self.lock:
            track_ids = list(self._active)
            if track_ids:
                logger.info(f"[STOP] Stopping all tracks: {', '.join(track_ids)}")
            futures = [self.stop(track_id, fade_out) for track_id in track_ids]
        return gather(futures)

    def _finish_stop(self, entry: ActiveTrack, fade: Future) -> None:
        with self.lock:
            # A revive or a shorter re-stop replaced this fade
            if self._active.get(entry.track_id) is not entry or entry.stop_fade is not fade:
                return
            if fade.exception() is not None:
                logger.warning(f"Fade-out of '{entry.track_id}' failed: {fade.exception()}")
            self._dispose(entry)
            pending = entry.stop_future

        pending.set_result(True)
        self._notify_stopped(entry.track_id)

    def _dispose(self, entry: ActiveTrack) -> None:
        """Stop and release the handle and drop the entry. Caller holds the lock."""
        del self._active[entry.track_id]
        try:
            entry.handle.stop()
            entry.handle.release()
        except Exception as e:
            logger.error(f"Error releasing '{entry.track_id}': {e}")
        logger.info(f"[STOPPED] '{entry.track_id}' released")

    def _notify_stopped(self, track_id):
        if self.on_stopped is not None:
            try:
                self.on_stopped(track_id)
            except Exception as e:
                logger.error(f"Error in on_stopped callback for '{track_id}': {e}")

    def retire_finished(self) -> List[str]:
        """
        Release tracks whose handle stopped on its own (loop mode off).

        Returns:
            Ids of the tracks that were retired
        """
        retired = []
        with self.lock:
            for entry in list(self._active.values()):
                if entry.stopping or entry.handle.is_playing():
                    continue
                self.fades.cancel(entry.handle)
                self._dispose(entry)
                retired.append(entry.track_id)

        for track_id in retired:
            logger.info(f"'{track_id}' finished playing")
            self._notify_stopped(track_id)
        return retired

    def close(self) -> None:
        """Stop and release everything immediately, without fades."""
        with self.lock:
            entries = list(self._active.values())
            for entry in entries:
                self.fades.cancel(entry.handle)
                self._dispose(entry)

        for entry in entries:
            if entry.stop_future is not None:
                entry.stop_future.set_result(True)
            self._notify_stopped(entry.track_id)

    # =========================================================================
    # SHARED CONTROLS
    # =========================================================================

    def set_shared_volume(self, volume: float) -> float:
        """
        Set the master volume and apply it at once to every playing track.

        A live change replaces any fade-in still running. Tracks that are
        fading out keep fading to silence.
        """
        volume = clamp_volume(volume)
        with self.lock:
            self.shared_volume = volume
            for entry in self._active.values():
                if entry.stopping:
                    continue
                self.fades.cancel(entry.handle)
                entry.handle.set_volume(volume)
        logger.debug(f"Shared volume -> {volume:.2f}")
        return volume

    def set_loop_enabled(self, enabled: bool) -> None:
        with self.lock:
            self.loop_enabled = bool(enabled)
            for entry in self._active.values():
                entry.loop_enabled = self.loop_enabled
                entry.handle.set_loop(self.loop_enabled)
        logger.info(f"Loop mode {'ON' if enabled else 'OFF'}")

    def set_fade_durations(self, fade_in: Optional[float] = None, fade_out: Optional[float] = None) -> None:
        with self.lock:
            if fade_in is not None:
                self.fade_in_seconds = max(0.0, float(fade_in))
            if fade_out is not None:
                self.fade_out_seconds = max(0.0, float(fade_out))

    # =========================================================================
    # QUERIES
    # =========================================================================

    def is_any_playing(self) -> bool:
        with self.lock:
            return bool(self._active)

    def is_active(self, track_id: str) -> bool:
        with self.lock:
            return track_id in self._active

    def is_stopping(self, track_id: str) -> bool:
        with self.lock:
            entry = self._active.get(track_id)
            return entry is not None and entry.stopping

    def active_track_ids(self) -> frozenset:
        with self.lock:
            return frozenset(self._active)

    def stopping_track_ids(self) -> frozenset:
        with self.lock:
            return frozenset(tid for tid, entry in self._active.items() if entry.stopping)

    def get(self, track_id: str) -> Optional[ActiveTrack]:
        with self.lock:
            return self._active.get(track_id)

    def volume_of(self, track_id: str) -> Optional[float]:
        with self.lock:
            entry = self._active.get(track_id)
            return entry.current_volume if entry is not None else None
