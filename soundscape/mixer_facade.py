"""
Mixer Facade for Soundscape.

Acts as the controller layer between the UI and the mixing core.
Owns the TrackMixer, the SleepTimer and the shared audio output, and exposes
one observable MixerState.

Every mutation, whether a user intent or a background completion (fade-out
finished, sleep timer fired, track ended), is a command on one FIFO queue
drained by a single worker thread. Commands apply one at a time in arrival
order. After each command a fresh immutable MixerState is built and swapped
in, so readers always see whole snapshots.

Event System:
- Register callbacks with: facade.on('event_name', callback_function)
- Callbacks run on the worker thread; UIs should hop to their own thread

Available Events:
- 'state_changed': (state: MixerState)
- 'track_started': (track_id: str)
- 'track_stopped': (track_id: str)
- 'track_failed': (track_id: str, error: MixerError)
- 'sleep_timer_changed': (timer_state: SleepTimerState)
- 'sleep_timer_fired': ()
"""

import queue
import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional

from config import (
    DEFAULT_VOLUME, DEFAULT_LOOP_ENABLED, DEFAULT_FADE_IN_S, DEFAULT_FADE_OUT_S,
    SLEEP_TIMER_UNIT_S, MONITOR_INTERVAL,
)
from .catalog import SoundCatalog
from .errors import MixerError, OutputAcquisitionFailed
from .fade_controller import FadeController
from .sleep_timer import SleepTimer, SleepTimerState
from .track_mixer import TrackMixer
from .types import OutputProvider, OutputSession, PlaybackProvider

logger = logging.getLogger("Soundscape.Mixer")


@dataclass(frozen=True)
class MixerState:
    """Externally observable snapshot of the mixer."""
    shared_volume: float = DEFAULT_VOLUME
    loop_enabled: bool = DEFAULT_LOOP_ENABLED
    fade_in_seconds: float = DEFAULT_FADE_IN_S
    fade_out_seconds: float = DEFAULT_FADE_OUT_S
    sleep_timer_minutes: float = 0
    active_track_ids: FrozenSet[str] = field(default_factory=frozenset)
    stopping_track_ids: FrozenSet[str] = field(default_factory=frozenset)
    output_ready: bool = False

    @property
    def is_playing(self) -> bool:
        return bool(self.active_track_ids)


class MixerFacade:
    """
    The single owner of mixer state.

    Usage:
        facade = MixerFacade()
        facade.start()                 # claims the audio output
        facade.toggle_track("rain")
        facade.set_volume(0.7)
        facade.arm_sleep_timer(30)
        ...
        facade.shutdown()
    """

    def __init__(
        self,
        catalog: Optional[SoundCatalog] = None,
        playback: Optional[PlaybackProvider] = None,
        output: Optional[OutputProvider] = None,
        fades: Optional[FadeController] = None,
        *,
        volume: float = DEFAULT_VOLUME,
        loop_enabled: bool = DEFAULT_LOOP_ENABLED,
        fade_in_seconds: float = DEFAULT_FADE_IN_S,
        fade_out_seconds: float = DEFAULT_FADE_OUT_S,
        timer_unit_seconds: float = SLEEP_TIMER_UNIT_S,
        monitor_interval: float = MONITOR_INTERVAL,
    ):
        if playback is None or output is None:
            from .backends import create_backends
            default_playback, default_output = create_backends()
            if playback is None:
                playback = default_playback
            if output is None:
                output = default_output

        self.catalog = catalog if catalog is not None else SoundCatalog()
        self.output = output
        self.monitor_interval = monitor_interval

        self.mixer = TrackMixer(
            self.catalog, playback, fades,
            volume=volume,
            loop_enabled=loop_enabled,
            fade_in_seconds=fade_in_seconds,
            fade_out_seconds=fade_out_seconds,
            dispatch=self._post,
        )
        self.mixer.on_stopped = self._on_track_stopped

        # Countdown the worker last armed; a fire for any other one is stale
        self._armed_timer: Optional[SleepTimerState] = None
        self.sleep_timer = SleepTimer(on_fire=self._on_timer_thread_fire, unit_seconds=timer_unit_seconds)
        self._sleep_minutes = 0

        self._session: Optional[OutputSession] = None
        self._output_error: Optional[str] = None
        # Held for every _closed check and every put on the command queue
        self._queue_lock = threading.Lock()
        self._closed = False
        self._shutting_down = False

        # Callbacks for UI updates (event-driven architecture)
        self._callbacks: Dict[str, List[Callable]] = {
            'state_changed': [],        # (MixerState)
            'track_started': [],        # (track_id)
            'track_stopped': [],        # (track_id)
            'track_failed': [],         # (track_id, error)
            'sleep_timer_changed': [],  # (SleepTimerState)
            'sleep_timer_fired': [],    # ()
        }

        self._state = self._build_state()

        # Command worker
        self._commands: "queue.Queue" = queue.Queue()
        self._worker = threading.Thread(target=self._run_commands, name="mixer-commands", daemon=True)
        self._worker.start()

        # Monitor thread (started with the output)
        self._monitor_thread: Optional[threading.Thread] = None
        self._monitor_stop = threading.Event()

        logger.info("MixerFacade initialized")

    # =========================================================================
    # EVENT SYSTEM
    # =========================================================================

    def on(self, event: str, callback: Callable) -> None:
        """
        Register a callback for an event.

        Args:
            event: Event name (see module docstring for available events)
            callback: Function to call when event occurs
        """
        if event in self._callbacks:
            self._callbacks[event].append(callback)
        else:
            logger.warning(f"Unknown event: {event}. Available: {list(self._callbacks.keys())}")

    def off(self, event: str, callback: Callable) -> None:
        if event in self._callbacks and callback in self._callbacks[event]:
            self._callbacks[event].remove(callback)

    def _emit(self, event: str, *args) -> None:
        """Emit an event to all registered callbacks."""
        for callback in list(self._callbacks.get(event, [])):
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Error in callback for {event}: {e}")

    # =========================================================================
    # COMMAND QUEUE
    # =========================================================================

    def _call(self, fn, *args):
        """Run fn on the worker thread, wait for it, and return its result."""
        if threading.current_thread() is self._worker:
            return self._apply(fn, args)
        future = Future()
        with self._queue_lock:
            if self._closed:
                raise MixerError("Mixer has been shut down")
            self._commands.put((fn, args, future))
        return future.result()

    def _post(self, fn, *args) -> None:
        """Queue fn without waiting (used by background completions)."""
        with self._queue_lock:
            if not self._closed:
                self._commands.put((fn, args, None))

    def _run_commands(self):
        logger.debug("Command worker started")
        while True:
            item = self._commands.get()
            if item is None:
                break
            fn, args, future = item
            try:
                result = self._apply(fn, args)
            except Exception as e:
                if future is not None:
                    future.set_exception(e)
                else:
                    logger.error(f"Background command {getattr(fn, '__name__', fn)} failed: {e}")
            else:
                if future is not None:
                    future.set_result(result)
        logger.debug("Command worker exiting")

    def _apply(self, fn, args):
        try:
            return fn(*args)
        finally:
            self._refresh_state()

    def _build_state(self) -> MixerState:
        return MixerState(
            shared_volume=self.mixer.shared_volume,
            loop_enabled=self.mixer.loop_enabled,
            fade_in_seconds=self.mixer.fade_in_seconds,
            fade_out_seconds=self.mixer.fade_out_seconds,
            sleep_timer_minutes=self._sleep_minutes,
            active_track_ids=self.mixer.active_track_ids(),
            stopping_track_ids=self.mixer.stopping_track_ids(),
            output_ready=self._session is not None,
        )

    def _refresh_state(self):
        new_state = self._build_state()
        if new_state != self._state:
            self._state = new_state
            self._emit('state_changed', new_state)

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def state(self) -> MixerState:
        return self._state

    def sleep_timer_state(self) -> SleepTimerState:
        return self.sleep_timer.state()

    def is_any_playing(self) -> bool:
        return self._state.is_playing

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> bool:
        """
        Claim the shared audio output and start the monitor thread.

        Returns:
            True if the output is ready. On failure the mixer stays usable,
            but track starts fail until acquire_output() succeeds.
        """
        try:
            self.acquire_output()
        except OutputAcquisitionFailed:
            return False
        finally:
            self._start_monitor()
        return True

    def acquire_output(self) -> bool:
        """(Re)try to claim the audio output. Raises OutputAcquisitionFailed."""
        return self._call(self._acquire_output)

    def _acquire_output(self):
        if self._session is not None:
            return True
        try:
            self._session = self.output.acquire_shared(mixable=True)
        except OutputAcquisitionFailed as e:
            self._output_error = str(e)
            logger.error(f"Audio output unavailable: {e}")
            raise
        self._output_error = None
        logger.info("Audio output ready")
        return True

    def shutdown(self) -> None:
        """Cancel the timer, stop every track, release the output, stop workers."""
        with self._queue_lock:
            if self._shutting_down:
                return
            self._shutting_down = True
        logger.info("MixerFacade shutting down")
        self._stop_monitor()
        self._call(self._teardown)
        with self._queue_lock:
            self._closed = True
            self._commands.put(None)
        if threading.current_thread() is not self._worker:
            self._worker.join(timeout=2.0)

    def _teardown(self):
        self._cancel_timer()
        self.mixer.close()
        if self._session is not None:
            try:
                self._session.release()
            except Exception as e:
                logger.warning(f"Error releasing audio output: {e}")
            self._session = None

    def _start_monitor(self) -> None:
        """Start the monitor thread if not already running."""
        if self._monitor_thread is None or not self._monitor_thread.is_alive():
            self._monitor_stop.clear()
            self._monitor_thread = threading.Thread(target=self._monitor, name="mixer-monitor", daemon=True)
            self._monitor_thread.start()

    def _stop_monitor(self) -> None:
        self._monitor_stop.set()
        if self._monitor_thread is not None and self._monitor_thread is not threading.current_thread():
            self._monitor_thread.join(timeout=2.0)
        self._monitor_thread = None

    def _monitor(self) -> None:
        """Periodically retire tracks that ended on their own (loop off)."""
        logger.debug("Monitor thread started")
        while not self._monitor_stop.wait(self.monitor_interval):
            self._post(self.mixer.retire_finished)
        logger.debug("Monitor thread exiting")

    # =========================================================================
    # TRACK INTENTS
    # =========================================================================

    def toggle_track(self, track_id: str) -> bool:
        """
        Start the track if it is idle or fading out, otherwise stop it.

        Returns:
            True if the track is now playing, False if it is now stopping
        """
        return self._call(self._toggle_track, track_id)

    def _toggle_track(self, track_id):
        if self.mixer.is_active(track_id) and not self.mixer.is_stopping(track_id):
            self.mixer.stop(track_id)
            return False
        self._start_track(track_id)
        return True

    def start_track(self, track_id: str) -> bool:
        """Start a track. Returns False if it was already playing."""
        return self._call(self._start_track, track_id)

    def _start_track(self, track_id):
        try:
            if self._session is None:
                raise OutputAcquisitionFailed(self._output_error or "Audio output has not been acquired")
            started = self.mixer.start(track_id)
        except MixerError as e:
            logger.warning(f"Could not start '{track_id}': {e}")
            self._emit('track_failed', track_id, e)
            raise
        if started:
            self._emit('track_started', track_id)
        return started

    def stop_track(self, track_id: str) -> Future:
        """Fade a track out. The returned future resolves once it is released."""
        return self._call(self.mixer.stop, track_id)

    def stop_all_now(self) -> Future:
        """Fade every track out. The returned future resolves once all are released."""
        return self._call(self.mixer.stop_all)

    def _on_track_stopped(self, track_id):
        self._emit('track_stopped', track_id)

    # =========================================================================
    # SHARED CONTROLS
    # =========================================================================

    def set_volume(self, volume: float) -> float:
        return self._call(self.mixer.set_shared_volume, volume)

    def set_loop(self, enabled: bool) -> None:
        self._call(self.mixer.set_loop_enabled, enabled)

    def toggle_loop(self) -> bool:
        return self._call(self._toggle_loop)

    def _toggle_loop(self):
        enabled = not self.mixer.loop_enabled
        self.mixer.set_loop_enabled(enabled)
        return enabled

    def set_fade_in(self, seconds: float) -> None:
        self._call(self.mixer.set_fade_durations, seconds, None)

    def set_fade_out(self, seconds: float) -> None:
        self._call(self.mixer.set_fade_durations, None, seconds)

    # =========================================================================
    # SLEEP TIMER
    # =========================================================================

    def arm_sleep_timer(self, minutes: float) -> SleepTimerState:
        """Stop all playback after `minutes`. 0 turns the timer off."""
        return self._call(self._arm_timer, minutes)

    def cancel_sleep_timer(self) -> None:
        self._call(self._cancel_timer)

    def _arm_timer(self, minutes):
        timer_state = self.sleep_timer.arm(minutes)
        self._armed_timer = timer_state if timer_state.armed else None
        self._sleep_minutes = minutes if timer_state.armed else 0
        self._emit('sleep_timer_changed', timer_state)
        return timer_state

    def _cancel_timer(self):
        self._armed_timer = None
        if self.sleep_timer.cancel() or self._sleep_minutes:
            self._sleep_minutes = 0
            self._emit('sleep_timer_changed', self.sleep_timer.state())

    def _on_timer_thread_fire(self, fired):
        # Runs on the timer thread. A cancel or re-arm queued ahead of this
        # command clears _armed_timer, so the stale fire is dropped
        self._post(self._sleep_timer_fired, fired)

    def _sleep_timer_fired(self, fired):
        if fired is not self._armed_timer:
            logger.info("Sleep timer fire superseded by a later timer change")
            return
        logger.info("Sleep timer expired - stopping all tracks")
        self._armed_timer = None
        self._sleep_minutes = 0
        self.mixer.stop_all()
        self._emit('sleep_timer_fired')
        self._emit('sleep_timer_changed', self.sleep_timer.state())
