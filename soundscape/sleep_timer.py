"""
Sleep Timer for Soundscape.

A cancellable single-shot countdown. At most one fire is ever pending: every
arm or cancel takes a new token, and a firing timer only runs its callback if
its token is still current. Once a fire has claimed its token a later cancel
cannot undo it, but nothing else will fire.
"""

import time
import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from config import SLEEP_TIMER_UNIT_S

logger = logging.getLogger("Soundscape.SleepTimer")


class TimerStatus(Enum):
    IDLE = auto()
    ARMED = auto()


@dataclass(frozen=True)
class SleepTimerState:
    """Snapshot of the timer: Idle, or Armed until `fire_at` (monotonic clock)."""
    status: TimerStatus = TimerStatus.IDLE
    minutes: float = 0
    fire_at: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self.status is TimerStatus.ARMED

    def remaining(self, now: Optional[float] = None) -> float:
        """Seconds until the timer fires (0 when idle)."""
        if not self.armed:
            return 0.0
        if now is None:
            now = time.monotonic()
        return max(0.0, self.fire_at - now)


IDLE = SleepTimerState()


class SleepTimer:
    """
    Usage:
        timer = SleepTimer(on_fire=lambda fired: mixer.stop_all())
        timer.arm(30)    # stop everything in 30 minutes
        timer.arm(15)    # replaces the 30 minute countdown
        timer.arm(0)     # same as cancel()
    """

    def __init__(self, on_fire: Callable[[SleepTimerState], None], unit_seconds: float = SLEEP_TIMER_UNIT_S):
        self.on_fire = on_fire
        self.unit_seconds = unit_seconds
        self.lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._token = 0
        self._state = IDLE

    def arm(self, minutes: float) -> SleepTimerState:
        """Start (or restart) the countdown. Zero or negative minutes cancels."""
        if minutes <= 0:
            self.cancel()
            return self.state()

        delay = minutes * self.unit_seconds
        with self.lock:
            self._cancel_locked()
            self._token += 1
            token = self._token
            self._state = SleepTimerState(TimerStatus.ARMED, minutes, time.monotonic() + delay)
            self._timer = threading.Timer(delay, self._fire, args=(token,))
            self._timer.daemon = True
            self._timer.start()
            state = self._state

        logger.info(f"Sleep timer armed: {minutes} min ({delay:.1f}s)")
        return state

    def cancel(self) -> bool:
        """
        Cancel the countdown.

        Returns:
            True if a pending fire was cancelled
        """
        with self.lock:
            was_armed = self._cancel_locked()
        if was_armed:
            logger.info("Sleep timer cancelled")
        return was_armed

    def state(self) -> SleepTimerState:
        with self.lock:
            return self._state

    def remaining(self) -> float:
        return self.state().remaining()

    def _cancel_locked(self) -> bool:
        was_armed = self._state.armed
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        # Invalidate a timer thread that already woke up
        self._token += 1
        self._state = IDLE
        return was_armed

    def _fire(self, token):
        with self.lock:
            if token != self._token:
                logger.debug(f"Stale sleep timer fire ignored (token={token})")
                return
            self._token += 1
            self._timer = None
            fired = self._state
            self._state = IDLE

        logger.info("Sleep timer fired")
        try:
            self.on_fire(fired)
        except Exception as e:
            logger.error(f"Error in sleep timer callback: {e}")
