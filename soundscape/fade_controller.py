"""
Fade Controller for Soundscape.

Drives linear volume ramps on playback handles from background threads.

Every fade takes a fresh generation id for its handle. Before each write the
ramp thread checks that its id is still the current one for that handle, so
starting a new fade (or cancelling) silently retires the old ramp. Checks and
writes happen under one lock, which means a stale ramp can never write after
the fade that replaced it.
"""

import math
import time
import logging
import threading
from concurrent.futures import Future
from typing import Dict

import numpy as np

from config import FADE_UPDATE_HZ

logger = logging.getLogger("Soundscape.Fade")

# Below this rate a ramp is audibly stepped
MIN_UPDATE_HZ = 20


class FadeController:
    """
    Time-driven volume ramps, at most one live ramp per handle.

    Usage:
        fades = FadeController()
        done = fades.fade(handle, 0.0, 0.5, 2.0)   # returns immediately
        done.result()  # True when the ramp finished, False if superseded
    """

    def __init__(self, update_hz: float = FADE_UPDATE_HZ):
        self.update_hz = max(float(update_hz), MIN_UPDATE_HZ)
        self.lock = threading.Lock()
        self._generations: Dict[object, int] = {}
        self._next_generation = 0

    def fade(self, handle, start: float, end: float, duration: float) -> Future:
        """
        Ramp the handle's volume from start to end over duration seconds.

        A zero or negative duration applies `end` immediately. The returned
        future resolves True when the ramp reaches `end`, or False if another
        fade (or cancel) on the same handle superseded it first.
        """
        future = Future()

        with self.lock:
            self._next_generation += 1
            gen_id = self._next_generation
            self._generations[handle] = gen_id

            if duration <= 0:
                del self._generations[handle]
                handle.set_volume(end)
                immediate = True
            else:
                immediate = False

        if immediate:
            future.set_result(True)
            return future

        steps = max(1, math.ceil(duration * self.update_hz))
        # linspace pins the last level to exactly `end`
        levels = np.linspace(start, end, steps + 1)

        logger.debug(f"Fade {start:.2f} -> {end:.2f} over {duration:.2f}s ({steps} steps, gen_id={gen_id})")
        threading.Thread(
            target=self._run,
            args=(handle, gen_id, levels, duration, future),
            name=f"fade-{gen_id}",
            daemon=True,
        ).start()
        return future

    def cancel(self, handle) -> None:
        """Retire any in-flight ramp on this handle without writing to it."""
        with self.lock:
            if self._generations.pop(handle, None) is not None:
                logger.debug("Fade cancelled")

    def is_fading(self, handle) -> bool:
        with self.lock:
            return handle in self._generations

    def _run(self, handle, gen_id, levels, duration, future):
        interval = 1.0 / self.update_hz
        steps = len(levels) - 1
        started = time.monotonic()

        # Futures are resolved outside the lock: their callbacks may start new fades
        completed = False
        try:
            while True:
                elapsed = time.monotonic() - started
                if elapsed >= duration:
                    index = steps
                else:
                    index = min(int(elapsed / duration * steps), steps)

                with self.lock:
                    if self._generations.get(handle) != gen_id:
                        logger.debug(f"Fade gen_id={gen_id} superseded, bailing")
                        break
                    handle.set_volume(float(levels[index]))
                    if index == steps:
                        del self._generations[handle]
                        completed = True
                        break

                time.sleep(interval)
        except Exception as e:
            logger.error(f"Error during fade (gen_id={gen_id}): {e}")
            with self.lock:
                if self._generations.get(handle) == gen_id:
                    del self._generations[handle]
            future.set_exception(e)
            return

        future.set_result(completed)
