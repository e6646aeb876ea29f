import time
from threading import Event

from soundscape.sleep_timer import IDLE, SleepTimer, SleepTimerState, TimerStatus

UNIT = 0.01


def test_timer_fires_once_and_returns_to_idle():
    fired = []
    done = Event()

    def on_fire(state):
        fired.append(state)
        done.set()

    timer = SleepTimer(on_fire, unit_seconds=UNIT)
    armed = timer.arm(5)

    assert armed.armed and armed.minutes == 5
    assert done.wait(2)
    time.sleep(0.1)
    assert fired == [armed]
    assert timer.state() is IDLE


def test_rearm_replaces_pending_countdown():
    fired = []
    timer = SleepTimer(fired.append, unit_seconds=UNIT)

    timer.arm(1000)
    second = timer.arm(3)

    time.sleep(0.3)
    assert fired == [second]


def test_cancel_prevents_fire():
    fired = []
    timer = SleepTimer(fired.append, unit_seconds=UNIT)
    timer.arm(5)

    assert timer.cancel() is True
    time.sleep(0.15)

    assert fired == []
    assert timer.cancel() is False
    assert not timer.state().armed


def test_arm_zero_cancels():
    fired = []
    timer = SleepTimer(fired.append, unit_seconds=UNIT)
    timer.arm(5)

    state = timer.arm(0)

    assert state.status is TimerStatus.IDLE
    time.sleep(0.15)
    assert fired == []


def test_stale_token_is_ignored():
    fired = []
    timer = SleepTimer(fired.append, unit_seconds=1000)
    timer.arm(1)
    token = timer._token
    timer.cancel()

    # A timer thread that woke up before the cancel took effect
    timer._fire(token)

    assert fired == []


def test_remaining_counts_down():
    timer = SleepTimer(lambda state: None, unit_seconds=1.0)
    timer.arm(2)

    first = timer.remaining()
    time.sleep(0.05)

    assert 0 < timer.remaining() < first <= 2.0
    timer.cancel()
    assert timer.remaining() == 0.0


def test_remaining_never_negative():
    state = SleepTimerState(TimerStatus.ARMED, 1, fire_at=10.0)

    assert state.remaining(now=25.0) == 0.0
    assert state.remaining(now=4.0) == 6.0
    assert IDLE.remaining() == 0.0


def test_callback_errors_do_not_escape():
    done = Event()

    def on_fire(state):
        done.set()
        raise RuntimeError("boom")

    timer = SleepTimer(on_fire, unit_seconds=UNIT)
    timer.arm(1)

    assert done.wait(2)
    time.sleep(0.05)
    assert timer.state() is IDLE
