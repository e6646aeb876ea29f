import time

from soundscape.fade_controller import FadeController, MIN_UPDATE_HZ
from soundscape.mock_backend import MockHandle


def test_zero_duration_applies_end_immediately():
    fades = FadeController()
    handle = MockHandle("rain")

    done = fades.fade(handle, 0.0, 0.7, 0)

    assert done.done() and done.result() is True
    assert handle.volume == 0.7
    assert not fades.is_fading(handle)


def test_ramp_is_monotonic_and_lands_exactly_on_end():
    fades = FadeController()
    handle = MockHandle("rain")

    assert fades.fade(handle, 0.0, 0.8, 0.1).result(timeout=2) is True

    history = handle.volume_history
    assert history[-1] == 0.8
    assert all(a <= b for a, b in zip(history, history[1:]))
    assert len(history) > 1


def test_fade_down_reaches_silence():
    fades = FadeController()
    handle = MockHandle("rain")
    handle.set_volume(0.6)

    assert fades.fade(handle, 0.6, 0.0, 0.05).result(timeout=2) is True
    assert handle.volume == 0.0


def test_new_fade_supersedes_running_one():
    fades = FadeController()
    handle = MockHandle("rain")

    first = fades.fade(handle, 0.0, 1.0, 1.0)
    time.sleep(0.05)
    second = fades.fade(handle, handle.volume, 0.2, 0.05)

    assert first.result(timeout=2) is False
    assert second.result(timeout=2) is True

    # The retired ramp never writes again
    time.sleep(0.1)
    assert handle.volume == 0.2


def test_cancel_stops_writes_without_touching_volume():
    fades = FadeController()
    handle = MockHandle("rain")

    done = fades.fade(handle, 0.0, 1.0, 1.0)
    time.sleep(0.05)
    fades.cancel(handle)

    assert done.result(timeout=2) is False
    assert not fades.is_fading(handle)
    frozen = len(handle.volume_history)
    time.sleep(0.1)
    assert len(handle.volume_history) == frozen
    assert handle.volume < 1.0


def test_update_rate_has_a_floor():
    assert FadeController(update_hz=1).update_hz == MIN_UPDATE_HZ
    assert FadeController(update_hz=60).update_hz == 60


def test_handle_errors_fail_the_future():
    class BrokenHandle(MockHandle):
        def set_volume(self, volume):
            raise RuntimeError("device gone")

    fades = FadeController()
    handle = BrokenHandle("rain")
    done = fades.fade(handle, 0.0, 1.0, 0.05)

    assert isinstance(done.exception(timeout=2), RuntimeError)
    assert not fades.is_fading(handle)
