import pytest

from conftest import wait_until
from soundscape.errors import PlaybackError, ResourceNotFound
from soundscape.fade_controller import FadeController
from soundscape.mock_backend import MockPlayback
from soundscape.track_mixer import TrackMixer


def test_start_fades_in_to_shared_volume(mixer, playback):
    assert mixer.start("rain") is True

    assert mixer.is_active("rain")
    (handle,) = playback.handles_for("rain")
    assert handle.playing
    assert handle.volume_history[0] == 0.0
    assert wait_until(lambda: handle.volume == 0.5)


def test_start_applies_current_loop_mode(mixer, playback):
    mixer.set_loop_enabled(True)
    mixer.start("waves")

    assert playback.handles_for("waves")[0].loop is True


def test_start_is_idempotent_for_playing_track(mixer, playback):
    mixer.start("rain")

    assert mixer.start("rain") is False
    assert len(playback.handles_for("rain")) == 1


def test_unknown_track_id_raises_and_leaves_no_entry(mixer, playback):
    with pytest.raises(ResourceNotFound):
        mixer.start("bagpipes")

    assert not mixer.is_any_playing()
    assert playback.handles == []


def test_missing_resource_raises(catalog):
    mixer = TrackMixer(catalog, MockPlayback(resources=["rain"]), fade_in_seconds=0)

    with pytest.raises(ResourceNotFound) as info:
        mixer.start("thunder")

    assert info.value.resource_ref == "thunder"
    assert not mixer.is_active("thunder")


def test_play_failure_releases_handle(mixer, playback):
    playback.unplayable.add("fireplace")

    with pytest.raises(PlaybackError):
        mixer.start("fireplace")

    (handle,) = playback.handles_for("fireplace")
    assert handle.released
    assert not mixer.is_active("fireplace")


def test_stop_keeps_track_active_until_fade_out_ends(mixer, playback):
    mixer.start("rain")
    handle = playback.handles_for("rain")[0]

    done = mixer.stop("rain", fade_out=0.2)

    assert mixer.is_active("rain")
    assert mixer.is_stopping("rain")
    assert not handle.released

    assert done.result(timeout=2) is True
    assert not mixer.is_active("rain")
    assert handle.stopped and handle.released
    assert handle.volume == 0.0


def test_stop_idle_track_is_a_resolved_noop(mixer):
    done = mixer.stop("rain")

    assert done.done() and done.result() is True


def test_second_stop_returns_the_same_future(mixer):
    mixer.start("rain")
    first = mixer.stop("rain", fade_out=0.2)

    assert mixer.stop("rain") is first
    first.result(timeout=2)


def test_shorter_override_replaces_running_fade_out(mixer, playback):
    mixer.start("rain")
    slow = mixer.stop("rain", fade_out=5.0)

    fast = mixer.stop("rain", fade_out=0)

    assert fast is slow
    assert slow.result(timeout=2) is True
    assert playback.handles_for("rain")[0].released


def test_start_during_fade_out_revives_same_handle(mixer, playback):
    mixer.start("rain")
    handle = playback.handles_for("rain")[0]
    assert wait_until(lambda: handle.volume == 0.5)

    pending = mixer.stop("rain", fade_out=1.0)
    assert mixer.start("rain") is True

    assert pending.result(timeout=2) is False
    assert not mixer.is_stopping("rain")
    assert len(playback.handles_for("rain")) == 1
    assert wait_until(lambda: handle.volume == 0.5)
    assert not handle.released


def test_on_stopped_fires_once_per_track(mixer):
    stopped = []
    mixer.on_stopped = stopped.append
    mixer.start("rain")

    mixer.stop("rain").result(timeout=2)
    mixer.stop("rain").result(timeout=2)

    assert stopped == ["rain"]


def test_stop_all_waits_for_every_track(mixer, playback):
    for track_id in ("rain", "waves", "forest"):
        mixer.start(track_id)

    assert mixer.stop_all().result(timeout=2) is True

    assert not mixer.is_any_playing()
    assert all(h.released for h in playback.handles)


def test_stop_all_with_nothing_playing_resolves(mixer):
    assert mixer.stop_all().result(timeout=1) is True


def test_shared_volume_applies_to_playing_tracks(mixer, playback):
    mixer.start("rain")
    mixer.start("waves")

    assert mixer.set_shared_volume(0.9) == 0.9

    for handle in playback.handles:
        assert handle.volume == 0.9
    # A later fade-in step never overwrites the new level
    assert wait_until(lambda: not any(mixer.fades.is_fading(h) for h in playback.handles))
    assert all(h.volume == 0.9 for h in playback.handles)


def test_shared_volume_is_clamped(mixer):
    assert mixer.set_shared_volume(-1) == 0.0
    assert mixer.set_shared_volume(4) == 1.0


def test_shared_volume_leaves_fade_outs_alone(mixer, playback):
    mixer.start("rain")
    handle = playback.handles_for("rain")[0]
    done = mixer.stop("rain", fade_out=0.2)

    mixer.set_shared_volume(1.0)

    assert done.result(timeout=2) is True
    assert handle.volume == 0.0


def test_loop_change_reaches_live_handles(mixer, playback):
    mixer.start("rain")

    mixer.set_loop_enabled(True)
    assert playback.handles_for("rain")[0].loop is True
    assert mixer.get("rain").loop_enabled is True

    mixer.set_loop_enabled(False)
    assert playback.handles_for("rain")[0].loop is False


def test_fade_durations_ignore_negative_values(mixer):
    mixer.set_fade_durations(fade_in=-3, fade_out=4)

    assert mixer.fade_in_seconds == 0.0
    assert mixer.fade_out_seconds == 4.0


def test_zero_fade_in_is_immediate(catalog, playback):
    mixer = TrackMixer(catalog, playback, FadeController(), volume=0.3, fade_in_seconds=0)

    mixer.start("rain")

    assert mixer.volume_of("rain") == 0.3


def test_retire_finished_releases_ended_tracks(mixer, playback):
    stopped = []
    mixer.on_stopped = stopped.append
    mixer.start("rain")
    mixer.start("waves")

    playback.handles_for("rain")[0].finish()

    assert mixer.retire_finished() == ["rain"]
    assert stopped == ["rain"]
    assert mixer.active_track_ids() == frozenset({"waves"})
    assert playback.handles_for("rain")[0].released


def test_close_releases_everything_without_fading(mixer, playback):
    mixer.start("rain")
    mixer.start("waves")
    slow = mixer.stop("waves", fade_out=5.0)

    mixer.close()

    assert slow.result(timeout=1) is True
    assert not mixer.is_any_playing()
    assert all(h.released for h in playback.handles)
