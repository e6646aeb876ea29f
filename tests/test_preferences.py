import json

from soundscape.mixer_facade import MixerState
from utils import preferences


def test_missing_file_gives_empty_prefs(prefs_dir):
    assert preferences.load_preferences() == {}
    assert preferences.get_mixer_preferences() == {}


def test_mixer_settings_round_trip(prefs_dir):
    state = MixerState(shared_volume=0.7, loop_enabled=True, fade_in_seconds=1.0, fade_out_seconds=3.0,
                       active_track_ids=frozenset({"rain"}))

    preferences.set_mixer_preferences(state)

    assert preferences.get_mixer_preferences() == {
        "volume": 0.7,
        "loop_enabled": True,
        "fade_in_seconds": 1.0,
        "fade_out_seconds": 3.0,
    }
    # The active mix itself is not remembered
    assert "active_track_ids" not in preferences.load_preferences()


def test_saving_merges_with_existing_keys(prefs_dir):
    preferences.set_theme_preference("Ember")
    preferences.set_mixer_preferences(MixerState())

    assert preferences.get_theme_preference() == "Ember"
    assert preferences.get_mixer_preferences()["volume"] == 0.5


def test_corrupt_file_is_ignored(prefs_dir):
    (prefs_dir / "user_preferences.json").write_text("{not json")

    assert preferences.load_preferences() == {}


def test_unknown_keys_are_filtered(prefs_dir):
    (prefs_dir / "user_preferences.json").write_text(json.dumps({"volume": 0.2, "favorites": ["rain"]}))

    assert preferences.get_mixer_preferences() == {"volume": 0.2}


def test_bad_saved_values_fall_back_to_defaults(prefs_dir):
    (prefs_dir / "user_preferences.json").write_text(json.dumps({
        "volume": "loud",
        "loop_enabled": "yes",
        "fade_in_seconds": None,
        "fade_out_seconds": 1.5,
    }))

    assert preferences.get_mixer_preferences() == {"fade_out_seconds": 1.5}


def test_out_of_range_saved_values_are_clamped(prefs_dir):
    (prefs_dir / "user_preferences.json").write_text(json.dumps({
        "volume": 7,
        "fade_in_seconds": -2,
        "fade_out_seconds": float("nan"),
    }))

    assert preferences.get_mixer_preferences() == {"volume": 1.0, "fade_in_seconds": 0.0}


def test_build_facade_survives_bad_prefs(prefs_dir):
    from main import build_facade

    (prefs_dir / "user_preferences.json").write_text(json.dumps({"volume": "loud", "fade_in_seconds": 3}))

    facade = build_facade(force_mock=True)
    try:
        assert facade.state.shared_volume == 0.5
        assert facade.state.fade_in_seconds == 3.0
    finally:
        facade.shutdown()
