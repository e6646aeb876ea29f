import pytest

from soundscape.backends import create_backends
from soundscape.errors import OutputAcquisitionFailed, PlaybackError, ResourceNotFound
from soundscape.mock_backend import MockOutput, MockPlayback


def test_forced_mock_backends():
    playback, output = create_backends(force_mock=True)

    assert isinstance(playback, MockPlayback)
    assert isinstance(output, MockOutput)


def test_env_var_selects_mock(monkeypatch):
    monkeypatch.setenv("SOUNDSCAPE_FORCE_MOCK_AUDIO", "1")

    playback, output = create_backends()

    assert isinstance(playback, MockPlayback)


def test_mock_output_session_releases_once():
    output = MockOutput()
    session = output.acquire_shared(mixable=True)

    session.release()
    session.release()

    assert session.mixable
    assert output.acquisitions == 1
    assert output.releases == 1


def test_mock_output_failure():
    with pytest.raises(OutputAcquisitionFailed):
        MockOutput(fail=True).acquire_shared()


def test_mock_playback_restricted_resources():
    playback = MockPlayback(resources=["rain"])
    playback.unplayable.add("rain")

    handle = playback.acquire("rain")
    with pytest.raises(PlaybackError):
        handle.play()
    with pytest.raises(ResourceNotFound):
        playback.acquire("waves")
