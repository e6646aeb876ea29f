from utils.formatting import format_minutes, format_remaining, format_seconds


def test_format_remaining():
    assert format_remaining(0) == "0:00"
    assert format_remaining(59.6) == "1:00"
    assert format_remaining(15 * 60 - 1) == "14:59"
    assert format_remaining(3723) == "1:02:03"
    assert format_remaining(-5) == "0:00"


def test_format_minutes():
    assert format_minutes(0) == "Off"
    assert format_minutes(1) == "1 minute"
    assert format_minutes(15) == "15 minutes"
    assert format_minutes(60) == "1 hour"
    assert format_minutes(120) == "2 hours"


def test_format_seconds():
    assert format_seconds(2) == "2s"
    assert format_seconds(2.0) == "2s"
    assert format_seconds(1.5) == "1.5s"
