"""
Formatting utilities for Soundscape.
"""


def format_remaining(seconds: float) -> str:
    """
    Format a countdown for display.

    Args:
        seconds: Remaining time in seconds

    Returns:
        Formatted string like "14:59" or "1:02:03"
    """
    if seconds < 0:
        seconds = 0

    total = int(seconds + 0.5)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_minutes(minutes: int) -> str:
    """
    Format a sleep timer choice.

    Args:
        minutes: Timer duration in minutes (0 = off)

    Returns:
        Formatted string like "Off", "15 minutes", "1 hour" or "2 hours"
    """
    if minutes <= 0:
        return "Off"
    if minutes % 60 == 0:
        hours = minutes // 60
        return "1 hour" if hours == 1 else f"{hours} hours"
    return "1 minute" if minutes == 1 else f"{minutes} minutes"


def format_seconds(seconds: float) -> str:
    """Format a fade duration like "2s" or "1.5s"."""
    if float(seconds).is_integer():
        return f"{int(seconds)}s"
    return f"{seconds:.1f}s"
