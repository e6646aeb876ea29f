"""
Utility functions for Soundscape.
"""

from .formatting import format_remaining, format_minutes, format_seconds

__all__ = ['format_remaining', 'format_minutes', 'format_seconds']
