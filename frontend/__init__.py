"""
Frontend module for Soundscape.

Contains the desktop shell built with CustomTkinter.
Each component is a separate class for easy modification and testing.
"""

from .app import SoundscapeApp

__all__ = ['SoundscapeApp']
