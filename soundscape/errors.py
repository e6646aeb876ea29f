"""
Error types raised by the Soundscape mixer.

None of these are fatal: a failed intent leaves the mixer in its prior
state and the caller decides whether to retry.
"""


class MixerError(Exception):
    """Base class for every mixer failure."""


class ResourceNotFound(MixerError):
    """The requested track id or its backing audio resource does not exist."""

    def __init__(self, resource_ref, message=None):
        self.resource_ref = resource_ref
        super().__init__(message or f"Sound resource not found: {resource_ref}")


class ResourceUnreadable(ResourceNotFound):
    """The resource exists but could not be decoded."""

    def __init__(self, resource_ref, reason):
        self.reason = reason
        super().__init__(resource_ref, f"Could not decode '{resource_ref}': {reason}")


class OutputAcquisitionFailed(MixerError):
    """The shared audio output could not be claimed."""


class PlaybackError(MixerError):
    """The playback primitive refused to start a handle."""
