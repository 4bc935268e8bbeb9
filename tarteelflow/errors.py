"""Exception types shared across TarteelFlow.

Only :class:`ContentLoadError` is ever shown to the user.  The two audio
related errors are raised by adapters and absorbed by the core: a failed
duration probe degrades the highlighting of a single ayah, a failed
load/play simply leaves the player silent.
"""

from __future__ import annotations


class TarteelFlowError(Exception):
    """Base class for all TarteelFlow errors."""


class ContentLoadError(TarteelFlowError):
    """The content provider was unreachable or answered with bad data."""


class DurationProbeFailure(TarteelFlowError):
    """The duration of a single recording could not be resolved."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"Could not resolve duration of {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PlaybackFailure(TarteelFlowError):
    """The audio backend rejected a load or play request."""


__all__ = [
    "TarteelFlowError",
    "ContentLoadError",
    "DurationProbeFailure",
    "PlaybackFailure",
]
