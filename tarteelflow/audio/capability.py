"""Interfaces between the playback core and an audio backend.

The core never talks to a media framework directly.  It drives an
:class:`AudioCapability` (one player: load a locator, play, pause, stop,
report position and duration, notify time updates, end of media and
errors) and measures recordings through a :class:`DurationProbe`.

Neither interface assumes that ``load`` or ``play`` complete
synchronously.  Backends report progress through the registered
callbacks, always on the thread that runs the event loop.
"""

from __future__ import annotations

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

TimeUpdateCallback = Callable[[float], None]
EndedCallback = Callable[[], None]
ErrorCallback = Callable[[str], None]
DurationCallback = Callable[[float], None]


class AudioCapability:
    """Abstract single-source audio player.

    Subclasses implement the transport methods; callback bookkeeping is
    shared here so that every backend notifies listeners the same way.
    """

    def __init__(self) -> None:
        self._time_update_callbacks: List[TimeUpdateCallback] = []
        self._ended_callbacks: List[EndedCallback] = []
        self._error_callbacks: List[ErrorCallback] = []

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def load(self, url: str) -> None:
        """Replace the current source with *url*.

        :raises PlaybackFailure: If the backend rejects the locator.
        """
        raise NotImplementedError

    def play(self) -> None:
        """Start or resume playback of the loaded source.

        :raises PlaybackFailure: If nothing can be played.
        """
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        """Stop playback and unload the current source."""
        raise NotImplementedError

    def current_time(self) -> float:
        """Elapsed time of the current source in seconds."""
        raise NotImplementedError

    def duration(self) -> float:
        """Total duration of the current source in seconds (0 if unknown)."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def on_time_update(self, callback: TimeUpdateCallback) -> None:
        self._time_update_callbacks.append(callback)

    def on_ended(self, callback: EndedCallback) -> None:
        self._ended_callbacks.append(callback)

    def on_metadata_error(self, callback: ErrorCallback) -> None:
        self._error_callbacks.append(callback)

    def _emit_time_update(self, seconds: float) -> None:
        for callback in list(self._time_update_callbacks):
            callback(seconds)

    def _emit_ended(self) -> None:
        for callback in list(self._ended_callbacks):
            callback()

    def _emit_metadata_error(self, message: str) -> None:
        logger.debug("Audio backend error: %s", message)
        for callback in list(self._error_callbacks):
            callback(message)


class DurationProbe:
    """Resolves the duration of a single recording.

    :meth:`probe` must call *callback* exactly once with the duration in
    seconds, or with ``0.0`` when the duration cannot be resolved.  It
    may do so before returning or later from the event loop.  Any
    resources opened for the measurement are released before the
    callback fires.
    """

    def probe(self, url: str, callback: DurationCallback) -> None:
        raise NotImplementedError


__all__ = [
    "AudioCapability",
    "DurationProbe",
    "TimeUpdateCallback",
    "EndedCallback",
    "ErrorCallback",
    "DurationCallback",
]
