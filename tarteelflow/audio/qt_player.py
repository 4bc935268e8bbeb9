"""Qt Multimedia backend.

:class:`QtAudioPlayer` implements :class:`AudioCapability` on top of a
``QMediaPlayer`` routed to a ``QAudioOutput``.  :class:`QtDurationProbe`
measures recordings by loading each one into its own short-lived
``QMediaPlayer`` and reading the duration once the metadata is in.

Both must be created and used on the thread running the Qt event loop
(``QCoreApplication`` is enough; no widgets are involved).  Remote
locators are streamed by Qt's FFmpeg backend, local paths are accepted
as well.
"""

from __future__ import annotations

import logging
from typing import Set

from PyQt6.QtCore import QUrl
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

from .capability import AudioCapability, DurationCallback, DurationProbe
from ..errors import PlaybackFailure

logger = logging.getLogger(__name__)


def _to_qurl(url: str) -> QUrl:
    if "://" in url:
        return QUrl(url)
    return QUrl.fromLocalFile(url)


class QtAudioPlayer(AudioCapability):
    """Single-source player backed by ``QMediaPlayer``.

    :param volume: Linear output volume (0.0–1.0).
    """

    def __init__(self, volume: float = 1.0) -> None:
        super().__init__()
        self._output = QAudioOutput()
        self._output.setVolume(max(0.0, min(1.0, volume)))
        self._player = QMediaPlayer()
        self._player.setAudioOutput(self._output)
        self._player.positionChanged.connect(self._on_position_changed)
        self._player.mediaStatusChanged.connect(self._on_media_status_changed)
        self._player.errorOccurred.connect(self._on_error)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def load(self, url: str) -> None:
        qurl = _to_qurl(url) if url else QUrl()
        if qurl.isEmpty() or not qurl.isValid():
            raise PlaybackFailure(f"Invalid audio locator: {url!r}")
        logger.debug("Loading %s", url)
        self._player.setSource(qurl)

    def play(self) -> None:
        if self._player.source().isEmpty():
            raise PlaybackFailure("No audio source loaded")
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def stop(self) -> None:
        self._player.stop()
        self._player.setSource(QUrl())

    def current_time(self) -> float:
        return self._player.position() / 1000.0

    def duration(self) -> float:
        return max(0, self._player.duration()) / 1000.0

    # ------------------------------------------------------------------
    # Qt signal handlers
    # ------------------------------------------------------------------

    def _on_position_changed(self, position_ms: int) -> None:
        self._emit_time_update(position_ms / 1000.0)

    def _on_media_status_changed(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._emit_ended()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._emit_metadata_error("Invalid media")

    def _on_error(self, error: QMediaPlayer.Error, message: str) -> None:
        self._emit_metadata_error(message or str(error))


class QtDurationProbe(DurationProbe):
    """Measure recordings with one transient ``QMediaPlayer`` each.

    The player is stopped, unloaded and scheduled for deletion as soon
    as the duration is known or the media turns out to be unusable.
    """

    def __init__(self) -> None:
        self._players: Set[QMediaPlayer] = set()

    @property
    def pending(self) -> int:
        """Number of probes that have not settled yet."""
        return len(self._players)

    def _release(self, player: QMediaPlayer) -> None:
        self._players.discard(player)
        player.stop()
        player.setSource(QUrl())
        player.deleteLater()

    def probe(self, url: str, callback: DurationCallback) -> None:
        if not url:
            callback(0.0)
            return
        player = QMediaPlayer()
        settled = False

        def settle(seconds: float) -> None:
            nonlocal settled
            if settled:
                return
            settled = True
            self._release(player)
            callback(seconds)

        def on_status(status: QMediaPlayer.MediaStatus) -> None:
            if status in (
                QMediaPlayer.MediaStatus.LoadedMedia,
                QMediaPlayer.MediaStatus.BufferedMedia,
            ):
                settle(max(0, player.duration()) / 1000.0)
            elif status == QMediaPlayer.MediaStatus.InvalidMedia:
                logger.debug("Probe of %s: invalid media", url)
                settle(0.0)

        def on_duration(duration_ms: int) -> None:
            if duration_ms > 0:
                settle(duration_ms / 1000.0)

        def on_error(error: QMediaPlayer.Error, message: str) -> None:
            logger.debug("Probe of %s failed: %s", url, message or error)
            settle(0.0)

        player.mediaStatusChanged.connect(on_status)
        player.durationChanged.connect(on_duration)
        player.errorOccurred.connect(on_error)
        self._players.add(player)
        player.setSource(_to_qurl(url))
