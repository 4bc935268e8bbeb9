"""Duration probe that downloads and decodes recordings with pydub.

This is the alternative to :class:`~tarteelflow.audio.qt_player.QtDurationProbe`
for setups without a Qt multimedia backend.  Each recording is fetched
with ``requests`` (or read from disk for local paths), decoded by pydub
and measured.  Decoding MP3 requires ``ffmpeg`` on the ``PATH``; WAV is
handled natively.

By default a probe settles before :meth:`PydubDurationProbe.probe`
returns.  With ``threaded=True`` each measurement runs as a
``QRunnable`` on the global ``QThreadPool`` and the result is delivered
back to the event-loop thread through a Qt signal, so callers keep the
single-threaded model.
"""

from __future__ import annotations

import io
import logging
import os
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

import requests
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal, pyqtSlot

from .capability import DurationCallback, DurationProbe
from ..errors import DurationProbeFailure

logger = logging.getLogger(__name__)


def _format_from_url(url: str) -> Optional[str]:
    """Guess the container format from the locator's extension."""
    ext = os.path.splitext(urlparse(url).path)[1].lower().lstrip(".")
    return ext or None


class _ProbeSignals(QObject):
    """Signals of a :class:`_ProbeJob`.

    ``resolved``
        Always emitted once, with the duration or ``0.0``.

    ``failed``
        Emitted before ``resolved`` when the measurement failed.
    """

    resolved = pyqtSignal(float)
    failed = pyqtSignal(str)


class _ProbeJob(QRunnable):
    """Runs one measurement on a worker thread."""

    def __init__(self, measure: Callable[[str], float], url: str) -> None:
        super().__init__()
        self.measure = measure
        self.url = url
        self.signals = _ProbeSignals()

    @pyqtSlot()
    def run(self) -> None:
        seconds = 0.0
        try:
            seconds = self.measure(self.url)
        except DurationProbeFailure as exc:
            self.signals.failed.emit(str(exc))
        except Exception as exc:
            # Nothing may escape run(): PyQt aborts on errors in a virtual.
            logger.warning("Measuring %s raised %s: %s", self.url, type(exc).__name__, exc)
            self.signals.failed.emit(str(DurationProbeFailure(self.url, str(exc))))
        finally:
            self.signals.resolved.emit(seconds)


class PydubDurationProbe(DurationProbe):
    """Measure recordings by decoding them with pydub.

    :param session: Optional :class:`requests.Session` for downloads.
    :param timeout: Download timeout in seconds.
    :param threaded: Run measurements on the global ``QThreadPool``.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        threaded: bool = False,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.threaded = threaded
        self._jobs: Dict[int, _ProbeJob] = {}

    def _read(self, url: str) -> bytes:
        if urlparse(url).scheme in ("http", "https"):
            try:
                resp = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as exc:
                raise DurationProbeFailure(url, str(exc)) from exc
            if resp.status_code != 200:
                raise DurationProbeFailure(url, f"status {resp.status_code}")
            return resp.content
        try:
            with open(url, "rb") as f:
                return f.read()
        except OSError as exc:
            raise DurationProbeFailure(url, str(exc)) from exc

    def measure(self, url: str) -> float:
        """Return the duration of *url* in seconds.

        :raises DurationProbeFailure: If the recording cannot be fetched
            or decoded.
        """
        if not url:
            raise DurationProbeFailure(url, "empty locator")
        buffer = io.BytesIO(self._read(url))
        try:
            segment = AudioSegment.from_file(buffer, format=_format_from_url(url))
        except (CouldntDecodeError, OSError, ValueError) as exc:
            raise DurationProbeFailure(url, str(exc)) from exc
        finally:
            buffer.close()
        return segment.duration_seconds

    def probe(self, url: str, callback: DurationCallback) -> None:
        if not self.threaded:
            try:
                seconds = self.measure(url)
            except DurationProbeFailure as exc:
                logger.debug("%s", exc)
                seconds = 0.0
            callback(seconds)
            return

        job = _ProbeJob(self.measure, url)
        key = id(job)

        def on_resolved(seconds: float) -> None:
            self._jobs.pop(key, None)
            callback(seconds)

        job.signals.failed.connect(lambda message: logger.debug("%s", message))
        job.signals.resolved.connect(on_resolved)
        self._jobs[key] = job
        QThreadPool.globalInstance().start(job)
