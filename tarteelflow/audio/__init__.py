"""
Audio backends for TarteelFlow.

The playback core only knows two small interfaces from
:mod:`~tarteelflow.audio.capability`:

* :class:`AudioCapability` – one player that loads a locator, plays,
  pauses, stops and reports time updates, end of media and errors.
* :class:`DurationProbe` – measures how long a single recording is.

Concrete implementations:

* :class:`~tarteelflow.audio.qt_player.QtAudioPlayer` and
  :class:`~tarteelflow.audio.qt_player.QtDurationProbe` – Qt Multimedia.
* :class:`~tarteelflow.audio.pydub_probe.PydubDurationProbe` – download
  and decode with pydub (needs ``ffmpeg`` for MP3).

Use :func:`make_duration_probe` to pick a probe from the ``audio``
config section::

    probe = make_duration_probe({"probe": "pydub", "threaded_probe": True})
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from .capability import AudioCapability, DurationProbe  # noqa: F401

logger = logging.getLogger(__name__)


def make_duration_probe(config: Dict[str, Any] | None = None) -> DurationProbe:
    """Return the duration probe named by ``config["probe"]``.

    ``"qt"`` (default) measures with transient ``QMediaPlayer`` objects,
    ``"pydub"`` downloads and decodes each recording.
    """
    config = config or {}
    kind = str(config.get("probe", "qt")).lower()
    if kind == "pydub":
        from .pydub_probe import PydubDurationProbe

        return PydubDurationProbe(threaded=bool(config.get("threaded_probe", True)))
    if kind != "qt":
        logger.warning("Unknown duration probe %r, falling back to Qt", kind)
    from .qt_player import QtDurationProbe

    return QtDurationProbe()


__all__ = [
    "AudioCapability",
    "DurationProbe",
    "make_duration_probe",
]
