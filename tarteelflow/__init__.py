"""
Top‑level package for TarteelFlow.

TarteelFlow is a recitation trainer.  In *learning* mode it plays the
recitation of a whole surah and highlights the ayah currently being
recited; in *practice* mode it plays one ayah at a time and waits for
the user to repeat it before moving on.

Example usage::

    from tarteelflow import get_app_config, get_default_connector, SyncEngine, Mode
    from tarteelflow.audio import make_duration_probe
    from tarteelflow.audio.qt_player import QtAudioPlayer

    cfg = get_app_config()
    engine = SyncEngine(
        get_default_connector(cfg.section("connector")),
        QtAudioPlayer(),
        make_duration_probe(cfg.section("audio")),
    )
    engine.select_narrator("4")
    engine.start_learning()

The API surface re‑exports only a handful of symbols.  Import from the
subpackages (``tarteelflow.core``, ``tarteelflow.audio``,
``tarteelflow.connectors``) for anything lower level.
"""

from .config import AppConfig, get_app_config  # noqa: F401
from .connectors import get_default_connector  # noqa: F401
from .core import DurationIndex, Mode, Phase, PlaybackState, SyncEngine  # noqa: F401
from .data import Unit, Work  # noqa: F401
from .errors import ContentLoadError, DurationProbeFailure, PlaybackFailure  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "get_app_config",
    "get_default_connector",
    "DurationIndex",
    "Mode",
    "Phase",
    "PlaybackState",
    "SyncEngine",
    "Unit",
    "Work",
    "ContentLoadError",
    "DurationProbeFailure",
    "PlaybackFailure",
]
