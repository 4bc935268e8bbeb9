"""
Playback synchronization core for TarteelFlow.

This subpackage contains everything with real invariants: the per-ayah
timing index, surah navigation, the learning/practice state machine and
the :class:`SyncEngine` that wires them together.  Nothing in here
imports a media framework; audio is reached only through the
interfaces in :mod:`tarteelflow.audio.capability`, so the whole core can
be driven by scripted fakes.

Example::

    from tarteelflow.core import SyncEngine, Mode
    engine = SyncEngine(connector, player, probe)
    engine.select_narrator("4")
    engine.set_mode(Mode.PRACTICE)
    engine.start_practice()
"""

from .duration_index import DurationIndex, DurationIndexBuilder  # noqa: F401
from .navigation import NavigationModel  # noqa: F401
from .playback import Mode, Phase, PlaybackState, PlaybackStateMachine  # noqa: F401
from .sync_engine import SyncEngine  # noqa: F401

__all__ = [
    "DurationIndex",
    "DurationIndexBuilder",
    "NavigationModel",
    "Mode",
    "Phase",
    "PlaybackState",
    "PlaybackStateMachine",
    "SyncEngine",
]
