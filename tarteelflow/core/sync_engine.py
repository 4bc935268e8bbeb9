"""Composition root of the playback core.

:class:`SyncEngine` is the single object a front end talks to.  It owns
the :class:`NavigationModel`, the current :class:`DurationIndex` and the
:class:`PlaybackStateMachine`, and it is the only place where the three
meet.  Any change of reciter or surah resets the state machine (keeping
the current mode) and starts a new duration index build.

Duration probes may settle long after the selection that started them
has been replaced.  Each build is tagged with a generation number taken
at start time; results whose generation is no longer current are
dropped.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from ..audio.capability import AudioCapability, DurationProbe
from ..connectors.base import BaseConnector
from ..data.works import DEFAULT_WORK_IDS, Work
from ..errors import ContentLoadError
from .duration_index import DurationIndex, DurationIndexBuilder
from .navigation import NavigationModel
from .playback import Mode, PlaybackState, PlaybackStateMachine, StateListener

logger = logging.getLogger(__name__)

IndexListener = Callable[[DurationIndex], None]


class SyncEngine:
    """Ties content, timing and playback together for one front end.

    :param connector: Source of surahs and recording locators.
    :param audio: The player used for both modes.
    :param probe: Measures single ayah recordings for the timing index.
    :param work_ids: Surah numbers to load, in display order.
    :param mode: Initial mode.
    """

    def __init__(
        self,
        connector: BaseConnector,
        audio: AudioCapability,
        probe: DurationProbe,
        work_ids: Iterable[int] = DEFAULT_WORK_IDS,
        mode: Mode = Mode.LEARNING,
    ) -> None:
        self._connector = connector
        self._work_ids = tuple(work_ids)
        self._navigation = NavigationModel()
        self._machine = PlaybackStateMachine(audio, mode)
        self._builder = DurationIndexBuilder(probe)
        self._narrator: Optional[str] = None
        self._generation = 0
        self._duration_index: Optional[DurationIndex] = None
        self._load_error: Optional[str] = None
        self._index_listeners: List[IndexListener] = []

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_narrator(self, key: str) -> None:
        """Load every surah for reciter *key* and select the first one.

        On failure the previous surahs and reciter stay in place, the
        message is kept in :attr:`load_error` and the error is re-raised.

        :raises ContentLoadError: If the provider cannot supply the surahs.
        """
        try:
            works = self._connector.get_works(self._work_ids, key)
        except ContentLoadError as exc:
            self._load_error = str(exc) or "Failed to load surahs"
            logger.error("Loading surahs for reciter %s failed: %s", key, self._load_error)
            raise
        self._load_error = None
        self._narrator = key
        self._navigation = NavigationModel(works)
        logger.info("Reciter %s selected, %d surahs available", key, len(works))
        self._selection_changed()

    def select_work(self, index: int) -> bool:
        if not self._navigation.select_work(index):
            return False
        self._selection_changed()
        return True

    def next_work(self) -> bool:
        if not self._navigation.next_work():
            return False
        self._selection_changed()
        return True

    def previous_work(self) -> bool:
        if not self._navigation.previous_work():
            return False
        self._selection_changed()
        return True

    def _selection_changed(self) -> None:
        self._generation += 1
        generation = self._generation
        work = self._navigation.active_work()
        self._duration_index = None
        self._machine.bind(work)
        self._machine.switch_mode(self._machine.state.mode)
        if work is None:
            return
        logger.debug("Building duration index for surah %s (generation %d)", work.number, generation)
        self._builder.build(work.units, lambda index: self._index_ready(generation, index))

    def _index_ready(self, generation: int, index: DurationIndex) -> None:
        if generation != self._generation:
            logger.debug(
                "Discarding duration index of generation %d (current %d)",
                generation,
                self._generation,
            )
            return
        self._duration_index = index
        self._machine.set_duration_index(index)
        logger.debug("Duration index ready: %.1fs over %d ayat", index.total_duration, len(index))
        for listener in list(self._index_listeners):
            listener(index)

    # ------------------------------------------------------------------
    # Playback commands
    # ------------------------------------------------------------------

    def set_mode(self, mode: Mode) -> None:
        self._machine.switch_mode(mode)

    def start_learning(self) -> bool:
        return self._machine.start_learning()

    def start_practice(self) -> bool:
        return self._machine.start_practice()

    def pause(self) -> None:
        self._machine.pause()

    def resume(self) -> bool:
        return self._machine.resume()

    def advance_practice(self) -> bool:
        return self._machine.advance_practice()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._machine.state

    @property
    def narrator(self) -> Optional[str]:
        return self._narrator

    @property
    def works(self) -> List[Work]:
        return self._navigation.works

    @property
    def selected_work_index(self) -> int:
        return self._navigation.selected_index

    @property
    def has_next_work(self) -> bool:
        return self._navigation.has_next

    @property
    def has_previous_work(self) -> bool:
        return self._navigation.has_previous

    @property
    def duration_index(self) -> Optional[DurationIndex]:
        return self._duration_index

    @property
    def load_error(self) -> Optional[str]:
        return self._load_error

    def active_work(self) -> Optional[Work]:
        return self._navigation.active_work()

    def unit_count(self) -> int:
        return self._navigation.unit_count()

    def is_index_ready(self) -> bool:
        return self._duration_index is not None

    def current_highlight_index(self) -> int:
        return self._machine.state.active_unit_index

    def is_awaiting_user(self) -> bool:
        return self._machine.state.awaiting_user

    def can_advance_practice(self) -> bool:
        return self._machine.can_advance()

    def current_mode(self) -> Mode:
        return self._machine.state.mode

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: StateListener) -> None:
        """Be told about every effective playback state change."""
        self._machine.add_listener(listener)

    def add_index_listener(self, listener: IndexListener) -> None:
        """Be told when the timing index of the current surah is ready."""
        self._index_listeners.append(listener)
