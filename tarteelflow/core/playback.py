"""
Playback and turn-taking state machine
======================================

:class:`PlaybackStateMachine` owns the one :class:`PlaybackState` of the
application and is the only thing allowed to replace it.  It reacts to
two kinds of input:

* commands from the front end (``switch_mode``, ``start_learning``,
  ``start_practice``, ``pause``, ``resume``, ``advance_practice``), and
* notifications from the :class:`~tarteelflow.audio.capability.AudioCapability`
  (time updates and end of media).

Phases::

    IDLE ──start_learning──▶ LEARNING_PLAYING ◀─resume/pause─▶ LEARNING_PAUSED
      │
      └──start_practice───▶ PRACTICE_PLAYING ◀─resume/pause─▶ PRACTICE_PAUSED
                               │        ▲
                          ended│        │advance_practice (not at last ayah)
                               ▼        │
                          PRACTICE_AWAITING_USER

``switch_mode`` returns to ``IDLE`` from anywhere.  A load or play that
the backend rejects leaves the state untouched: the user simply hears
nothing and can issue the command again.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from ..audio.capability import AudioCapability
from ..data.works import Work
from ..errors import PlaybackFailure
from .duration_index import DurationIndex

logger = logging.getLogger(__name__)


class Mode(str, enum.Enum):
    LEARNING = "learning"
    PRACTICE = "practice"


class Phase(enum.Enum):
    IDLE = "idle"
    LEARNING_PLAYING = "learning.playing"
    LEARNING_PAUSED = "learning.paused"
    PRACTICE_PLAYING = "practice.playing"
    PRACTICE_PAUSED = "practice.paused"
    PRACTICE_AWAITING_USER = "practice.awaiting_user"


_PAUSED_VARIANT = {
    Phase.LEARNING_PLAYING: Phase.LEARNING_PAUSED,
    Phase.PRACTICE_PLAYING: Phase.PRACTICE_PAUSED,
}
_PLAYING_VARIANT = {paused: playing for playing, paused in _PAUSED_VARIANT.items()}


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of the playback state.

    ``awaiting_user`` is derived from the phase, so it can only be true
    in practice mode.
    """

    mode: Mode
    phase: Phase = Phase.IDLE
    active_unit_index: int = 0

    @classmethod
    def idle(cls, mode: Mode) -> "PlaybackState":
        return cls(mode=mode)

    @property
    def awaiting_user(self) -> bool:
        return self.phase is Phase.PRACTICE_AWAITING_USER

    @property
    def is_playing(self) -> bool:
        return self.phase in _PAUSED_VARIANT

    @property
    def is_paused(self) -> bool:
        return self.phase in _PLAYING_VARIANT


StateListener = Callable[[PlaybackState], None]


class PlaybackStateMachine:
    """Drives an audio capability through learning and practice sessions.

    :param audio: The player to drive.  The machine subscribes to its
        time-update, ended and error notifications.
    :param mode: Initial mode.
    """

    def __init__(self, audio: AudioCapability, mode: Mode = Mode.LEARNING) -> None:
        self._audio = audio
        self._state = PlaybackState.idle(Mode(mode))
        self._work: Optional[Work] = None
        self._duration_index: Optional[DurationIndex] = None
        self._listeners: List[StateListener] = []
        audio.on_time_update(self.on_time_update)
        audio.on_ended(self.on_playback_ended)
        audio.on_metadata_error(self._on_audio_error)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def work(self) -> Optional[Work]:
        return self._work

    @property
    def duration_index(self) -> Optional[DurationIndex]:
        return self._duration_index

    def can_advance(self) -> bool:
        """True if ``advance_practice`` would play another ayah."""
        return (
            self._state.awaiting_user
            and self._work is not None
            and self._state.active_unit_index + 1 < self._work.unit_count
        )

    def add_listener(self, listener: StateListener) -> None:
        """Call *listener* with the new state after every effective change."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Wiring (used by the SyncEngine)
    # ------------------------------------------------------------------

    def bind(self, work: Optional[Work]) -> None:
        """Use *work* for subsequent sessions and drop the old timing index."""
        self._work = work
        self._duration_index = None

    def set_duration_index(self, index: Optional[DurationIndex]) -> None:
        self._duration_index = index

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, state: PlaybackState) -> None:
        if state == self._state:
            return
        logger.debug(
            "%s[%d] -> %s[%d]",
            self._state.phase.value,
            self._state.active_unit_index,
            state.phase.value,
            state.active_unit_index,
        )
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _load_and_play(self, url: str) -> bool:
        try:
            self._audio.load(url)
            self._audio.play()
        except PlaybackFailure as exc:
            logger.warning("Playback of %s failed: %s", url, exc)
            return False
        return True

    def _on_audio_error(self, message: str) -> None:
        logger.warning("Audio backend reported: %s", message)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def switch_mode(self, mode: Mode) -> None:
        """Hard reset into *mode*: stop, unload, back to the first ayah."""
        try:
            self._audio.stop()
        except PlaybackFailure as exc:
            logger.warning("Stopping audio failed: %s", exc)
        self._transition(PlaybackState.idle(Mode(mode)))

    def start_learning(self) -> bool:
        """Play the full-surah recording from the start."""
        if self._work is None:
            logger.debug("start_learning ignored: no surah selected")
            return False
        if not self._load_and_play(self._work.full_audio_url):
            return False
        self._transition(PlaybackState(mode=Mode.LEARNING, phase=Phase.LEARNING_PLAYING))
        return True

    def start_practice(self) -> bool:
        """Play the first ayah on its own."""
        if self._work is None or not self._work.units:
            logger.debug("start_practice ignored: no surah selected")
            return False
        if not self._load_and_play(self._work.units[0].audio_url):
            return False
        self._transition(PlaybackState(mode=Mode.PRACTICE, phase=Phase.PRACTICE_PLAYING))
        return True

    def pause(self) -> None:
        paused = _PAUSED_VARIANT.get(self._state.phase)
        if paused is None:
            return
        self._audio.pause()
        self._transition(replace(self._state, phase=paused))

    def resume(self) -> bool:
        playing = _PLAYING_VARIANT.get(self._state.phase)
        if playing is None:
            return False
        try:
            self._audio.play()
        except PlaybackFailure as exc:
            logger.warning("Resuming playback failed: %s", exc)
            return False
        self._transition(replace(self._state, phase=playing))
        return True

    def advance_practice(self) -> bool:
        """Play the next ayah once the user has had their turn.

        Does nothing unless the machine is awaiting the user, and does
        nothing at the last ayah (the practice session is complete).
        """
        if not self._state.awaiting_user or self._work is None:
            return False
        next_index = self._state.active_unit_index + 1
        if next_index >= self._work.unit_count:
            logger.info("Practice of surah %s complete", self._work.number)
            return False
        if not self._load_and_play(self._work.units[next_index].audio_url):
            return False
        self._transition(
            PlaybackState(
                mode=Mode.PRACTICE,
                phase=Phase.PRACTICE_PLAYING,
                active_unit_index=next_index,
            )
        )
        return True

    # ------------------------------------------------------------------
    # Audio notifications
    # ------------------------------------------------------------------

    def on_time_update(self, seconds: float) -> None:
        """Follow the full-surah recording in learning mode."""
        state = self._state
        if state.mode is not Mode.LEARNING or state.phase is Phase.IDLE:
            return
        index = self._duration_index
        # An index without a single resolved duration cannot place anything.
        if index is None or index.total_duration <= 0:
            return
        position = index.unit_at(seconds)
        if position != state.active_unit_index:
            self._transition(replace(state, active_unit_index=position))

    def on_playback_ended(self) -> None:
        phase = self._state.phase
        if phase is Phase.PRACTICE_PLAYING:
            self._transition(replace(self._state, phase=Phase.PRACTICE_AWAITING_USER))
        elif phase is Phase.LEARNING_PLAYING:
            logger.info("Full recitation finished")


__all__ = [
    "Mode",
    "Phase",
    "PlaybackState",
    "PlaybackStateMachine",
    "StateListener",
]
