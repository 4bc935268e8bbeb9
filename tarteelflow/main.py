"""TarteelFlow console entry point.

This script can be invoked directly (``python -m tarteelflow.main``), via
the package's ``__main__`` module or through the ``tarteelflow`` console
script.  It loads the configured surahs for one reciter, then runs a
learning or practice session on a ``QCoreApplication`` event loop,
logging each ayah as it becomes active.

In practice mode the user's turn is a fixed pause
(``playback.user_turn_seconds``) after which the next ayah plays.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from PyQt6.QtCore import QCoreApplication, QTimer

from .audio import AudioCapability, make_duration_probe
from .audio.audio_logger import configure_audio_logger
from .audio.qt_player import QtAudioPlayer
from .config import get_app_config
from .connectors import get_default_connector
from .core import Mode, PlaybackState, SyncEngine
from .core.duration_index import DurationIndex
from .data.reciters import BUILTIN_RECITERS, DEFAULT_RECITER, get_reciter, reciter_name
from .data.works import DEFAULT_WORK_IDS
from .errors import ContentLoadError

logger = logging.getLogger(__name__)


class ConsoleSession:
    """Runs one session of *engine* and quits *app* when it concludes."""

    def __init__(
        self,
        engine: SyncEngine,
        player: AudioCapability,
        app: QCoreApplication,
        mode: Mode,
        turn_seconds: float,
    ) -> None:
        self.engine = engine
        self.app = app
        self.mode = mode
        self.turn_ms = max(0, int(turn_seconds * 1000))
        self._armed = False
        self._started = False
        engine.add_listener(self._on_state)
        engine.add_index_listener(self._on_index_ready)
        player.on_ended(self._on_ended)

    def start(self) -> None:
        self.engine.set_mode(self.mode)
        self._armed = True
        work = self.engine.active_work()
        if work is None:
            logger.error("No surah loaded.")
            self.app.quit()
            return
        logger.info("%s (%s), reciter %s", work.title, work.arabic_name,
                    reciter_name(self.engine.narrator or ""))
        if self.mode is Mode.PRACTICE:
            self._begin(self.engine.start_practice)
        elif self.engine.is_index_ready():
            self._begin(self.engine.start_learning)
        else:
            logger.info("Measuring ayat…")

    def _begin(self, command) -> None:
        self._started = True
        if not command():
            logger.error("Playback could not start.")
            self.app.quit()

    def _on_index_ready(self, index: DurationIndex) -> None:
        if self._armed and self.mode is Mode.LEARNING and not self._started:
            self._begin(self.engine.start_learning)

    def _announce(self, state: PlaybackState) -> None:
        work = self.engine.active_work()
        if work is None or not work.units:
            return
        unit = work.units[state.active_unit_index]
        logger.info("[%d/%d] %s", unit.number, work.unit_count, unit.text)
        if unit.translation:
            logger.info("      %s", unit.translation)

    def _on_state(self, state: PlaybackState) -> None:
        if state.is_playing:
            self._announce(state)
        if state.awaiting_user:
            if self.engine.can_advance_practice():
                logger.info("Your turn: recite this ayah.")
                QTimer.singleShot(self.turn_ms, self.engine.advance_practice)
            else:
                logger.info("Practice complete.")
                self.app.quit()

    def _on_ended(self) -> None:
        if self.engine.current_mode() is Mode.LEARNING:
            logger.info("Recitation finished.")
            self.app.quit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tarteelflow",
        description="Learn and practise surahs ayah by ayah.",
    )
    parser.add_argument("--reciter", help="reciter key (see --list-reciters)")
    parser.add_argument("--surah", type=int, help="surah number to recite")
    parser.add_argument("--mode", choices=[m.value for m in Mode], help="session mode")
    parser.add_argument("--config", help="JSON file with configuration overrides")
    parser.add_argument("--list-reciters", action="store_true", help="list reciters and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_reciters:
        for key, reciter in BUILTIN_RECITERS.items():
            print(f"{key}: {reciter.name}")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )
    config = get_app_config(args.config)
    if config.get("audio", "debug_log", default=True):
        configure_audio_logger()

    mode = Mode(args.mode or config.get("playback", "mode", default=Mode.LEARNING.value))
    reciter = args.reciter or str(config.get("content", "reciter", default=DEFAULT_RECITER))
    try:
        get_reciter(reciter)
    except KeyError:
        print(f"Error: unknown reciter {reciter!r} (see --list-reciters)", file=sys.stderr)
        return 2
    work_ids = [args.surah] if args.surah else config.get("content", "surahs", default=list(DEFAULT_WORK_IDS))

    app = QCoreApplication(sys.argv[:1])
    player = QtAudioPlayer(volume=float(config.get("audio", "volume", default=1.0)))
    engine = SyncEngine(
        connector=get_default_connector(config.section("connector")),
        audio=player,
        probe=make_duration_probe(config.section("audio")),
        work_ids=work_ids,
        mode=mode,
    )

    try:
        engine.select_narrator(reciter)
    except ContentLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    session = ConsoleSession(
        engine,
        player,
        app,
        mode,
        float(config.get("playback", "user_turn_seconds", default=5.0)),
    )
    QTimer.singleShot(0, session.start)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
