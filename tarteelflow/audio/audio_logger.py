"""Audio debug logger configuration.

This module configures a **single** file-backed logger for the audio
side of the application: the Qt player and the duration probes log
below ``tarteelflow.audio``.

Goals
-----
- Write to ``audio_debug.log`` in the working directory unless a path
  is given.
- Be idempotent (safe to call multiple times).
- Work even if other parts of the app already configured logging.
- Emit a visible *startup* entry so users can confirm the log is active.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Optional

AUDIO_LOGGER_NAME = "tarteelflow.audio"
DEFAULT_LOG_FILENAME = "audio_debug.log"

_LOCK = Lock()
_STARTED_PATHS: set = set()


def get_audio_log_path(directory: Optional[os.PathLike] = None) -> Path:
    """Return the absolute path of the audio log inside *directory*."""
    base = Path(directory) if directory else Path.cwd()
    return (base / DEFAULT_LOG_FILENAME).resolve()


def configure_audio_logger(
    log_path: Optional[os.PathLike] = None,
    force: bool = False,
) -> logging.Logger:
    """Configure the audio debug logger and return it.

    Parameters
    ----------
    log_path:
        File to append to.  Defaults to :func:`get_audio_log_path`.
    force:
        If True, adds a fresh FileHandler and writes a startup line even
        if the logger already writes to *log_path*.

    Returns
    -------
    logging.Logger
        The configured logger named ``tarteelflow.audio``.
    """
    path = str(Path(log_path).resolve()) if log_path else str(get_audio_log_path())

    with _LOCK:
        logger = logging.getLogger(AUDIO_LOGGER_NAME)
        logger.setLevel(logging.DEBUG)

        # Keep audio chatter out of the console; it goes to the file only.
        logger.propagate = False

        has_matching_file_handler = any(
            isinstance(h, logging.FileHandler)
            and os.path.abspath(h.baseFilename) == path
            for h in logger.handlers
        )

        if force or not has_matching_file_handler:
            fh = logging.FileHandler(path, mode="a", encoding="utf-8")
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            logger.addHandler(fh)

        if force or path not in _STARTED_PATHS:
            logger.info("=== Audio debug logging started (pid=%s) ===", os.getpid())
            for h in logger.handlers:
                h.flush()
            _STARTED_PATHS.add(path)

        return logger
