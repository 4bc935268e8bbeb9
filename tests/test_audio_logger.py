"""Tests for the file-backed audio debug logger."""

import logging

import pytest

from tarteelflow.audio.audio_logger import (
    AUDIO_LOGGER_NAME,
    DEFAULT_LOG_FILENAME,
    configure_audio_logger,
    get_audio_log_path,
)


@pytest.fixture(autouse=True)
def clean_audio_logger():
    logger = logging.getLogger(AUDIO_LOGGER_NAME)
    saved = list(logger.handlers)
    yield
    for handler in list(logger.handlers):
        if handler not in saved:
            logger.removeHandler(handler)
            handler.close()


def _file_handlers(logger, path):
    return [
        h for h in logger.handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename == str(path.resolve())
    ]


def test_log_path_in_directory(tmp_path):
    assert get_audio_log_path(tmp_path) == (tmp_path / DEFAULT_LOG_FILENAME).resolve()


def test_writes_startup_line(tmp_path):
    path = tmp_path / "audio.log"
    logger = configure_audio_logger(path)
    assert logger.name == AUDIO_LOGGER_NAME
    assert not logger.propagate
    assert "Audio debug logging started" in path.read_text(encoding="utf-8")


def test_configure_is_idempotent(tmp_path):
    path = tmp_path / "audio.log"
    configure_audio_logger(path)
    logger = configure_audio_logger(path)
    assert len(_file_handlers(logger, path)) == 1
    assert path.read_text(encoding="utf-8").count("Audio debug logging started") == 1


def test_child_loggers_reach_the_file(tmp_path):
    path = tmp_path / "audio.log"
    configure_audio_logger(path)
    logging.getLogger(AUDIO_LOGGER_NAME + ".qt_player").warning("decoder gave up")
    for handler in _file_handlers(logging.getLogger(AUDIO_LOGGER_NAME), path):
        handler.flush()
    assert "decoder gave up" in path.read_text(encoding="utf-8")


def test_force_adds_handler_and_startup_line(tmp_path):
    path = tmp_path / "audio.log"
    configure_audio_logger(path)
    logger = configure_audio_logger(path, force=True)
    assert len(_file_handlers(logger, path)) == 2
