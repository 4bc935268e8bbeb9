"""LocalJsonConnector: offline mirror of the quranapi documents.

Reads the same JSON documents the remote API serves, but from a local
directory.  Only the text metadata is local; the audio locators inside
the documents still point at the provider's recordings.

Expected layout below ``data_dir``::

    1.json              – names, totalAyah, arabic1, english
    audio/1.json        – full-surah recordings keyed by reciter
    audio/1/1.json      – recording of ayah 1:1 keyed by reciter
    ...

Usage (from config_default_settings.json)::

    {
        "connector": {
            "type": "local",
            "data_dir": "quran_data"
        }
    }

A relative ``data_dir`` is searched for in the working directory, the
repository root and the package directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .quranapi import QuranApiConnector
from ..errors import ContentLoadError
from ..utils.paths import find_data_path

logger = logging.getLogger(__name__)


class LocalJsonConnector(QuranApiConnector):
    """Read surah documents from a directory instead of over HTTP.

    :param data_dir: Directory holding the mirrored documents.
    :raises ContentLoadError: If *data_dir* cannot be located.
    """

    def __init__(self, data_dir: str | Path = "quran_data") -> None:
        try:
            self.data_dir = find_data_path(data_dir)
        except FileNotFoundError as exc:
            raise ContentLoadError(f"Local data directory not found: {data_dir}") from exc
        super().__init__(base_url=str(self.data_dir))
        logger.info("LocalJsonConnector reading from %s", self.data_dir)

    def _request(self, path: str) -> Dict[str, Any]:
        file_path = self.data_dir / path.lstrip("/")
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise ContentLoadError(f"Missing local document: {file_path}") from exc
        except (OSError, ValueError) as exc:
            raise ContentLoadError(f"Unreadable local document {file_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ContentLoadError(f"Unexpected content in {file_path}")
        return data
