"""Connector for retrieving surah text and recitations from quranapi.

This connector wraps the static JSON API published at
``https://quranapi.pages.dev/api``.  Three kinds of documents are used
for each surah:

* ``{n}.json`` – names, ``totalAyah`` and the Arabic (``arabic1``) and
  English (``english``) ayah arrays.
* ``audio/{n}.json`` – the full-surah recording of every reciter, keyed
  by reciter (``"1"`` … ``"5"``).  Used for learning mode.
* ``audio/{n}/{a}.json`` – the recording of a single ayah, keyed the same
  way.  Used for practice mode.

Reciter entries carry an ``originalUrl`` and sometimes only a ``url``;
the former is preferred.  If outbound HTTPS to the provider is not
permitted every call raises :class:`~tarteelflow.errors.ContentLoadError`.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

import requests

from .base import BaseConnector
from ..data.works import Unit, Work
from ..errors import ContentLoadError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://quranapi.pages.dev/api"
DEFAULT_MAX_WORKERS = 8


class QuranApiConnector(BaseConnector):
    """Fetch surahs and recitation locators from the quranapi service.

    :param base_url: The base URL of the API.
    :param timeout: Per-request timeout in seconds.
    :param session: Optional preconfigured :class:`requests.Session`.
    :param max_workers: Size of the thread pools that fetch surahs and,
        within each surah, its ayah documents.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.max_workers = max(1, int(max_workers))

    # ------------------------------------------------------------------ #
    # Low‑level request helper
    # ------------------------------------------------------------------ #
    def _request(self, path: str) -> Dict[str, Any]:
        """Send a GET request to the API and return the decoded JSON object.

        :raises ContentLoadError: On network errors, a non‑200 status or a
            body that is not a JSON object.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.get(
                url,
                headers={"User-Agent": "TarteelFlow/0.1"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ContentLoadError(f"Request failed: {url} ({exc})") from exc
        if resp.status_code != 200:
            raise ContentLoadError(
                f"Request failed: {url} (status {resp.status_code})"
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise ContentLoadError(f"Invalid JSON from {url}") from exc
        if not isinstance(data, dict):
            raise ContentLoadError(f"Unexpected response from {url}")
        return data

    # ------------------------------------------------------------------ #
    # Document parsing
    # ------------------------------------------------------------------ #
    @staticmethod
    def _recording_url(document: Dict[str, Any], narrator: str, what: str) -> str:
        """Pick the locator of *narrator* out of an audio document."""
        entry = document.get(narrator)
        if not isinstance(entry, dict):
            raise ContentLoadError(f"No recording of {what} for reciter {narrator}")
        url = entry.get("originalUrl") or entry.get("url")
        if not url:
            raise ContentLoadError(f"No recording of {what} for reciter {narrator}")
        return str(url)

    def _fetch_units(
        self,
        work_id: int,
        narrator: str,
        arabic: List[str],
        english: List[Optional[str]],
        total: int,
    ) -> List[Unit]:
        numbers = range(1, total + 1)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            documents = list(
                executor.map(lambda n: self._request(f"audio/{work_id}/{n}.json"), numbers)
            )
        return [
            Unit(
                number=number,
                text=str(arabic[number - 1]),
                translation=english[number - 1] if number <= len(english) else None,
                audio_url=self._recording_url(audio, narrator, f"ayah {work_id}:{number}"),
            )
            for number, audio in zip(numbers, documents)
        ]

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def get_work(self, work_id: int, narrator: str) -> Work:
        """Retrieve one surah with its full and per-ayah recordings.

        The ayah documents are fetched in parallel.

        :param work_id: Surah number (1–114).
        :param narrator: Reciter key, e.g. ``"4"``.
        :raises ContentLoadError: If any document is missing or malformed.
        """
        chapter = self._request(f"{work_id}.json")
        try:
            number = int(chapter.get("surahNo", work_id))
            total = int(chapter["totalAyah"])
            arabic = list(chapter["arabic1"])
            english = list(chapter.get("english") or [])
        except (KeyError, TypeError, ValueError) as exc:
            raise ContentLoadError(f"Malformed data for surah {work_id}: {exc}") from exc
        if len(arabic) < total:
            raise ContentLoadError(
                f"Malformed data for surah {work_id}: expected {total} ayat, got {len(arabic)}"
            )

        chapter_audio = self._request(f"audio/{work_id}.json")
        full_audio_url = self._recording_url(chapter_audio, narrator, f"surah {work_id}")
        units = self._fetch_units(work_id, narrator, arabic, english, total)

        logger.debug("Surah %s: %d ayat for reciter %s", work_id, total, narrator)
        return Work(
            number=number,
            name=str(chapter.get("surahName", "")),
            arabic_name=str(chapter.get("surahNameArabic", "")),
            translation=chapter.get("surahNameTranslation"),
            full_audio_url=full_audio_url,
            units=tuple(units),
        )

    def get_works(self, work_ids: Iterable[int], narrator: str) -> List[Work]:
        """Fetch several surahs in parallel, keeping the order of *work_ids*.

        The first failing surah (in *work_ids* order) is raised.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            works = list(executor.map(lambda n: self.get_work(n, narrator), work_ids))
        logger.info("Loaded %d surahs for reciter %s", len(works), narrator)
        return works
