"""Base interface for connectors.

Connectors encapsulate the logic for retrieving surah text and audio
locators from a content provider.  Subclasses must implement at least
:meth:`BaseConnector.get_work`, which returns one fully populated
:class:`~tarteelflow.data.works.Work` for a reciter.  :meth:`get_works`
loads a whole collection and by default simply calls ``get_work`` for
each identifier in order.

Every failure (network, HTTP status, malformed document) must surface as
:class:`~tarteelflow.errors.ContentLoadError` with a message that can be
shown to the user as is.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..data.works import Work

logger = logging.getLogger(__name__)


class BaseConnector:
    """Abstract base class for all connectors."""

    def get_work(self, work_id: int, narrator: str) -> Work:
        """Return the surah *work_id* with recordings of *narrator*.

        :raises ContentLoadError: If the provider cannot supply the surah.
        """
        raise NotImplementedError

    def get_works(self, work_ids: Iterable[int], narrator: str) -> List[Work]:
        """Return every surah in *work_ids*, preserving their order.

        The whole collection fails if a single surah fails; callers keep
        whatever they had loaded before.
        """
        works = [self.get_work(work_id, narrator) for work_id in work_ids]
        logger.info("Loaded %d surahs for reciter %s", len(works), narrator)
        return works
