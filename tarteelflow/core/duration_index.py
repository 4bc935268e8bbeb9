"""
Per-ayah timing index for karaoke highlighting
==============================================

In learning mode the whole surah plays from one recording, but the
provider only tells us how long each *individual* ayah recording is.
Laying those durations end to end gives a timing map of the full
recording: ayah ``i`` is assumed to be spoken up to the cumulative
boundary ``d[0] + ... + d[i]``.

:class:`DurationIndex` is the immutable result and answers the
time → ayah question as a pure function.  :class:`DurationIndexBuilder`
produces one by probing every ayah recording through a
:class:`~tarteelflow.audio.capability.DurationProbe`.

Example::

    index = DurationIndex([2.0, 3.0, 1.5])
    index.timings()        # [(0.0, 2.0), (2.0, 5.0), (5.0, 6.5)]
    index.unit_at(4.999)   # 1
    index.unit_at(9.0)     # 2 (clamped)
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left
from itertools import accumulate
from typing import Callable, Iterable, List, Sequence, Set, Tuple

from ..audio.capability import DurationProbe
from ..data.works import Unit

logger = logging.getLogger(__name__)


def _clean_duration(value: float) -> float:
    """Map anything that is not a finite positive number to ``0.0``."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(seconds) or seconds < 0:
        return 0.0
    return seconds


class DurationIndex:
    """Immutable list of per-ayah durations with cumulative lookup.

    :param durations: Duration of each ayah recording in seconds, in
        ayah order.  ``0.0`` marks an unresolved duration.
    """

    def __init__(self, durations: Iterable[float]) -> None:
        self._durations: Tuple[float, ...] = tuple(_clean_duration(d) for d in durations)
        self._boundaries: Tuple[float, ...] = tuple(accumulate(self._durations))

    def __len__(self) -> int:
        return len(self._durations)

    def __repr__(self) -> str:
        return f"DurationIndex({list(self._durations)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DurationIndex):
            return NotImplemented
        return self._durations == other._durations

    __hash__ = None  # type: ignore[assignment]

    @property
    def durations(self) -> Tuple[float, ...]:
        return self._durations

    @property
    def total_duration(self) -> float:
        return self._boundaries[-1] if self._boundaries else 0.0

    def cumulative_boundary(self, i: int) -> float:
        """Sum of the durations of ayat ``0..i`` inclusive.

        :raises IndexError: If *i* is not a valid position.
        """
        if not 0 <= i < len(self._boundaries):
            raise IndexError(f"unit position {i} out of range")
        return self._boundaries[i]

    def unit_at(self, t: float) -> int:
        """Return the position of the ayah being recited at time *t*.

        This is the smallest ``i`` with ``t <= cumulative_boundary(i)``.
        Times past the end clamp to the last ayah, negative times map to
        the first one.  An empty index answers ``0``.
        """
        if not self._boundaries:
            return 0
        return min(bisect_left(self._boundaries, t), len(self._boundaries) - 1)

    def timings(self) -> List[Tuple[float, float]]:
        """Return ``(start_sec, end_sec)`` for every ayah."""
        starts = (0.0,) + self._boundaries[:-1]
        return list(zip(starts, self._boundaries))


class IndexBuild:
    """Collects probe results for one index build.

    ``on_ready`` fires exactly once, after every position has settled.
    Repeated reports for a position are ignored.
    """

    def __init__(self, size: int, on_ready: Callable[[DurationIndex], None]) -> None:
        self._durations: List[float] = [0.0] * size
        self._settled: Set[int] = set()
        self._on_ready = on_ready
        self._done = False
        if size == 0:
            self._finish()

    @property
    def is_complete(self) -> bool:
        return self._done

    def settle(self, position: int, seconds: float) -> None:
        if self._done or position in self._settled:
            return
        self._settled.add(position)
        self._durations[position] = _clean_duration(seconds)
        if len(self._settled) == len(self._durations):
            self._finish()

    def _finish(self) -> None:
        self._done = True
        self._on_ready(DurationIndex(self._durations))


class DurationIndexBuilder:
    """Builds a :class:`DurationIndex` by probing each ayah recording.

    Every ayah is probed independently.  A probe that fails, or that
    raises while being started, contributes ``0.0`` and never aborts
    the build.

    :param probe: Backend used to measure single recordings.
    """

    def __init__(self, probe: DurationProbe) -> None:
        self.probe = probe

    def build(
        self,
        units: Sequence[Unit],
        on_ready: Callable[[DurationIndex], None],
    ) -> IndexBuild:
        """Start probing *units*; ``on_ready`` receives the finished index."""
        build = IndexBuild(len(units), on_ready)
        for position, unit in enumerate(units):

            def report(seconds: float, position: int = position) -> None:
                build.settle(position, seconds)

            try:
                self.probe.probe(unit.audio_url, report)
            except Exception as exc:
                logger.warning("Duration probe for ayah %s failed to start: %s", unit.number, exc)
                build.settle(position, 0.0)
        return build


__all__ = ["DurationIndex", "DurationIndexBuilder", "IndexBuild"]
