"""Surah selection state."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..data.works import Work


class NavigationModel:
    """Ordered surahs plus the currently selected one.

    Movement past either end is silently absorbed.  Every movement
    returns ``True`` only if the selection actually changed.
    """

    def __init__(self, works: Sequence[Work] = ()) -> None:
        self._works: List[Work] = list(works)
        self._selected = 0

    @property
    def works(self) -> List[Work]:
        return list(self._works)

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def has_previous(self) -> bool:
        return self._selected > 0

    @property
    def has_next(self) -> bool:
        return self._selected < len(self._works) - 1

    def __len__(self) -> int:
        return len(self._works)

    def active_work(self) -> Optional[Work]:
        if not self._works:
            return None
        return self._works[self._selected]

    def unit_count(self) -> int:
        work = self.active_work()
        return work.unit_count if work else 0

    def select_work(self, index: int) -> bool:
        if not self._works:
            return False
        clamped = max(0, min(index, len(self._works) - 1))
        if clamped == self._selected:
            return False
        self._selected = clamped
        return True

    def next_work(self) -> bool:
        if not self.has_next:
            return False
        self._selected += 1
        return True

    def previous_work(self) -> bool:
        if not self.has_previous:
            return False
        self._selected -= 1
        return True
