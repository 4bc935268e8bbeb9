"""Surah and ayah structures.

A :class:`Work` is one surah as served for a particular reciter.  It
carries the full-surah recording used in learning mode and an ordered
tuple of :class:`Unit` objects (the ayat), each with its own recording
for practice mode.  Both are frozen: a new reciter selection produces new
objects rather than mutating the old ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

# Surah Al-Fatihah followed by Ad-Duhaa (93) through An-Naas (114).
DEFAULT_WORK_IDS: Tuple[int, ...] = (1, *range(93, 115))


@dataclass(frozen=True)
class Unit:
    """A single ayah.

    ``number``
        1-based position inside the surah.

    ``text``
        Arabic text of the ayah.

    ``translation``
        English translation, if the provider supplied one.

    ``audio_url``
        Locator of the ayah-only recording.
    """

    number: int
    text: str
    audio_url: str
    translation: Optional[str] = None


@dataclass(frozen=True)
class Work:
    """A surah with its ayat and the full recording for one reciter."""

    number: int
    name: str
    arabic_name: str
    full_audio_url: str
    units: Tuple[Unit, ...] = field(default_factory=tuple)
    translation: Optional[str] = None

    @property
    def unit_count(self) -> int:
        return len(self.units)

    @property
    def title(self) -> str:
        """Short display title, e.g. ``"Surah 1: Al-Faatiha"``."""
        return f"Surah {self.number}: {self.name}"


__all__ = ["Unit", "Work", "DEFAULT_WORK_IDS"]
