"""Reciters served by the content provider.

The provider keys each recording by a small numeric string.  This module
maps those keys to display names.  The console front end only accepts
keys listed here; the connectors themselves take any key and an unknown
one only loses its pretty name.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Reciter:
    """A narrator whose recordings can be selected.

    Attributes:
        key: Opaque key used by the provider, e.g. ``"4"``.
        name: Human-readable name.
    """
    key: str
    name: str


DEFAULT_RECITER = "4"

BUILTIN_RECITERS: Dict[str, Reciter] = {
    "1": Reciter(key="1", name="Mishary Al-Afasy"),
    "2": Reciter(key="2", name="Abu Bakr Al Shatri"),
    "3": Reciter(key="3", name="Nasser Al Qatami"),
    "4": Reciter(key="4", name="Yasser Al-Dosari"),
    "5": Reciter(key="5", name="Hani Ar Rifai"),
}


def get_reciter(key: str) -> Reciter:
    """Return the Reciter for the given key or raise KeyError."""
    return BUILTIN_RECITERS[key]


def reciter_name(key: str) -> str:
    """Return the display name for *key*, falling back to the key itself."""
    reciter = BUILTIN_RECITERS.get(key)
    return reciter.name if reciter else f"Reciter {key}"
