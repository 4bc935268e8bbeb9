"""Static data and value objects for TarteelFlow."""

from .reciters import BUILTIN_RECITERS, DEFAULT_RECITER, Reciter, get_reciter, reciter_name  # noqa: F401
from .works import DEFAULT_WORK_IDS, Unit, Work  # noqa: F401

__all__ = [
    "BUILTIN_RECITERS",
    "DEFAULT_RECITER",
    "DEFAULT_WORK_IDS",
    "Reciter",
    "Unit",
    "Work",
    "get_reciter",
    "reciter_name",
]
