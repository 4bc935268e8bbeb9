"""Utility functions for locating data directories.

Rather than hard‑coding relative paths, the helpers here search a few
standard locations: the current working directory of the process, the
repository root and the package directory.  This keeps a local mirror
of the provider's JSON documents usable no matter how the application
was launched (``python -m tarteelflow`` from the repo, an installed
console script, or a test run).
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


def _candidate_locations(name: str) -> Iterable[Path]:
    """Yield candidate locations for a data file or directory.

    The order of locations is:
    1. Current working directory.
    2. Repository root (two levels above this file).
    3. Package directory (one level above this file).
    """
    here = Path(__file__).resolve()
    yield Path.cwd() / name
    yield here.parents[2] / name
    yield here.parents[1] / name


def find_data_path(name: str | Path) -> Path:
    """Locate a data file or directory by searching standard locations.

    Absolute paths are returned unchanged when they exist.  Raises
    ``FileNotFoundError`` if nothing is found.
    """
    path = Path(name)
    if path.is_absolute():
        if path.exists():
            return path
        raise FileNotFoundError(f"Could not find data path '{path}'")
    for candidate in _candidate_locations(str(path)):
        if candidate.exists():
            return candidate
    raise FileNotFoundError(f"Could not find data path '{name}'. Tried: "
                            f"{', '.join(str(p) for p in _candidate_locations(str(path)))}")
