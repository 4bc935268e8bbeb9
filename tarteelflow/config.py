"""
Configuration management for TarteelFlow.

Defaults ship with the package in ``config_default_settings.json``.  On
top of them any number of JSON override files can be layered; later
files win, and nested sections are merged key by key rather than
replaced.  The console front end layers the file named by the
``TARTEELFLOW_CONFIG`` environment variable and then the one given with
``--config``.

Sections read by the application:

* ``connector`` – which content provider to use and how to reach it.
* ``content``   – default reciter and the list of surahs to load.
* ``playback``  – initial mode and the length of a simulated user turn.
* ``audio``     – duration probe backend, volume and debug logging.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE: Path = Path(__file__).resolve().parent / "config_default_settings.json"

CONFIG_ENV_VAR = "TARTEELFLOW_CONFIG"


def _layered(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Return *base* with *overrides* applied; dict values merge recursively."""
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            result[key] = _layered(base[key], value)
        else:
            result[key] = value
    return result


def _read_json_object(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a JSON object")
    return data


@dataclass(frozen=True)
class AppConfig:
    """Read-only view of the merged configuration."""

    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, *keys: str, default: Optional[Any] = None) -> Any:
        """Look up a nested value, e.g. ``get("audio", "volume", default=1.0)``."""
        current: Any = self.data
        for key in keys:
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    def section(self, name: str) -> Dict[str, Any]:
        """Return a copy of a top-level section, or an empty dict."""
        value = self.data.get(name)
        return dict(value) if isinstance(value, dict) else {}

    def layered(self, overrides: Dict[str, Any]) -> "AppConfig":
        """Return a new config with *overrides* applied on top of this one."""
        return AppConfig(_layered(self.data, overrides))


def load_config(
    *override_paths: Optional[os.PathLike],
    defaults: os.PathLike = DEFAULT_CONFIG_FILE,
) -> AppConfig:
    """Load the bundled defaults and layer *override_paths* on top, in order.

    ``None`` entries are skipped.  A path that does not exist is logged
    and skipped.

    :raises ValueError: If a file is not valid JSON or not a JSON object.
    """
    config = AppConfig(_read_json_object(Path(defaults)))
    for entry in override_paths:
        if not entry:
            continue
        path = Path(entry)
        if not path.is_file():
            logger.warning("Configuration file %s not found, ignoring it", path)
            continue
        logger.debug("Applying configuration overrides from %s", path)
        config = config.layered(_read_json_object(path))
    return config


def get_app_config(path: Optional[os.PathLike] = None) -> AppConfig:
    """Return the application configuration.

    Layers the file named by ``TARTEELFLOW_CONFIG`` (if set) and then
    *path* (if given) over the defaults.
    """
    return load_config(os.environ.get(CONFIG_ENV_VAR), path)
