"""Connector registry for TarteelFlow.

Connectors are pluggable content sources.  The ``get_default_connector``
factory reads the ``connector`` section of the application config and
returns an appropriate :class:`BaseConnector` instance.

Currently supported connector types:
    * ``"quranapi"`` – calls the quranapi.pages.dev static API (requires internet)
    * ``"local"``    – reads a local mirror of the same JSON documents

Configuration example (config_default_settings.json)::

    {
        "connector": {
            "type": "quranapi",
            "base_url": "https://quranapi.pages.dev/api",
            "timeout": 30
        }
    }
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from .base import BaseConnector
from .local_json import LocalJsonConnector
from .quranapi import DEFAULT_BASE_URL, DEFAULT_MAX_WORKERS, QuranApiConnector

logger = logging.getLogger(__name__)

__all__ = [
    "BaseConnector",
    "QuranApiConnector",
    "LocalJsonConnector",
    "get_default_connector",
]


def get_default_connector(config: Dict[str, Any] | None = None) -> BaseConnector:
    """Return a connector instance based on *config*.

    :param config: The ``connector`` section of the application config.
        Recognised keys:
        * ``type`` – "quranapi" or "local" (default: "quranapi")
        * ``base_url``, ``timeout``, ``max_workers`` – for the remote connector
        * ``data_dir`` – for the local connector
    :return: A ready-to-use :class:`BaseConnector`.
    """
    if config is None:
        config = {}

    connector_type = str(config.get("type", "quranapi")).lower()

    if connector_type == "local":
        data_dir = config.get("data_dir", "quran_data")
        logger.info("Using LocalJsonConnector with data_dir=%s", data_dir)
        return LocalJsonConnector(data_dir=data_dir)

    base_url = config.get("base_url", DEFAULT_BASE_URL)
    timeout = float(config.get("timeout", 30))
    max_workers = int(config.get("max_workers", DEFAULT_MAX_WORKERS))
    if connector_type != "quranapi":
        logger.warning(
            "Unknown connector type %r, falling back to QuranApiConnector",
            connector_type,
        )
    else:
        logger.info("Using QuranApiConnector with base_url=%s", base_url)
    return QuranApiConnector(base_url=base_url, timeout=timeout, max_workers=max_workers)
