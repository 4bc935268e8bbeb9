"""Small helpers shared by the connectors and audio adapters."""

from .paths import find_data_path  # noqa: F401

__all__ = ["find_data_path"]
