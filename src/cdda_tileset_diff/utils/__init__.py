"""Utility helpers for cdda_tileset_diff."""

from .logging_config import setup_logging

__all__ = ["setup_logging"]
