"""
Settings package for cdda_tileset_diff.

This package provides type-safe configuration management using Qt's
QSettings for cross-platform storage.

Usage:
    from cdda_tileset_diff.settings import AppSettings

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigError, ValidationResult
from .logging import LoggingSettings
from .output import OutputSettings

__all__ = [
    "AppSettings",
    "ConfigError",
    "ValidationResult",
    "LoggingSettings",
    "OutputSettings",
]
