"""
Core settings management for cdda_tileset_diff.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from .types import ConfigError, ValidationResult
from .logging import LoggingSettings, VALID_LEVELS
from .output import OutputSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "cdda_tileset_diff"
APPLICATION = "cdda_tileset_diff"


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to persistent settings. By default the native
    per-user store is used; pass `settings_file` to keep them in an INI file.
    """

    def __init__(
        self,
        profile: str = "default",
        settings_file: Optional[Union[str, Path]] = None,
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: Optional INI file path instead of the native store
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(ORGANIZATION, APPLICATION)
        if self.settings.status() != QSettings.Status.NoError:
            raise ConfigError(f"Cannot read settings from {self.settings.fileName()}")
        self.profile = profile

        # Use profile as a group: <profile>/logging/..., <profile>/output/...
        self.settings.beginGroup(profile)

        self._logging = LoggingSettings(self.settings)
        self._output = OutputSettings(self.settings)

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_log_level(self) -> str:
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        return self._logging.log_file_path

    # === OUTPUT SETTINGS (DELEGATED) ===

    @property
    def dump_sprites(self) -> bool:
        return self._output.dump_sprites

    @dump_sprites.setter
    def dump_sprites(self, value: bool) -> None:
        self._output.dump_sprites = value

    @property
    def extract_dir_name(self) -> str:
        return self._output.extract_dir_name

    @extract_dir_name.setter
    def extract_dir_name(self, value: str) -> None:
        self._output.extract_dir_name = value

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        if self.console_log_level.upper() not in VALID_LEVELS:
            errors.append(f"Unknown console log level: {self.console_log_level}")

        if self.file_logging:
            log_dir = self._logging.log_file_absolute_path.parent
            if log_dir.exists() and not log_dir.is_dir():
                errors.append(f"Log directory is not a directory: {log_dir}")

        if not self.dump_sprites:
            warnings.append("Sprite export is disabled, sprites/ will stay empty")

        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def get_settings_file_path(self) -> str:
        """Get path of the underlying settings storage."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Flush pending changes to storage."""
        self.settings.sync()
