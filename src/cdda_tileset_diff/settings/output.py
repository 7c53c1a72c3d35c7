"""
Output-related settings for cdda_tileset_diff.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class OutputSettings:
    """Manages where and how generated artifacts are written."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    @property
    def dump_sprites(self) -> bool:
        """Whether every sprite is exported into `<tileset>/sprites`."""
        value = self.settings.value("output/dump_sprites", True)
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else True

    @dump_sprites.setter
    def dump_sprites(self, value: bool) -> None:
        self.settings.setValue("output/dump_sprites", value)
        self.settings.sync()

    @property
    def extract_dir_name(self) -> str:
        """Directory inside the tileset receiving extracted tiles."""
        value = self.settings.value("output/extract_dir_name", "extracted")
        return str(value) if value else "extracted"

    @extract_dir_name.setter
    def extract_dir_name(self, value: str) -> None:
        if value and "/" not in value and "\\" not in value:
            self.settings.setValue("output/extract_dir_name", value)
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid extract dir name: {value!r}, keeping current: {self.extract_dir_name}"
            )
