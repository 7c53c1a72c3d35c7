"""
Exceptions raised by the tileset subsystem.
"""


class TilesetError(Exception):
    """Base class for all tileset related failures."""
    pass


class TilesetLoadError(TilesetError):
    """Raised when a tileset directory or its config file cannot be found."""
    pass


class TilesetSchemaError(TilesetError, ValueError):
    """Raised when tile_config.json does not match the expected schema.

    `location` points at the offending value, e.g. ``tiles-new[0].tiles[3].fg``.
    """

    def __init__(self, location: str, message: str):
        super().__init__(f"{location}: {message}")
        self.location = location
        self.message = message


class SpriteNotFoundError(TilesetError, LookupError):
    """Raised when a sprite id is not covered by any atlas of a tileset."""

    def __init__(self, sprite_id: int):
        super().__init__(f"Failed to save sprite with id {sprite_id}: sprite not found.")
        self.sprite_id = sprite_id
