"""
Tilesets package for Cataclysm: DDA.

Provides loading of tile_config.json documents, sprite atlases with
content hashing, expansion of compact tile definitions, and the compare
and extract operations built on top of them.
"""

from .errors import TilesetError, TilesetLoadError, TilesetSchemaError, SpriteNotFoundError
from .models import (
    ExpandedTile, TileSource, WeightedSprite, SheetSource, TileInfo,
    AsciiEntry, OverlayOrder, Tileset, single_or_list, parse_sprite_list
)
from .atlas import AtlasSet, SpriteAtlas, UNRESOLVED_HASH, load_atlases
from .loader import load_tileset, load_ids_file
from .variations import generate_variations, expand_tile
from .compare import compare_tilesets, find_duplicates, ComparisonResult, SideReport
from .extract import extract_tiles

# Public classes intended for external use
__all__ = [
    # Errors
    'TilesetError',
    'TilesetLoadError',
    'TilesetSchemaError',
    'SpriteNotFoundError',

    # Data models
    'AsciiEntry',
    'ExpandedTile',
    'OverlayOrder',
    'SheetSource',
    'TileInfo',
    'TileSource',
    'Tileset',
    'WeightedSprite',
    'single_or_list',
    'parse_sprite_list',

    # Atlases
    'AtlasSet',
    'SpriteAtlas',
    'UNRESOLVED_HASH',
    'load_atlases',

    # Operations
    'load_tileset',
    'load_ids_file',
    'generate_variations',
    'expand_tile',
    'compare_tilesets',
    'find_duplicates',
    'ComparisonResult',
    'SideReport',
    'extract_tiles',
]
