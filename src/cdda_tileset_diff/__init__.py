"""
cdda-tileset-diff: compare and extract Cataclysm: DDA tilesets

Reconciles two versions of a tileset by content-hashing every sprite, so
tiles compare equal even when the sheets were packed differently.
"""

__version__ = "0.1.0"
__author__ = "cdda-tileset-diff Contributors"

from .tilesets import (
    load_tileset, load_ids_file, generate_variations, compare_tilesets, extract_tiles,
    ExpandedTile, TileSource, WeightedSprite, Tileset, TilesetError
)
from .utils.logging_config import setup_logging

__all__ = [
    # Operations
    'load_tileset',
    'load_ids_file',
    'generate_variations',
    'compare_tilesets',
    'extract_tiles',

    # Logging
    'setup_logging',

    # Data models
    'ExpandedTile',
    'TileSource',
    'WeightedSprite',
    'Tileset',
    'TilesetError',
]
