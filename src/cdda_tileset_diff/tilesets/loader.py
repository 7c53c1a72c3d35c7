"""
Loaders for tileset directories and id list files.

Reading is strict: a missing directory, a missing tile_config.json or a
schema violation aborts the load. Decode errors from orjson propagate as-is.
"""

import logging
from pathlib import Path
from typing import Union

import orjson

from .errors import TilesetLoadError
from .models import Tileset

TILE_CONFIG_NAME = "tile_config.json"

logger = logging.getLogger(__name__)


def load_tileset(ts_path: Union[str, Path]) -> Tileset:
    """Load a tileset from the given directory path.

    Args:
        ts_path: Directory containing tile_config.json and the sheet images

    Returns:
        Parsed `Tileset` remembering its directory

    Raises:
        TilesetLoadError: If the directory or tile_config.json is missing
        TilesetSchemaError: If the config contains unknown or mistyped fields
        orjson.JSONDecodeError: If the config is not valid JSON
    """
    ts_dir = Path(ts_path)
    if not ts_dir.exists():
        raise TilesetLoadError(f"Tileset path not found: {ts_dir}")
    if not ts_dir.is_dir():
        raise TilesetLoadError(f"Tileset path is not a directory: {ts_dir}")

    config_path = ts_dir / TILE_CONFIG_NAME
    if not config_path.is_file():
        raise TilesetLoadError(f"{TILE_CONFIG_NAME} not found in {ts_dir}")

    with open(config_path, "rb") as f:
        data = orjson.loads(f.read())

    tileset = Tileset.from_dict(data, base_path=ts_dir)
    logger.debug(
        f"Loaded {config_path}: {len(tileset.tiles_new)} sheets, "
        f"{sum(len(sheet.tiles) for sheet in tileset.tiles_new)} tile definitions"
    )
    return tileset


def load_ids_file(ids_path: Union[str, Path]) -> list[str]:
    """Read a newline separated list of tile ids.

    Surrounding whitespace is stripped and blank lines are skipped.
    """
    path = Path(ids_path)
    if not path.is_file():
        raise TilesetLoadError(f"Ids file not found: {path}")

    with open(path, encoding="utf-8") as f:
        ids = [line.strip() for line in f if line.strip()]

    logger.debug(f"Loaded {len(ids)} ids from {path}")
    return ids
