"""
Extraction of selected tiles and their sprites out of a tileset.
"""

import logging
from pathlib import Path
from typing import Sequence

import orjson

from .models import Tileset
from .variations import generate_variations

logger = logging.getLogger(__name__)


def extract_tiles(
    tileset: Tileset, ids: Sequence[str], out_dir: Path, dump_sprites: bool = True
) -> list[str]:
    """Write requested tiles and their sprites into `out_dir`.

    For every found id, `<out_dir>/<id>/<id>.json` receives the hashed tile
    record. Sprites referenced by the tile are saved flat into `out_dir` as
    `<10 digit content hash>.png`. Unknown ids are reported and skipped.

    Args:
        tileset: Loaded tileset
        ids: Tile ids to extract
        out_dir: Extraction root
        dump_sprites: Export all sprites into `sprites/` while hashing

    Returns:
        Ids that were extracted, in request order

    Raises:
        SpriteNotFoundError: If a tile references a sprite outside every sheet
    """
    variations, atlases = generate_variations(tileset, do_hash=False, do_dump=False)
    hashed, _ = generate_variations(tileset, do_hash=True, do_dump=dump_sprites)

    # Hashing changes the order of equal ids, so look up each list by id
    index = {v.id: i for i, v in enumerate(variations)}
    hashed_index = {v.id: i for i, v in enumerate(hashed)}

    extracted: list[str] = []
    for tile_id in ids:
        idx = index.get(tile_id)
        if idx is None:
            logger.warning(f"Failed to find tile with id {tile_id}")
            continue

        tile_dir = out_dir / tile_id
        tile_dir.mkdir(parents=True, exist_ok=True)

        tile_hashed = hashed[hashed_index[tile_id]]
        (tile_dir / f"{tile_id}.json").write_bytes(
            orjson.dumps(tile_hashed.to_dict(), option=orjson.OPT_INDENT_2)
        )

        for sprite_id in variations[idx].sprite_ids():
            atlases.save_sprite_as_hash(sprite_id, out_dir)

        logger.debug(f"extracted {tile_id}")
        extracted.append(tile_id)

    return extracted
