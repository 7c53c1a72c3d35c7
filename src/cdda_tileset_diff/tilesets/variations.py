"""
Expansion of compact tile definitions into concrete tile variations.

A compact definition may alias several ids and carry multitile parts in
`additional_tiles`. Expansion produces one `ExpandedTile` per alias, plus
one per (alias, part alias) pair named `<alias>_<part>`. Sprite references
can optionally be rewritten from positional ids to content hashes so that
two tilesets with different sheet layouts become comparable.
"""

import logging
from pathlib import Path
from typing import Optional

from .atlas import AtlasSet, load_atlases, reset_sprites_dir
from .models import ExpandedTile, TileSource, Tileset, WeightedSprite

logger = logging.getLogger(__name__)


def hash_sprites(
    sprites: tuple[WeightedSprite, ...], atlases: AtlasSet
) -> tuple[WeightedSprite, ...]:
    """Replace every positional sprite id with its content hash.

    Order and weights are kept verbatim.
    """
    return tuple(
        sprite.with_ids([atlases.sprite_hash(sprite_id) for sprite_id in sprite.ids])
        for sprite in sprites
    )


def expand_tile(
    tile: TileSource, atlases: Optional[AtlasSet] = None
) -> list[ExpandedTile]:
    """Expand one compact definition into its concrete variations.

    Args:
        tile: Compact definition as authored
        atlases: If given, sprite ids are resolved to content hashes

    Returns:
        Unsorted variations; parts are emitted before their parent
    """
    def resolve(sprites: tuple[WeightedSprite, ...]) -> tuple[WeightedSprite, ...]:
        return hash_sprites(sprites, atlases) if atlases is not None else sprites

    fg = resolve(tile.fg)
    bg = resolve(tile.bg)
    # Multitiles rotate unless told otherwise
    rotates = tile.rotates if tile.rotates is not None else tile.multitile

    parts = [(part, resolve(part.fg), resolve(part.bg)) for part in tile.additional_tiles]

    result: list[ExpandedTile] = []
    for tile_id in tile.ids:
        parent = ExpandedTile(
            id=tile_id,
            fg=fg,
            bg=bg,
            rotates=rotates,
            multitile=tile.multitile,
            animated=tile.animated,
            height_3d=tile.height_3d,
        )

        for part, part_fg, part_bg in parts:
            for part_id in part.ids:
                # Parts always rotate and take their height from the parent
                result.append(
                    ExpandedTile(
                        id=f"{tile_id}_{part_id}",
                        fg=part_fg,
                        bg=part_bg,
                        rotates=True,
                        multitile=part.multitile,
                        animated=part.animated,
                        height_3d=parent.height_3d,
                    )
                )

        result.append(parent)

    return result


def generate_variations(
    tileset: Tileset, do_hash: bool, do_dump: bool = False
) -> tuple[list[ExpandedTile], AtlasSet]:
    """Expand every tile definition of a tileset.

    The `sprites/` directory of the tileset is wiped and recreated on each
    call; with `do_dump` every cropped sprite is written into it.

    Args:
        tileset: Loaded tileset
        do_hash: Resolve sprite ids to content hashes
        do_dump: Export all sprites as `<positional id>.png`

    Returns:
        Tuple of (variations sorted by `ExpandedTile.sort_key`, atlases)
    """
    sprites_path: Path = reset_sprites_dir(tileset)
    atlases = load_atlases(tileset, dump_dir=sprites_path if do_dump else None)

    variations: list[ExpandedTile] = []
    for sheet in tileset.tiles_new:
        for tile in sheet.tiles:
            variations.extend(expand_tile(tile, atlases if do_hash else None))

    variations.sort(key=ExpandedTile.sort_key)
    logger.debug(
        f"{tileset.base_path}: {len(variations)} variations from "
        f"{len(atlases)} sheets ({atlases.tiles_end} sprites), hashed={do_hash}"
    )
    return variations, atlases
