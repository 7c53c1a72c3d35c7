"""
Sprite atlases: sliced sheet images with a global sprite numbering.

Every sheet of a tileset owns a contiguous range of global sprite ids,
assigned in declaration order starting at 0. Sprites are addressed
row-major inside their sheet and can be content-hashed so that identical
pixels compare equal regardless of where they were packed.
"""

import hashlib
import logging
import shutil
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from PIL import Image

from .errors import SpriteNotFoundError
from .models import Tileset

# Returned for sprite ids that no atlas can resolve
UNRESOLVED_HASH = 0

SPRITES_DIR_NAME = "sprites"

logger = logging.getLogger(__name__)


@dataclass
class SpriteAtlas:
    """One decoded sheet image cut into a grid of equally sized sprites.

    The image is converted to RGBA on construction (see `__post_init__`).
    Pixels to the right of / below the last full cell are unreachable.
    """
    file: str
    image: Image.Image
    sprite_width: int
    sprite_height: int
    tiles_start: int = 0
    tiles_x: int = field(init=False, default=0)
    tiles_y: int = field(init=False, default=0)
    tiles_end: int = field(init=False, default=0)

    def __post_init__(self):
        self.image = self.image.convert("RGBA")
        img_width, img_height = self.image.size

        if img_width % self.sprite_width != 0 or img_height % self.sprite_height != 0:
            logger.warning(
                f"image '{self.file}' cannot be properly divided into sprites "
                f"of size {self.sprite_width}x{self.sprite_height}"
            )

        self.tiles_x = img_width // self.sprite_width
        self.tiles_y = img_height // self.sprite_height
        self.tiles_end = self.tiles_start + self.tiles_total

    @property
    def tiles_total(self) -> int:
        return self.tiles_x * self.tiles_y

    def in_bounds(self, sprite_id: int) -> bool:
        """Check whether a global sprite id belongs to this atlas."""
        return self.tiles_start <= sprite_id < self.tiles_end

    def get_sprite(self, sprite_id: int) -> Image.Image:
        """Crop the sprite with the given global id.

        The caller must check `in_bounds` first.
        """
        local_id = sprite_id - self.tiles_start
        left = (local_id % self.tiles_x) * self.sprite_width
        top = (local_id // self.tiles_x) * self.sprite_height
        return self.image.crop((left, top, left + self.sprite_width, top + self.sprite_height))

    def sprite_hash(self, sprite_id: int) -> int:
        """Return a 32-bit hash of the sprite size and its RGBA pixels.

        The value does not depend on the sprite position, only on its
        content. Out of range ids yield UNRESOLVED_HASH with a warning.
        """
        if not self.in_bounds(sprite_id):
            logger.warning(
                f"sprite {sprite_id} outside active atlas range "
                f"{self.tiles_start}..{self.tiles_end}"
            )
            return UNRESOLVED_HASH

        hasher = hashlib.blake2b(digest_size=4)
        hasher.update(struct.pack("<II", self.sprite_width, self.sprite_height))
        hasher.update(self.get_sprite(sprite_id).tobytes())
        return int.from_bytes(hasher.digest(), "big")

    def dump_sprites_to_dir(self, out_dir: Path) -> None:
        """Save every sprite of this atlas as `<global id>.png`."""
        for sprite_id in range(self.tiles_start, self.tiles_end):
            self.get_sprite(sprite_id).save(out_dir / f"{sprite_id}.png", format="PNG")


class AtlasSet:
    """Ordered atlases of one tileset covering disjoint id ranges."""

    def __init__(self, atlases: Optional[list[SpriteAtlas]] = None):
        self.atlases: list[SpriteAtlas] = list(atlases or [])

    def __iter__(self) -> Iterator[SpriteAtlas]:
        return iter(self.atlases)

    def __len__(self) -> int:
        return len(self.atlases)

    @property
    def tiles_end(self) -> int:
        """First global id not covered by any atlas."""
        return self.atlases[-1].tiles_end if self.atlases else 0

    def find(self, sprite_id: int) -> Optional[SpriteAtlas]:
        """Return the first atlas whose range contains `sprite_id`."""
        for atlas in self.atlases:
            if atlas.in_bounds(sprite_id):
                return atlas
        return None

    def sprite_hash(self, sprite_id: int) -> int:
        """Hash a sprite by global id, UNRESOLVED_HASH if no atlas owns it."""
        atlas = self.find(sprite_id)
        if atlas is None:
            logger.warning(f"sprite {sprite_id} outside all atlas ranges")
            return UNRESOLVED_HASH
        return atlas.sprite_hash(sprite_id)

    def save_sprite_as_hash(self, sprite_id: int, out_dir: Path) -> Path:
        """Save a sprite as `<10 digit content hash>.png` into `out_dir`.

        Raises:
            SpriteNotFoundError: If no atlas owns `sprite_id`
        """
        atlas = self.find(sprite_id)
        if atlas is None:
            raise SpriteNotFoundError(sprite_id)

        path = out_dir / f"{atlas.sprite_hash(sprite_id):010d}.png"
        atlas.get_sprite(sprite_id).save(path, format="PNG")
        return path


def reset_sprites_dir(tileset: Tileset) -> Path:
    """Remove and recreate `<tileset>/sprites`, returning its path."""
    sprites_path = tileset.base_path / SPRITES_DIR_NAME
    shutil.rmtree(sprites_path, ignore_errors=True)
    sprites_path.mkdir()
    return sprites_path


def load_atlases(tileset: Tileset, dump_dir: Optional[Path] = None) -> AtlasSet:
    """Decode every sheet image of a tileset and assign global id ranges.

    Args:
        tileset: Loaded tileset
        dump_dir: If given, every cropped sprite is written there as `<id>.png`

    Returns:
        AtlasSet in sheet declaration order
    """
    atlases = AtlasSet()
    tiles_start = 0
    default_info = tileset.default_tile_info

    for sheet in tileset.tiles_new:
        sprite_w, sprite_h = sheet.sprite_size(default_info)
        with Image.open(tileset.base_path / sheet.file) as img:
            atlas = SpriteAtlas(
                file=sheet.file,
                image=img,
                sprite_width=sprite_w,
                sprite_height=sprite_h,
                tiles_start=tiles_start,
            )
        logger.debug(
            f"sheet {sheet.file}: {atlas.tiles_x}x{atlas.tiles_y} sprites of "
            f"{sprite_w}x{sprite_h}, ids {atlas.tiles_start}..{atlas.tiles_end}"
        )
        if dump_dir is not None:
            atlas.dump_sprites_to_dir(dump_dir)

        tiles_start = atlas.tiles_end
        atlases.atlases.append(atlas)

    return atlases
