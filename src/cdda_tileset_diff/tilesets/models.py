"""
Data models for CDDA tile_config.json documents.

Contains the strict parsers for the authored (compact) tile format and the
canonical `ExpandedTile` record produced by the variation expander.
Each model is intentionally lightweight: no file-system or image logic.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Sequence, TypeVar, cast

from .errors import TilesetSchemaError

T = TypeVar("T")

TILE_KEYS = frozenset(
    {"id", "fg", "bg", "rotates", "multitile", "animated", "height_3d", "//"}
)
COMPOSITE_TILE_KEYS = TILE_KEYS | {"additional_tiles"}
SHEET_KEYS = frozenset(
    {
        "file",
        "sprite_width",
        "sprite_height",
        "sprite_offset_x",
        "sprite_offset_y",
        "tiles",
        "ascii",
        "//",
    }
)
TILE_INFO_KEYS = frozenset({"width", "height", "pixelscale", "iso"})
ASCII_KEYS = frozenset({"offset", "bold", "color"})
OVERLAY_KEYS = frozenset({"id", "order"})
TILESET_KEYS = frozenset({"tile_info", "tiles-new", "overlay_ordering"})
WEIGHTED_KEYS = frozenset({"weight", "sprite"})

_MISSING: Any = object()


# =============================================================================
# Strict JSON helpers
# =============================================================================

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _expect_dict(value: Any, location: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TilesetSchemaError(location, f"expected an object, got {type(value).__name__}")
    return cast(dict[str, Any], value)


def _expect_list(value: Any, location: str) -> list[Any]:
    if not isinstance(value, list):
        raise TilesetSchemaError(location, f"expected a list, got {type(value).__name__}")
    return cast(list[Any], value)


def _check_keys(data: dict[str, Any], allowed: frozenset[str], location: str) -> None:
    """Reject any key not in `allowed` (typos in hand-written configs)."""
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise TilesetSchemaError(location, f"unknown field(s): {', '.join(unknown)}")


def _get_int(
    data: dict[str, Any], key: str, location: str, default: Any = _MISSING
) -> Any:
    if key not in data:
        if default is _MISSING:
            raise TilesetSchemaError(location, f"missing field '{key}'")
        return default
    value = data[key]
    if value is None and default is None:
        return None
    if not _is_int(value):
        raise TilesetSchemaError(f"{location}.{key}", f"expected an integer, got {value!r}")
    return value


def _get_positive_int(
    data: dict[str, Any], key: str, location: str, default: Any = _MISSING
) -> Any:
    value = _get_int(data, key, location, default)
    if value is not None and value <= 0:
        raise TilesetSchemaError(f"{location}.{key}", f"expected a positive integer, got {value}")
    return value


def _get_bool(data: dict[str, Any], key: str, location: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TilesetSchemaError(f"{location}.{key}", f"expected a boolean, got {value!r}")
    return value


def _get_str(
    data: dict[str, Any], key: str, location: str, default: Any = _MISSING
) -> Any:
    if key not in data:
        if default is _MISSING:
            raise TilesetSchemaError(location, f"missing field '{key}'")
        return default
    value = data[key]
    if not isinstance(value, str):
        raise TilesetSchemaError(f"{location}.{key}", f"expected a string, got {value!r}")
    return value


def _parse_str(value: Any, location: str) -> str:
    if not isinstance(value, str):
        raise TilesetSchemaError(location, f"expected a string, got {value!r}")
    return value


def _parse_int(value: Any, location: str) -> int:
    if not _is_int(value):
        raise TilesetSchemaError(location, f"expected an integer, got {value!r}")
    return cast(int, value)


def single_or_list(
    value: Any, parse_item: Callable[[Any, str], T], location: str
) -> tuple[T, ...]:
    """Normalize a JSON value that is either a bare item or a list of items.

    A bare value becomes a one-element tuple; list order is preserved.
    """
    if isinstance(value, list):
        items = cast(list[Any], value)
        return tuple(parse_item(item, f"{location}[{i}]") for i, item in enumerate(items))
    return (parse_item(value, location),)


# =============================================================================
# Sprite references
# =============================================================================

@dataclass(frozen=True)
class WeightedSprite:
    """One visual layer alternative: sprite ids plus an optional weight.

    Before hashing `ids` are positional indices into the tileset-wide
    numbering; after hashing they are content hashes of the sprite pixels.
    """
    ids: tuple[int, ...]
    weight: Optional[int] = None

    @classmethod
    def from_json_value(cls, value: Any, location: str) -> "WeightedSprite":
        """Create WeightedSprite from a bare id, a list of ids or a weighted object.

        Args:
            value: Raw JSON value
            location: Path of the value inside the document, for errors

        Returns:
            WeightedSprite instance (weight is None for the bare forms)
        """
        if isinstance(value, dict):
            data = cast(dict[str, Any], value)
            _check_keys(data, WEIGHTED_KEYS, location)
            weight = _get_int(data, "weight", location)
            if "sprite" not in data:
                raise TilesetSchemaError(location, "missing field 'sprite'")
            ids = single_or_list(data["sprite"], _parse_int, f"{location}.sprite")
            return cls(ids=ids, weight=weight)
        return cls(ids=single_or_list(value, _parse_int, location))

    def to_json_value(self, bare: bool = True) -> Any:
        """Convert back to the authored CDDA representation.

        With `bare` a single id is written as a plain int. Must be False when
        the layer holds several references, otherwise `[5], [6]` reloads as `[5, 6]`.
        """
        sprite: Any = self.ids[0] if bare and len(self.ids) == 1 else list(self.ids)
        if self.weight is None:
            return sprite
        return {"weight": self.weight, "sprite": sprite}

    def with_ids(self, ids: Sequence[int]) -> "WeightedSprite":
        """Return a copy referencing other sprite ids, weight unchanged."""
        return replace(self, ids=tuple(ids))

    def sort_key(self) -> tuple[Any, ...]:
        # Absent weight sorts before any explicit weight
        return (self.ids, self.weight is not None, self.weight or 0)


def parse_sprite_list(value: Any, location: str) -> tuple[WeightedSprite, ...]:
    """Parse an fg/bg field into a tuple of weighted sprite references.

    Handles the shapes allowed by CDDA:
    - int: single sprite
    - list[int]: one reference with several ids (rotations / animation frames)
    - dict: single weighted reference
    - list of the above: several weighted alternatives
    - []: no sprites at all
    """
    if isinstance(value, list):
        items = cast(list[Any], value)
        if not items:
            return ()
        if all(_is_int(item) for item in items):
            return (WeightedSprite(ids=tuple(items)),)
    return single_or_list(value, WeightedSprite.from_json_value, location)


def _sprite_list_key(sprites: tuple[WeightedSprite, ...]) -> tuple[Any, ...]:
    return tuple(s.sort_key() for s in sprites)


def _sprite_list_to_json(sprites: tuple[WeightedSprite, ...]) -> list[Any]:
    bare = len(sprites) == 1
    return [s.to_json_value(bare) for s in sprites]


# =============================================================================
# Tile Models
# =============================================================================

@dataclass(frozen=True)
class TileSource:
    """Compact tile definition exactly as authored in tiles-new.

    `ids` are aliases of one visual tile. `additional_tiles` are the parts
    of a multitile construction (corner, edge, ...); they never nest.
    """
    ids: tuple[str, ...]
    fg: tuple[WeightedSprite, ...] = ()
    bg: tuple[WeightedSprite, ...] = ()
    rotates: Optional[bool] = None
    multitile: bool = False
    animated: bool = False
    height_3d: int = 0
    additional_tiles: tuple["TileSource", ...] = ()
    comment: str = ""

    @classmethod
    def from_dict(
        cls, value: Any, location: str, allow_additional: bool = True
    ) -> "TileSource":
        """Create TileSource from a JSON tile entry.

        Args:
            value: Raw JSON dict
            location: Path of the entry inside the document, for errors
            allow_additional: Whether `additional_tiles` may appear here

        Returns:
            TileSource with properly typed fields
        """
        data = _expect_dict(value, location)
        _check_keys(data, COMPOSITE_TILE_KEYS if allow_additional else TILE_KEYS, location)

        if "id" not in data:
            raise TilesetSchemaError(location, "missing field 'id'")
        ids = single_or_list(data["id"], _parse_str, f"{location}.id")

        rotates = data.get("rotates")
        if rotates is not None and not isinstance(rotates, bool):
            raise TilesetSchemaError(f"{location}.rotates", f"expected a boolean, got {rotates!r}")

        additional: tuple[TileSource, ...] = ()
        if "additional_tiles" in data:
            raw = _expect_list(data["additional_tiles"], f"{location}.additional_tiles")
            additional = tuple(
                cls.from_dict(item, f"{location}.additional_tiles[{i}]", allow_additional=False)
                for i, item in enumerate(raw)
            )

        return cls(
            ids=ids,
            fg=parse_sprite_list(data["fg"], f"{location}.fg") if "fg" in data else (),
            bg=parse_sprite_list(data["bg"], f"{location}.bg") if "bg" in data else (),
            rotates=rotates,
            multitile=_get_bool(data, "multitile", location, False),
            animated=_get_bool(data, "animated", location, False),
            height_3d=_get_int(data, "height_3d", location, 0),
            additional_tiles=additional,
            comment=_get_str(data, "//", location, ""),
        )


@dataclass(frozen=True)
class ExpandedTile:
    """One concrete tile: a single id with fully resolved attributes.

    This is the unit of comparison. Equality and hashing cover every field;
    `sort_key` gives a total order with the id first.
    """
    id: str
    fg: tuple[WeightedSprite, ...]
    bg: tuple[WeightedSprite, ...]
    rotates: bool
    multitile: bool
    animated: bool
    height_3d: int

    def sort_key(self) -> tuple[Any, ...]:
        return (
            self.id,
            _sprite_list_key(self.fg),
            _sprite_list_key(self.bg),
            self.rotates,
            self.multitile,
            self.animated,
            self.height_3d,
        )

    def sprite_ids(self) -> Iterator[int]:
        """Yield every sprite id referenced by fg, then bg."""
        for layer in (self.fg, self.bg):
            for sprite in layer:
                yield from sprite.ids

    def to_dict(self) -> dict[str, Any]:
        """Convert to a CDDA tile entry (loadable by TileSource.from_dict)."""
        return {
            "id": self.id,
            "fg": _sprite_list_to_json(self.fg),
            "bg": _sprite_list_to_json(self.bg),
            "rotates": self.rotates,
            "multitile": self.multitile,
            "animated": self.animated,
            "height_3d": self.height_3d,
        }


# =============================================================================
# Sheet Models
# =============================================================================

@dataclass(frozen=True)
class AsciiEntry:
    """ASCII fallback description attached to a sheet."""
    offset: int
    bold: bool
    color: str

    @classmethod
    def from_dict(cls, value: Any, location: str) -> "AsciiEntry":
        data = _expect_dict(value, location)
        _check_keys(data, ASCII_KEYS, location)
        if "bold" not in data:
            raise TilesetSchemaError(location, "missing field 'bold'")
        return cls(
            offset=_get_int(data, "offset", location),
            bold=_get_bool(data, "bold", location, False),
            color=_get_str(data, "color", location),
        )


@dataclass(frozen=True)
class SheetSource:
    """One `tiles-new` block: a packed image and the tiles drawn from it.

    Sprite offsets are kept for completeness only; they shift the sprite on
    screen and play no part in slicing the image.
    """
    file: str
    tiles: tuple[TileSource, ...]
    sprite_width: Optional[int] = None
    sprite_height: Optional[int] = None
    sprite_offset_x: Optional[int] = None
    sprite_offset_y: Optional[int] = None
    ascii: tuple[AsciiEntry, ...] = ()
    comment: str = ""

    @classmethod
    def from_dict(cls, value: Any, location: str) -> "SheetSource":
        """Create SheetSource from a `tiles-new` entry.

        Args:
            value: Raw JSON dict
            location: Path of the entry inside the document, for errors

        Returns:
            SheetSource with parsed tile definitions
        """
        data = _expect_dict(value, location)
        _check_keys(data, SHEET_KEYS, location)

        if "tiles" not in data:
            raise TilesetSchemaError(location, "missing field 'tiles'")
        raw_tiles = _expect_list(data["tiles"], f"{location}.tiles")
        raw_ascii = _expect_list(data.get("ascii", []), f"{location}.ascii")

        return cls(
            file=_get_str(data, "file", location),
            tiles=tuple(
                TileSource.from_dict(tile, f"{location}.tiles[{i}]")
                for i, tile in enumerate(raw_tiles)
            ),
            sprite_width=_get_positive_int(data, "sprite_width", location, None),
            sprite_height=_get_positive_int(data, "sprite_height", location, None),
            sprite_offset_x=_get_int(data, "sprite_offset_x", location, None),
            sprite_offset_y=_get_int(data, "sprite_offset_y", location, None),
            ascii=tuple(
                AsciiEntry.from_dict(entry, f"{location}.ascii[{i}]")
                for i, entry in enumerate(raw_ascii)
            ),
            comment=_get_str(data, "//", location, ""),
        )

    def sprite_size(self, default: "TileInfo") -> tuple[int, int]:
        """Return effective (width, height) of one sprite cell."""
        return (
            self.sprite_width if self.sprite_width is not None else default.width,
            self.sprite_height if self.sprite_height is not None else default.height,
        )


# =============================================================================
# Tileset Models
# =============================================================================

@dataclass(frozen=True)
class TileInfo:
    """Default sprite geometry of a tileset (`tile_info` entry)."""
    width: int
    height: int
    pixelscale: float = 1.0
    iso: bool = False

    @classmethod
    def from_dict(cls, value: Any, location: str) -> "TileInfo":
        data = _expect_dict(value, location)
        _check_keys(data, TILE_INFO_KEYS, location)
        pixelscale = data.get("pixelscale", 1.0)
        if not (_is_int(pixelscale) or isinstance(pixelscale, float)):
            raise TilesetSchemaError(f"{location}.pixelscale", f"expected a number, got {pixelscale!r}")
        return cls(
            width=_get_positive_int(data, "width", location),
            height=_get_positive_int(data, "height", location),
            pixelscale=float(pixelscale),
            iso=_get_bool(data, "iso", location, False),
        )


@dataclass(frozen=True)
class OverlayOrder:
    """Draw order for overlays whose id matches one of `ids`."""
    ids: tuple[str, ...]
    order: int

    @classmethod
    def from_dict(cls, value: Any, location: str) -> "OverlayOrder":
        data = _expect_dict(value, location)
        _check_keys(data, OVERLAY_KEYS, location)
        if "id" not in data:
            raise TilesetSchemaError(location, "missing field 'id'")
        return cls(
            ids=single_or_list(data["id"], _parse_str, f"{location}.id"),
            order=_get_int(data, "order", location),
        )


@dataclass
class Tileset:
    """Parsed tile_config.json bound to the directory it was loaded from.

    `base_path` is used to resolve sheet images and to place generated
    artifacts (sprites/, dump.json, ...).
    """
    base_path: Path
    tile_info: list[TileInfo]
    tiles_new: list[SheetSource]
    overlay_ordering: list[OverlayOrder] = field(default_factory=lambda: [])

    @classmethod
    def from_dict(cls, value: Any, base_path: Path) -> "Tileset":
        """Create Tileset from the decoded tile_config.json document.

        Args:
            value: Decoded JSON document
            base_path: Tileset directory

        Returns:
            Tileset with every nested entry parsed

        Raises:
            TilesetSchemaError: On any unknown field or wrongly typed value
        """
        data = _expect_dict(value, "$")
        _check_keys(data, TILESET_KEYS, "$")

        for key in ("tile_info", "tiles-new"):
            if key not in data:
                raise TilesetSchemaError("$", f"missing field '{key}'")

        raw_info = _expect_list(data["tile_info"], "$.tile_info")
        if not raw_info:
            raise TilesetSchemaError("$.tile_info", "at least one entry is required")
        raw_sheets = _expect_list(data["tiles-new"], "$.tiles-new")
        raw_overlay = _expect_list(data.get("overlay_ordering", []), "$.overlay_ordering")

        return cls(
            base_path=base_path,
            tile_info=[
                TileInfo.from_dict(item, f"$.tile_info[{i}]") for i, item in enumerate(raw_info)
            ],
            tiles_new=[
                SheetSource.from_dict(item, f"$.tiles-new[{i}]") for i, item in enumerate(raw_sheets)
            ],
            overlay_ordering=[
                OverlayOrder.from_dict(item, f"$.overlay_ordering[{i}]")
                for i, item in enumerate(raw_overlay)
            ],
        )

    @property
    def default_tile_info(self) -> TileInfo:
        """First tile_info entry; authoritative for sheets without sizes."""
        return self.tile_info[0]
