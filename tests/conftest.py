"""Shared fixtures: tiny tilesets built on the fly with Pillow."""

import logging
from pathlib import Path
from typing import Any, Callable, Sequence

import orjson
import pytest
from PIL import Image

CELL = 4

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
YELLOW = (255, 255, 0, 255)

Color = tuple[int, int, int, int]


def write_sheet(path: Path, colors: Sequence[Color], cols: int, cell: int = CELL) -> None:
    """Write a sheet of solid-colored cells, row-major, `cols` cells wide."""
    rows = (len(colors) + cols - 1) // cols
    img = Image.new("RGBA", (cols * cell, rows * cell), (0, 0, 0, 0))
    for i, color in enumerate(colors):
        img.paste(Image.new("RGBA", (cell, cell), color), ((i % cols) * cell, (i // cols) * cell))
    img.save(path)


def tile_config(sheets: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
    config: dict[str, Any] = {
        "tile_info": [{"width": CELL, "height": CELL, "pixelscale": 1}],
        "tiles-new": sheets,
    }
    config.update(extra)
    return config


def sheet(file: str, tiles: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"file": file, "tiles": tiles}
    data.update(extra)
    return data


def write_config(ts_dir: Path, config: dict[str, Any]) -> None:
    (ts_dir / "tile_config.json").write_bytes(orjson.dumps(config))


@pytest.fixture
def make_tileset(tmp_path: Path) -> Callable[..., Path]:
    """Create a tileset directory.

    Usage: make_tileset("a", {"tiles.png": ([RED, GREEN], 2)}, config)
    """

    def _make(
        name: str,
        images: dict[str, tuple[Sequence[Color], int]],
        config: dict[str, Any],
    ) -> Path:
        ts_dir = tmp_path / name
        ts_dir.mkdir()
        for file_name, (colors, cols) in images.items():
            write_sheet(ts_dir / file_name, colors, cols)
        write_config(ts_dir, config)
        return ts_dir

    return _make


@pytest.fixture
def restore_logging():
    """Undo handler and level changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
