"""Tests for tileset and id file loading."""

from pathlib import Path

import orjson
import pytest

from conftest import RED, sheet, tile_config
from cdda_tileset_diff.tilesets.errors import TilesetLoadError, TilesetSchemaError
from cdda_tileset_diff.tilesets.loader import load_ids_file, load_tileset


class TestLoadTileset:
    """Directory checks and strict parsing."""

    def test_loads_and_remembers_directory(self, make_tileset) -> None:
        ts_dir = make_tileset(
            "ts", {"tiles.png": ([RED], 1)}, tile_config([sheet("tiles.png", [{"id": "t", "fg": 0}])])
        )
        tileset = load_tileset(str(ts_dir))
        assert tileset.base_path == ts_dir
        assert tileset.tiles_new[0].tiles[0].ids == ("t",)
        assert tileset.default_tile_info.width == 4

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(TilesetLoadError):
            load_tileset(tmp_path / "absent")

    def test_file_instead_of_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "file"
        path.write_text("x")
        with pytest.raises(TilesetLoadError):
            load_tileset(path)

    def test_missing_config(self, tmp_path: Path) -> None:
        with pytest.raises(TilesetLoadError):
            load_tileset(tmp_path)

    def test_malformed_json_propagates(self, tmp_path: Path) -> None:
        (tmp_path / "tile_config.json").write_text("{not json")
        with pytest.raises(orjson.JSONDecodeError):
            load_tileset(tmp_path)

    def test_unknown_field(self, tmp_path: Path) -> None:
        config = tile_config([sheet("tiles.png", [{"id": "t", "fgg": 0}])])
        (tmp_path / "tile_config.json").write_bytes(orjson.dumps(config))
        with pytest.raises(TilesetSchemaError) as exc:
            load_tileset(tmp_path)
        assert exc.value.location == "$.tiles-new[0].tiles[0]"

    def test_empty_tile_info(self, tmp_path: Path) -> None:
        (tmp_path / "tile_config.json").write_bytes(
            orjson.dumps({"tile_info": [], "tiles-new": []})
        )
        with pytest.raises(TilesetSchemaError):
            load_tileset(tmp_path)


class TestLoadIdsFile:
    """Newline separated id lists."""

    def test_reads_ids(self, tmp_path: Path) -> None:
        path = tmp_path / "ids.txt"
        path.write_text("t_wall\n  t_floor  \n\nt_door\n", encoding="utf-8")
        assert load_ids_file(path) == ["t_wall", "t_floor", "t_door"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TilesetLoadError):
            load_ids_file(tmp_path / "ids.txt")
