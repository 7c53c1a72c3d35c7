"""
Main entry point for cdda-tileset-diff.
Usage: python -m cdda_tileset_diff {compare,extract} ...
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import orjson

from . import __version__
from .settings import AppSettings, ConfigError
from .tilesets import (
    TilesetError,
    compare_tilesets,
    extract_tiles,
    load_ids_file,
    load_tileset,
)
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="cdda-tileset-diff",
        description="Compare Cataclysm: DDA tilesets or extract tiles out of them.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="console log level (default: from settings)",
    )
    parser.add_argument(
        "--settings-file",
        type=Path,
        help="INI file to read settings from instead of the user store",
    )
    parser.add_argument(
        "--no-sprite-dump",
        action="store_true",
        help="do not export every sprite into <tileset>/sprites",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    compare = sub.add_parser("compare", help="compare two tilesets")
    compare.add_argument("a", type=Path, help="first tileset directory")
    compare.add_argument("b", type=Path, help="second tileset directory")

    extract = sub.add_parser("extract", help="extract tiles listed in a file")
    extract.add_argument("tileset", type=Path, help="tileset directory")
    extract.add_argument("ids_file", type=Path, help="file with one tile id per line")

    return parser


def run_compare(args: argparse.Namespace, dump_sprites: bool) -> None:
    print("Tileset comparison mode.")

    print(f"Loading tileset A: {args.a}")
    tiles_a = load_tileset(args.a)

    print(f"Loading tileset B: {args.b}")
    tiles_b = load_tileset(args.b)

    print("Running comparison...")
    compare_tilesets(tiles_a, tiles_b, dump_sprites=dump_sprites)


def run_extract(args: argparse.Namespace, dump_sprites: bool, extract_dir_name: str) -> None:
    print("Tile extraction mode.")

    print(f"Loading tileset: {args.tileset}")
    tiles = load_tileset(args.tileset)

    print(f"Loading ids file: {args.ids_file}")
    ids = load_ids_file(args.ids_file)

    print("Extracting...")
    extract_tiles(tiles, ids, args.tileset / extract_dir_name, dump_sprites=dump_sprites)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command line entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")

    try:
        settings = AppSettings(settings_file=args.settings_file)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(settings, level_override=args.log_level)
    logger.debug(f"Configuration loaded from {settings.get_settings_file_path()}")

    validation = settings.validate()
    for warning in validation.warnings:
        logger.debug(f"Configuration warning: {warning}")
    if not validation.is_valid:
        for error in validation.errors:
            logger.error(f"  {error}")
        print("Aborted.")
        return 1

    dump_sprites = settings.dump_sprites and not args.no_sprite_dump

    try:
        if args.command == "compare":
            run_compare(args, dump_sprites)
        else:
            run_extract(args, dump_sprites, settings.extract_dir_name)
    except (TilesetError, OSError, orjson.JSONDecodeError) as e:
        logger.error(str(e))
        print("Aborted.")
        return 1

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
