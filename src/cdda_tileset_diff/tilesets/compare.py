"""
Comparison of two tilesets by expanded, content-hashed tile variations.

Writes the following artifacts into each tileset directory:
    * dump.json       - every hashed variation, sorted
    * duplicates.txt  - ids defined more than once
    * exclusives.txt  - ids missing from the other tileset
    * different.txt   - ids present on both sides with different content
                        (empty when either side has duplicates)

An empty sprite list (`"fg": []`) and an absent one both mean "no sprites",
so tiles differing only in that respect compare equal.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

import orjson

from .models import ExpandedTile, Tileset
from .variations import generate_variations

DUMP_FILE_NAME = "dump.json"
DUPLICATES_FILE_NAME = "duplicates.txt"
EXCLUSIVES_FILE_NAME = "exclusives.txt"
DIFFERENT_FILE_NAME = "different.txt"

logger = logging.getLogger(__name__)


@dataclass
class SideReport:
    """Findings for one side of a comparison."""
    duplicates: list[str] = field(default_factory=lambda: [])
    exclusives: list[str] = field(default_factory=lambda: [])
    different: list[str] = field(default_factory=lambda: [])


@dataclass
class ComparisonResult:
    """Outcome of `compare_tilesets`.

    `diffed` is False when duplicates disabled the full-record diff.
    """
    a: SideReport
    b: SideReport
    diffed: bool


def dump_variations(variations: Sequence[ExpandedTile], path: Path) -> None:
    """Write variations as a pretty printed JSON list."""
    data = orjson.dumps([v.to_dict() for v in variations], option=orjson.OPT_INDENT_2)
    path.write_bytes(data)


def write_id_list(ids: Iterable[str], path: Path) -> None:
    path.write_text("\n".join(ids), encoding="utf-8")


def find_duplicates(variations: Sequence[ExpandedTile]) -> list[str]:
    """Return ids that occur more than once, one entry per extra occurrence.

    Ids are sorted first, so every adjacent equal pair is a duplicate.
    """
    ids = sorted(v.id for v in variations)
    return [current for previous, current in zip(ids, ids[1:]) if previous == current]


def find_exclusives(ids: set[str], other_ids: set[str]) -> list[str]:
    """Ids of one side missing from the other side, sorted."""
    return sorted(ids - other_ids)


def find_different(
    variations: Sequence[ExpandedTile],
    other_variations: Sequence[ExpandedTile],
    other_ids: set[str],
) -> list[str]:
    """Ids present on both sides whose records differ, sorted.

    Records missing from the other side entirely are left to
    `find_exclusives`.
    """
    only_here = set(variations) - set(other_variations)
    return sorted({v.id for v in only_here if v.id in other_ids})


def compare_tilesets(ts_a: Tileset, ts_b: Tileset, dump_sprites: bool = True) -> ComparisonResult:
    """Compare two tilesets and write the report files into each of them.

    Args:
        ts_a: First tileset
        ts_b: Second tileset
        dump_sprites: Export all sprites of both tilesets into `sprites/`

    Returns:
        ComparisonResult with the same lists that were written to disk
    """
    vars_a, _ = generate_variations(ts_a, do_hash=True, do_dump=dump_sprites)
    vars_b, _ = generate_variations(ts_b, do_hash=True, do_dump=dump_sprites)

    dump_variations(vars_a, ts_a.base_path / DUMP_FILE_NAME)
    dump_variations(vars_b, ts_b.base_path / DUMP_FILE_NAME)

    report_a = SideReport(duplicates=find_duplicates(vars_a))
    report_b = SideReport(duplicates=find_duplicates(vars_b))
    write_id_list(report_a.duplicates, ts_a.base_path / DUPLICATES_FILE_NAME)
    write_id_list(report_b.duplicates, ts_b.base_path / DUPLICATES_FILE_NAME)
    do_diff = not report_a.duplicates and not report_b.duplicates

    ids_a = {v.id for v in vars_a}
    ids_b = {v.id for v in vars_b}

    report_a.exclusives = find_exclusives(ids_a, ids_b)
    report_b.exclusives = find_exclusives(ids_b, ids_a)
    write_id_list(report_a.exclusives, ts_a.base_path / EXCLUSIVES_FILE_NAME)
    write_id_list(report_b.exclusives, ts_b.base_path / EXCLUSIVES_FILE_NAME)

    if do_diff:
        report_a.different = find_different(vars_a, vars_b, ids_b)
        report_b.different = find_different(vars_b, vars_a, ids_a)
    else:
        logger.warning(
            "duplicate tiles found in at least one tileset, diff will not be generated."
        )

    write_id_list(report_a.different, ts_a.base_path / DIFFERENT_FILE_NAME)
    write_id_list(report_b.different, ts_b.base_path / DIFFERENT_FILE_NAME)

    logger.info(
        f"A: {len(vars_a)} tiles, {len(report_a.duplicates)} duplicates, "
        f"{len(report_a.exclusives)} exclusive, {len(report_a.different)} different"
    )
    logger.info(
        f"B: {len(vars_b)} tiles, {len(report_b.duplicates)} duplicates, "
        f"{len(report_b.exclusives)} exclusive, {len(report_b.different)} different"
    )
    return ComparisonResult(a=report_a, b=report_b, diffed=do_diff)
