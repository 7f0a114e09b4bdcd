from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .errors import MalformedMergeRegion
from .model import MergeRegion, SheetDoc
from .parser.utils import rowcol_to_coord
from .styles import extract_style

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MergeEntry:
    attrs: dict[str, Any]
    style: dict[str, str]


@dataclass(slots=True)
class MergeMap:
    anchors: dict[str, MergeEntry] = field(default_factory=dict)
    subsumed: set[tuple[int, int]] = field(default_factory=set)
    skipped: list[MalformedMergeRegion] = field(default_factory=list)

    def is_hidden(self, row: int, col: int, coord: str) -> bool:
        return (row, col) in self.subsumed and coord not in self.anchors


def build_merge_map(
    sheet: SheetDoc,
    warnings: list[str] | None = None,
    *,
    strict: bool = False,
) -> MergeMap:
    """Resolve every merge region of ``sheet``.

    The anchor (top-left) address maps to its span attributes and the style
    for the whole span: the bottom-right cell's style overlaid by the
    top-left cell's. A region that cannot be mapped to cell addresses is
    skipped and reported; the rest of the sheet is still processed.
    """
    merge_map = MergeMap()
    for region in sheet.merges:
        try:
            anchor, entry = _resolve_region(sheet, region)
        except MalformedMergeRegion as exc:
            if strict:
                raise
            logger.warning("Skipping merge region on sheet %r: %s", sheet.name, exc)
            merge_map.skipped.append(exc)
            if warnings is not None:
                warnings.append(f"{sheet.name}: {exc}")
            continue

        merge_map.anchors[anchor] = entry
        for row in range(region.top_row, region.bottom_row + 1):
            for col in range(region.left_col, region.right_col + 1):
                merge_map.subsumed.add((row, col))
    return merge_map


def _resolve_region(sheet: SheetDoc, region: MergeRegion) -> tuple[str, MergeEntry]:
    if region.top_row > region.bottom_row or region.left_col > region.right_col:
        raise MalformedMergeRegion(region, "inverted bounds")
    try:
        start = rowcol_to_coord(region.top_row, region.left_col)
        rowcol_to_coord(region.bottom_row, region.right_col)
    except ValueError as exc:
        raise MalformedMergeRegion(region, str(exc)) from exc

    top_left = sheet.cell(region.top_row, region.left_col)
    bottom_right = sheet.cell(region.bottom_row, region.right_col)
    colspan = region.right_col - region.left_col + 1
    rowspan = region.bottom_row - region.top_row + 1
    entry = MergeEntry(
        attrs={
            "colspan": max(colspan, 1),
            "rowspan": max(rowspan, 1),
        },
        style={**extract_style(bottom_right.format), **extract_style(top_left.format)},
    )
    return start, entry
