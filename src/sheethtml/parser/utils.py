from __future__ import annotations

import posixpath
import re

from ..model import MergeRegion, RangeRef

CELL_RE = re.compile(r"^\$?([A-Z]+)\$?(\d+)$")
RANGE_RE = re.compile(r"^\$?([A-Z]+)\$?(\d+):\$?([A-Z]+)\$?(\d+)$")


def col_to_index(col: str) -> int:
    value = 0
    for char in col.upper():
        value = value * 26 + (ord(char) - 64)
    return value


def index_to_col(index: int) -> str:
    if index < 1:
        raise ValueError("Column index must be >= 1")
    result: list[str] = []
    value = index
    while value > 0:
        value, rem = divmod(value - 1, 26)
        result.append(chr(65 + rem))
    return "".join(reversed(result))


def coord_to_rowcol(coord: str) -> tuple[int, int]:
    match = CELL_RE.match(coord)
    if not match:
        raise ValueError(f"Invalid coordinate: {coord}")
    col = col_to_index(match.group(1))
    row = int(match.group(2))
    return row, col


def rowcol_to_coord(row: int, col: int) -> str:
    if row < 1 or col < 1:
        raise ValueError("row/col must be >= 1")
    return f"{index_to_col(col)}{row}"


def parse_range_ref(ref: str) -> RangeRef:
    normalized = ref.replace("$", "")
    range_match = RANGE_RE.match(normalized)
    if range_match:
        sc = col_to_index(range_match.group(1))
        sr = int(range_match.group(2))
        ec = col_to_index(range_match.group(3))
        er = int(range_match.group(4))
        return RangeRef(
            ref=normalized,
            start_row=min(sr, er),
            start_col=min(sc, ec),
            end_row=max(sr, er),
            end_col=max(sc, ec),
        )

    cell_match = CELL_RE.match(normalized)
    if not cell_match:
        raise ValueError(f"Invalid range reference: {ref}")

    col = col_to_index(cell_match.group(1))
    row = int(cell_match.group(2))
    return RangeRef(ref=normalized, start_row=row, start_col=col, end_row=row, end_col=col)


def range_to_merge_region(rng: RangeRef) -> MergeRegion:
    return MergeRegion(
        top_row=rng.start_row,
        left_col=rng.start_col,
        bottom_row=rng.end_row,
        right_col=rng.end_col,
        ref=rng.ref,
    )


def resolve_target(base_path: str, target: str) -> str:
    joined = posixpath.normpath(posixpath.join(posixpath.dirname(base_path), target))
    if joined.startswith("/"):
        joined = joined[1:]
    return joined
