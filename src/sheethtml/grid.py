from __future__ import annotations

import logging

from .columns import build_column_specs, select_visible_columns
from .merges import build_merge_map
from .model import CellData, CellRecord, ConvertOptions, SheetDoc, SheetGrid
from .styles import css_number, extract_style

logger = logging.getLogger(__name__)


def assemble_grid(sheet: SheetDoc, options: ConvertOptions | None = None) -> SheetGrid:
    """Project ``sheet`` into row-major cell records plus column specs.

    Cells covered by a merge region are dropped unless they are its anchor.
    Column pruning only affects ``cols``; cells of pruned columns stay in
    their rows since pruning is a layout hint.
    """
    opts = options or ConvertOptions()
    grid = SheetGrid(name=sheet.name)
    merge_map = build_merge_map(sheet, grid.warnings, strict=opts.strict_merges)

    for row_number, cells in sheet.iter_rows():
        height = f"{css_number(sheet.row_height(row_number) or opts.default_row_height)}px"
        records: list[CellRecord] = []
        for cell in cells:
            if merge_map.is_hidden(cell.row, cell.col, cell.coord):
                continue
            records.append(_cell_record(sheet, cell, merge_map.anchors.get(cell.coord), height))
        grid.rows.append(records)

    visible = select_visible_columns(sheet, merge_map)
    grid.cols = build_column_specs(sheet, visible, opts)
    logger.debug(
        "Assembled sheet %r: %d rows, %d of %d columns kept, %d merges skipped",
        sheet.name,
        len(grid.rows),
        len(grid.cols),
        sheet.max_column,
        len(merge_map.skipped),
    )
    return grid


def _cell_record(sheet: SheetDoc, cell: CellData, merge_entry, height: str) -> CellRecord:
    attrs = {"id": f"{sheet.name}!{cell.coord}"}
    if merge_entry is not None:
        attrs.update(merge_entry.attrs)
        style = dict(merge_entry.style)
    else:
        style = extract_style(cell.format)
    style["height"] = height
    return CellRecord(
        column=cell.col,
        row=cell.row,
        value=cell.value,
        formatted_value=cell.display_value,
        attrs=attrs,
        style=style,
    )
