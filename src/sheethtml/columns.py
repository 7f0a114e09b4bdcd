from __future__ import annotations

from .merges import MergeMap
from .model import ColumnSpec, ConvertOptions, SheetDoc
from .styles import css_number, extract_style, has_visible_style


def select_visible_columns(sheet: SheetDoc, merge_map: MergeMap) -> set[int]:
    """Columns that carry a value, a merge anchor or any declared style.

    This is a separate pass from grid assembly; styles are re-extracted here
    only to classify cells.
    """
    visible: set[int] = set()
    for _, cells in sheet.iter_rows():
        for cell in cells:
            if cell.col in visible:
                continue
            if cell.value not in (None, ""):
                visible.add(cell.col)
            elif cell.coord in merge_map.anchors:
                visible.add(cell.col)
            elif has_visible_style(extract_style(cell.format)):
                visible.add(cell.col)
    return visible


def build_column_specs(
    sheet: SheetDoc,
    visible: set[int],
    options: ConvertOptions | None = None,
) -> list[ColumnSpec]:
    opts = options or ConvertOptions()
    specs: list[ColumnSpec] = []
    for index in range(1, sheet.max_column + 1):
        if index not in visible:
            continue
        dim = sheet.column(index)
        width = (dim.width or opts.default_column_width) * opts.column_width_scale
        specs.append(
            ColumnSpec(
                index=index,
                hidden=dim.hidden,
                style={"width": f"{css_number(width)}px"},
            )
        )
    return specs
