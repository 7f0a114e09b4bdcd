from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from .errors import MissingSheet

DEFAULT_ROW_HEIGHT = 19
DEFAULT_COLUMN_WIDTH = 10
COLUMN_WIDTH_SCALE = 10


@dataclass(slots=True)
class ConvertOptions:
    include_hidden_sheets: bool = True
    default_row_height: float = DEFAULT_ROW_HEIGHT
    default_column_width: float = DEFAULT_COLUMN_WIDTH
    column_width_scale: float = COLUMN_WIDTH_SCALE
    document_title: str | None = None
    strict_merges: bool = False


@dataclass(slots=True)
class RangeRef:
    ref: str
    start_row: int
    start_col: int
    end_row: int
    end_col: int


@dataclass(frozen=True, slots=True)
class ColorRef:
    """A color as declared in the workbook.

    ``rgb`` is an ``AARRGGBB`` string. When both ``rgb`` and ``theme`` are set,
    ``rgb`` is authoritative.
    """

    rgb: str | None = None
    theme: int | None = None
    tint: float = 0.0


@dataclass(frozen=True, slots=True)
class BorderSide:
    style: str | None = None
    color: ColorRef | None = None


@dataclass(frozen=True, slots=True)
class Border:
    left: BorderSide | None = None
    right: BorderSide | None = None
    top: BorderSide | None = None
    bottom: BorderSide | None = None


@dataclass(frozen=True, slots=True)
class Fill:
    pattern: str | None = None
    fg_color: ColorRef | None = None
    bg_color: ColorRef | None = None


@dataclass(frozen=True, slots=True)
class Font:
    name: str | None = None
    size: float | None = None
    bold: bool = False
    italic: bool = False
    underline: str | None = None
    color: ColorRef | None = None


@dataclass(frozen=True, slots=True)
class Alignment:
    horizontal: str | None = None
    vertical: str | None = None
    wrap_text: bool = False


@dataclass(frozen=True, slots=True)
class CellFormat:
    font: Font | None = None
    fill: Fill | None = None
    border: Border | None = None
    alignment: Alignment | None = None


@dataclass(slots=True)
class CellData:
    coord: str
    row: int
    col: int
    cell_type: str = "n"
    value: Any = None
    display_value: str = ""
    formula: str | None = None
    style_id: str | None = None
    format: CellFormat | None = None


@dataclass(frozen=True, slots=True)
class MergeRegion:
    top_row: int
    left_col: int
    bottom_row: int
    right_col: int
    ref: str = ""


@dataclass(slots=True)
class ColumnDim:
    index: int
    width: float | None = None
    hidden: bool = False


@dataclass(slots=True)
class SheetDoc:
    index: int
    name: str
    state: str = "visible"
    path: str = ""
    dimension_ref: str = "A1"
    cells: list[CellData] = field(default_factory=list)
    cell_map: dict[tuple[int, int], CellData] = field(default_factory=dict)
    merges: list[MergeRegion] = field(default_factory=list)
    row_heights: dict[int, float] = field(default_factory=dict)
    columns: dict[int, ColumnDim] = field(default_factory=dict)

    def add_cell(self, cell: CellData) -> None:
        self.cells.append(cell)
        self.cell_map[(cell.row, cell.col)] = cell

    def cell(self, row: int, col: int) -> CellData:
        stored = self.cell_map.get((row, col))
        if stored is not None:
            return stored
        from .parser.utils import rowcol_to_coord

        return CellData(coord=rowcol_to_coord(row, col), row=row, col=col)

    def iter_rows(self) -> Iterator[tuple[int, list[CellData]]]:
        last_col: dict[int, int] = {}
        for cell in self.cells:
            last_col[cell.row] = max(last_col.get(cell.row, 0), cell.col)
        for region in self.merges:
            if region.top_row < 1 or region.left_col < 1:
                continue
            for row in range(region.top_row, region.bottom_row + 1):
                last_col[row] = max(last_col.get(row, 0), region.right_col)
        for row in sorted(last_col):
            yield row, [self.cell(row, col) for col in range(1, last_col[row] + 1)]

    def row_height(self, row: int) -> float | None:
        return self.row_heights.get(row)

    def column(self, index: int) -> ColumnDim:
        return self.columns.get(index) or ColumnDim(index=index)

    @property
    def max_column(self) -> int:
        candidates = [0]
        candidates.extend(cell.col for cell in self.cells)
        candidates.extend(self.columns)
        candidates.extend(region.right_col for region in self.merges)
        return max(candidates)


@dataclass(slots=True)
class WorkbookDoc:
    source_name: str
    options: ConvertOptions
    sheets: list[SheetDoc] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def get_sheet(self, selector: str | int | None = None) -> SheetDoc:
        """Return a sheet by name or 1-based position; the first sheet by default."""
        if selector is None:
            selector = 1
        if isinstance(selector, int):
            if 1 <= selector <= len(self.sheets):
                return self.sheets[selector - 1]
        else:
            for sheet in self.sheets:
                if sheet.name == selector:
                    return sheet
        raise MissingSheet(selector, [sheet.name for sheet in self.sheets])


@dataclass(frozen=True, slots=True)
class CellRecord:
    column: int
    row: int
    value: Any
    formatted_value: str
    attrs: dict[str, Any]
    style: dict[str, str]


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    index: int
    hidden: bool
    style: dict[str, str]


@dataclass(slots=True)
class SheetGrid:
    name: str
    rows: list[list[CellRecord]] = field(default_factory=list)
    cols: list[ColumnSpec] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
