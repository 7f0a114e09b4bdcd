from __future__ import annotations

from sheethtml.grid import assemble_grid
from sheethtml.model import CellRecord, ColumnSpec, SheetGrid
from sheethtml.render_html import TABLE_OPEN, render_document, render_table, style_string
from tests.helpers import make_cell, make_sheet


def _record(value: str, **attrs) -> CellRecord:
    return CellRecord(
        column=1,
        row=1,
        value=value,
        formatted_value=value,
        attrs={"id": "S!A1", **attrs},
        style={"border-collapse": "collapse", "height": "19px"},
    )


def test_full_merge_renders_single_cell(merged_2x2_sheet) -> None:
    html = render_table(assemble_grid(merged_2x2_sheet))

    assert html.count("<td") == 1
    assert '<td colspan="2" rowspan="2" style="border-collapse: collapse; height: 19px">X</td>' in html
    assert html.count("<tr>") == 2


def test_table_layout() -> None:
    grid = SheetGrid(
        name="S",
        rows=[[_record("a")]],
        cols=[
            ColumnSpec(index=1, hidden=False, style={"width": "100px"}),
            ColumnSpec(index=2, hidden=True, style={"width": "80px"}),
        ],
    )
    lines = render_table(grid).split("\n")

    assert lines == [
        TABLE_OPEN,
        "<colgroup>",
        '<col style="width: 100px">',
        "</colgroup>",
        "<tr>",
        '<td style="border-collapse: collapse; height: 19px">a</td>',
        "</tr>",
        "</table>",
    ]


def test_cell_text_is_escaped() -> None:
    grid = SheetGrid(name="S", rows=[[_record("<b>Tom & Jerry</b>")]])
    assert "&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;" in render_table(grid)


def test_style_string() -> None:
    assert style_string({"border-top": "1px solid", "height": "19px"}) == "border-top: 1px solid; height: 19px"


def test_render_is_idempotent() -> None:
    grid = assemble_grid(make_sheet([make_cell(1, 1, "a"), make_cell(2, 2, 3.5)]))
    assert render_document(grid) == render_document(grid)


def test_document_shell() -> None:
    grid = SheetGrid(name="Q&A", rows=[[_record("x")]])
    html = render_document(grid)

    assert html.startswith("<!DOCTYPE html>\n")
    assert '<meta charset="UTF-8">' in html
    assert "<title>Q&amp;A</title>" in html
    assert TABLE_OPEN in html
    assert html.rstrip().endswith("</html>")
    assert "<title>Custom</title>" in render_document(grid, title="Custom")
