from __future__ import annotations

import pytest

from sheethtml.model import Border, BorderSide, CellFormat, ColorRef, Fill, Font, MergeRegion, SheetDoc
from tests.helpers import (
    build_xlsx,
    inline_cell,
    make_cell,
    make_sheet,
    styled_cell,
    styles_xml,
    worksheet_xml,
)


@pytest.fixture
def thin_border() -> CellFormat:
    return CellFormat(border=Border(top=BorderSide(style="thin")))


@pytest.fixture
def red_fill() -> CellFormat:
    return CellFormat(fill=Fill(pattern="solid", fg_color=ColorRef(theme=2)))


@pytest.fixture
def bold_font() -> CellFormat:
    return CellFormat(font=Font(name="Calibri", size=11, bold=True))


@pytest.fixture
def merged_2x2_sheet() -> SheetDoc:
    return make_sheet(
        [
            make_cell(1, 1, "X"),
            make_cell(1, 2),
            make_cell(2, 1),
            make_cell(2, 2),
        ],
        merges=[MergeRegion(1, 1, 2, 2, "A1:B2")],
    )


@pytest.fixture
def styled_workbook_bytes() -> bytes:
    """Two sheets: a styled report with a merged title, and a plain second sheet."""
    styles = styles_xml(
        fonts='<font><b/><sz val="14"/><color rgb="FF1F4E79"/><name val="Arial"/></font>',
        fills='<fill><patternFill patternType="solid"><fgColor theme="2"/><bgColor indexed="64"/></patternFill></fill>',
        borders=(
            '<border><left style="thin"><color rgb="FF00FF00"/></left><right/>'
            '<top style="medium"/><bottom style="sketchy"><color auto="1"/></bottom><diagonal/></border>'
        ),
        xfs=(
            '<xf numFmtId="0" fontId="1" fillId="0" borderId="0" applyFont="1">'
            '<alignment horizontal="center" vertical="center"/></xf>'
            '<xf numFmtId="0" fontId="0" fillId="2" borderId="1" applyFill="1" applyBorder="1"/>'
        ),
    )
    report = worksheet_xml(
        rows=(
            '<row r="1" ht="30">'
            + inline_cell("A1", "Quarterly report", style=1)
            + styled_cell("B1", 1)
            + styled_cell("C1", 1)
            + "</row>"
            + '<row r="2">'
            + inline_cell("A2", "North")
            + styled_cell("C2", 2)
            + "</row>"
        ),
        cols='<col min="1" max="1" width="25" customWidth="1"/><col min="3" max="3" width="8" hidden="1"/>',
        merges=("A1:C1",),
    )
    second = worksheet_xml(rows='<row r="1">' + inline_cell("A1", "second") + "</row>")
    return build_xlsx({"Report": report, "Notes": second}, styles=styles)
