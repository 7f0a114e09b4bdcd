from __future__ import annotations

import io
from zipfile import ZipFile

from sheethtml.model import CellData, CellFormat, MergeRegion, SheetDoc
from sheethtml.parser.utils import rowcol_to_coord

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

DEFAULT_FONTS = '<font><sz val="11"/><name val="Calibri"/></font>'
DEFAULT_FILLS = '<fill><patternFill patternType="none"/></fill><fill><patternFill patternType="gray125"/></fill>'
DEFAULT_BORDERS = "<border><left/><right/><top/><bottom/><diagonal/></border>"
DEFAULT_XFS = '<xf numFmtId="0" fontId="0" fillId="0" borderId="0"/>'


def styles_xml(
    fonts: str = "",
    fills: str = "",
    borders: str = "",
    xfs: str = "",
    numfmts: str = "",
) -> str:
    """Build styles.xml; extra records are appended after the defaults."""
    numfmt_block = f"<numFmts>{numfmts}</numFmts>" if numfmts else ""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<styleSheet xmlns="{SPREADSHEET_NS}">'
        f"{numfmt_block}"
        f"<fonts>{DEFAULT_FONTS}{fonts}</fonts>"
        f"<fills>{DEFAULT_FILLS}{fills}</fills>"
        f"<borders>{DEFAULT_BORDERS}{borders}</borders>"
        f"<cellXfs>{DEFAULT_XFS}{xfs}</cellXfs>"
        "</styleSheet>"
    )


def worksheet_xml(rows: str, cols: str = "", merges: tuple[str, ...] = ()) -> str:
    cols_block = f"<cols>{cols}</cols>" if cols else ""
    merge_block = ""
    if merges:
        cells = "".join(f'<mergeCell ref="{ref}"/>' for ref in merges)
        merge_block = f'<mergeCells count="{len(merges)}">{cells}</mergeCells>'
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<worksheet xmlns="{SPREADSHEET_NS}" xmlns:r="{DOCUMENT_REL_NS}">'
        f"{cols_block}<sheetData>{rows}</sheetData>{merge_block}"
        "</worksheet>"
    )


def build_xlsx(
    sheets: dict[str, str],
    *,
    styles: str | None = None,
    shared_strings: list[str] | None = None,
    hidden: tuple[str, ...] = (),
) -> bytes:
    """Pack worksheet XML documents into a minimal .xlsx archive."""
    sheet_entries: list[str] = []
    rel_entries: list[str] = []
    for idx, name in enumerate(sheets, start=1):
        state = ' state="hidden"' if name in hidden else ""
        sheet_entries.append(f'<sheet name="{name}" sheetId="{idx}"{state} r:id="rId{idx}"/>')
        rel_entries.append(
            f'<Relationship Id="rId{idx}" '
            'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/worksheet" '
            f'Target="worksheets/sheet{idx}.xml"/>'
        )

    workbook_xml = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<workbook xmlns="{SPREADSHEET_NS}" xmlns:r="{DOCUMENT_REL_NS}">'
        f"<sheets>{''.join(sheet_entries)}</sheets>"
        "</workbook>"
    )
    rels_xml = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<Relationships xmlns="{PACKAGE_REL_NS}">{"".join(rel_entries)}</Relationships>'
    )

    buffer = io.BytesIO()
    with ZipFile(buffer, "w") as zf:
        zf.writestr("xl/workbook.xml", workbook_xml)
        zf.writestr("xl/_rels/workbook.xml.rels", rels_xml)
        zf.writestr("xl/styles.xml", styles if styles is not None else styles_xml())
        if shared_strings is not None:
            items = "".join(f"<si><t>{text}</t></si>" for text in shared_strings)
            zf.writestr(
                "xl/sharedStrings.xml",
                f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><sst xmlns="{SPREADSHEET_NS}">{items}</sst>',
            )
        for idx, body in enumerate(sheets.values(), start=1):
            zf.writestr(f"xl/worksheets/sheet{idx}.xml", body)
    return buffer.getvalue()


def inline_cell(ref: str, text: str, style: int | None = None) -> str:
    s_attr = f' s="{style}"' if style is not None else ""
    return f'<c r="{ref}" t="inlineStr"{s_attr}><is><t>{text}</t></is></c>'


def number_cell(ref: str, value: str, style: int | None = None) -> str:
    s_attr = f' s="{style}"' if style is not None else ""
    return f'<c r="{ref}"{s_attr}><v>{value}</v></c>'


def styled_cell(ref: str, style: int) -> str:
    return f'<c r="{ref}" s="{style}"/>'


def make_cell(row: int, col: int, value=None, cell_format: CellFormat | None = None) -> CellData:
    return CellData(
        coord=rowcol_to_coord(row, col),
        row=row,
        col=col,
        value=value,
        display_value="" if value is None else str(value),
        format=cell_format,
    )


def make_sheet(cells: list[CellData], merges: list[MergeRegion] | None = None, name: str = "Sheet1") -> SheetDoc:
    sheet = SheetDoc(index=0, name=name)
    for cell in cells:
        sheet.add_cell(cell)
    sheet.merges.extend(merges or [])
    return sheet
