from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
from xml.etree import ElementTree as ET
from zipfile import BadZipFile, ZipFile

from ..errors import UnsupportedSource
from ..model import (
    Alignment,
    Border,
    BorderSide,
    CellData,
    CellFormat,
    ColorRef,
    ColumnDim,
    ConvertOptions,
    Fill,
    Font,
    SheetDoc,
    WorkbookDoc,
)
from .namespaces import DOCUMENT_REL_NS, NS, PACKAGE_REL_NS, SPREADSHEET_NS
from .utils import coord_to_rowcol, parse_range_ref, range_to_merge_region, resolve_target

logger = logging.getLogger(__name__)

BUILTIN_NUMFMTS: dict[int, str] = {
    0: "General",
    1: "0",
    2: "0.00",
    3: "#,##0",
    4: "#,##0.00",
    9: "0%",
    10: "0.00%",
    11: "0.00E+00",
    12: "# ?/?",
    13: "# ??/??",
    14: "m/d/yyyy",
    15: "d-mmm-yy",
    16: "d-mmm",
    17: "mmm-yy",
    18: "h:mm AM/PM",
    19: "h:mm:ss AM/PM",
    20: "h:mm",
    21: "h:mm:ss",
    22: "m/d/yyyy h:mm",
    37: "#,##0 ;(#,##0)",
    38: "#,##0 ;[Red](#,##0)",
    39: "#,##0.00;(#,##0.00)",
    40: "#,##0.00;[Red](#,##0.00)",
    45: "mm:ss",
    46: "[h]:mm:ss",
    47: "mmss.0",
    48: "##0.0E+0",
    49: "@",
}

_DATE_TOKEN_RE = re.compile(r"(?:^|[^\\])(?:y+|m+|d+|h+|s+|AM/PM)", re.IGNORECASE)
_BRACKET_RE = re.compile(r"\[([^\]]*)\]")
_ELAPSED_RE = re.compile(r"^(?:h+|m+|s+)$", re.IGNORECASE)


@dataclass(slots=True)
class _SheetRef:
    index: int
    rid: str
    name: str
    state: str
    path: str


class OOXMLWorkbookParser:
    """Decode an .xlsx package into the worksheet object model.

    ``source`` is either the raw file bytes or a path to an ``.xlsx`` file.
    """

    def __init__(self, source: bytes | str | Path, options: ConvertOptions | None = None) -> None:
        self.source = source
        self.options = options or ConvertOptions()
        self._formats: list[CellFormat | None] = []
        self._numfmts: list[str] = []

    @property
    def source_name(self) -> str:
        if isinstance(self.source, (bytes, bytearray)):
            return "<bytes>"
        return Path(self.source).name

    def parse(self) -> WorkbookDoc:
        with self._open() as zip_file:
            if "xl/workbook.xml" not in zip_file.namelist():
                raise UnsupportedSource(f"{self.source_name}: missing xl/workbook.xml")

            workbook = WorkbookDoc(source_name=self.source_name, options=self.options)
            shared_strings = self._parse_shared_strings(zip_file)
            self._formats, self._numfmts = self._parse_styles(zip_file)

            wb_root = ET.fromstring(zip_file.read("xl/workbook.xml"))
            wb_rels = self._load_relationships(zip_file, "xl/_rels/workbook.xml.rels")

            for sheet_ref in self._parse_sheet_refs(wb_root, wb_rels):
                if sheet_ref.state != "visible" and not self.options.include_hidden_sheets:
                    continue
                if sheet_ref.path not in zip_file.namelist():
                    workbook.warnings.append(f"Missing worksheet part: {sheet_ref.path}")
                    logger.warning("Missing worksheet part %s for sheet %r", sheet_ref.path, sheet_ref.name)
                    continue
                workbook.sheets.append(self._parse_sheet(zip_file, shared_strings, sheet_ref, workbook.warnings))

            logger.debug("Decoded %s: %d sheets", self.source_name, len(workbook.sheets))
            return workbook

    def _open(self) -> ZipFile:
        if isinstance(self.source, (bytes, bytearray)):
            stream: Any = io.BytesIO(self.source)
        else:
            path = Path(self.source)
            if path.suffix.lower() != ".xlsx":
                raise UnsupportedSource("Only .xlsx is supported in this version")
            stream = path
        try:
            return ZipFile(stream)
        except BadZipFile as exc:
            raise UnsupportedSource(f"{self.source_name}: not a zip package") from exc

    def _parse_shared_strings(self, zip_file: ZipFile) -> list[str]:
        if "xl/sharedStrings.xml" not in zip_file.namelist():
            return []

        root = ET.fromstring(zip_file.read("xl/sharedStrings.xml"))
        values: list[str] = []
        for si in root.findall(f"{{{SPREADSHEET_NS}}}si"):
            direct = si.find(f"{{{SPREADSHEET_NS}}}t")
            if direct is not None:
                values.append(direct.text or "")
                continue
            texts: list[str] = []
            for txt in si.findall(f".//{{{SPREADSHEET_NS}}}t"):
                texts.append(txt.text or "")
            values.append("".join(texts))
        return values

    def _parse_styles(self, zip_file: ZipFile) -> tuple[list[CellFormat | None], list[str]]:
        if "xl/styles.xml" not in zip_file.namelist():
            return [], []
        root = ET.fromstring(zip_file.read("xl/styles.xml"))

        fonts = [self._parse_font(font) for font in root.findall("a:fonts/a:font", NS)]
        fills = [self._parse_fill(fill) for fill in root.findall("a:fills/a:fill", NS)]
        borders = [self._parse_border(border) for border in root.findall("a:borders/a:border", NS)]
        custom_numfmts = self._parse_custom_numfmts(root)

        formats: list[CellFormat | None] = []
        numfmts: list[str] = []
        for xf in root.findall("a:cellXfs/a:xf", NS):
            alignment_elem = xf.find("a:alignment", NS)
            formats.append(
                CellFormat(
                    font=_pick(fonts, xf.attrib.get("fontId")),
                    fill=_pick(fills, xf.attrib.get("fillId")),
                    border=_pick(borders, xf.attrib.get("borderId")),
                    alignment=self._parse_alignment(alignment_elem) if alignment_elem is not None else None,
                )
            )
            num_fmt_id = _to_int(xf.attrib.get("numFmtId"), 0)
            numfmts.append(custom_numfmts.get(num_fmt_id) or BUILTIN_NUMFMTS.get(num_fmt_id, ""))
        return formats, numfmts

    def _parse_custom_numfmts(self, styles_root: ET.Element) -> dict[int, str]:
        result: dict[int, str] = {}
        for num_fmt in styles_root.findall("a:numFmts/a:numFmt", NS):
            raw_id = num_fmt.attrib.get("numFmtId")
            code = num_fmt.attrib.get("formatCode")
            if raw_id is None or code is None:
                continue
            try:
                fmt_id = int(raw_id)
            except ValueError:
                continue
            result[fmt_id] = code
        return result

    def _parse_font(self, font: ET.Element) -> Font:
        name = font.find("a:name", NS)
        size = font.find("a:sz", NS)
        underline = font.find("a:u", NS)
        underline_val = underline.attrib.get("val", "single") if underline is not None else None
        return Font(
            name=name.attrib.get("val") if name is not None else None,
            size=_to_float(size.attrib.get("val")) if size is not None else None,
            bold=_flag(font.find("a:b", NS)),
            italic=_flag(font.find("a:i", NS)),
            underline=None if underline_val in {None, "", "none"} else underline_val,
            color=self._parse_color(font.find("a:color", NS)),
        )

    def _parse_fill(self, fill: ET.Element) -> Fill | None:
        pattern = fill.find("a:patternFill", NS)
        if pattern is None:
            return None
        return Fill(
            pattern=pattern.attrib.get("patternType"),
            fg_color=self._parse_color(pattern.find("a:fgColor", NS)),
            bg_color=self._parse_color(pattern.find("a:bgColor", NS)),
        )

    def _parse_border(self, border: ET.Element) -> Border:
        sides: dict[str, BorderSide | None] = {}
        for side in ("left", "right", "top", "bottom"):
            elem = border.find(f"a:{side}", NS)
            if elem is None or not elem.attrib.get("style"):
                sides[side] = None
                continue
            sides[side] = BorderSide(
                style=elem.attrib["style"],
                color=self._parse_color(elem.find("a:color", NS)),
            )
        return Border(**sides)

    def _parse_alignment(self, alignment: ET.Element) -> Alignment:
        vertical = alignment.attrib.get("vertical")
        return Alignment(
            horizontal=alignment.attrib.get("horizontal"),
            # CSS spells it "middle"
            vertical="middle" if vertical == "center" else vertical,
            wrap_text=alignment.attrib.get("wrapText") in {"1", "true"},
        )

    def _parse_color(self, color_elem: ET.Element | None) -> ColorRef | None:
        if color_elem is None:
            return None
        theme = color_elem.attrib.get("theme")
        return ColorRef(
            rgb=color_elem.attrib.get("rgb") or None,
            theme=_to_int(theme, None) if theme is not None else None,
            tint=_to_float(color_elem.attrib.get("tint")) or 0.0,
        )

    def _load_relationships(self, zip_file: ZipFile, path: str) -> dict[str, str]:
        if path not in zip_file.namelist():
            return {}
        root = ET.fromstring(zip_file.read(path))
        rels: dict[str, str] = {}
        for rel in root.findall(f"{{{PACKAGE_REL_NS}}}Relationship"):
            rel_id = rel.attrib.get("Id")
            target = rel.attrib.get("Target")
            if rel_id and target:
                rels[rel_id] = target
        return rels

    def _parse_sheet_refs(self, wb_root: ET.Element, wb_rels: dict[str, str]) -> list[_SheetRef]:
        sheet_refs: list[_SheetRef] = []
        for idx, sheet in enumerate(wb_root.findall("a:sheets/a:sheet", NS)):
            rid = sheet.attrib.get(f"{{{DOCUMENT_REL_NS}}}id", "")
            target = wb_rels.get(rid)
            if not target:
                continue
            sheet_refs.append(
                _SheetRef(
                    index=idx,
                    rid=rid,
                    name=sheet.attrib.get("name", f"Sheet{idx+1}"),
                    state=sheet.attrib.get("state", "visible"),
                    path=resolve_target("xl/workbook.xml", target),
                )
            )
        return sheet_refs

    def _parse_sheet(
        self,
        zip_file: ZipFile,
        shared_strings: list[str],
        sheet_ref: _SheetRef,
        warnings: list[str],
    ) -> SheetDoc:
        root = ET.fromstring(zip_file.read(sheet_ref.path))

        dim_elem = root.find("a:dimension", NS)
        sheet = SheetDoc(
            index=sheet_ref.index,
            name=sheet_ref.name,
            state=sheet_ref.state,
            path=sheet_ref.path,
            dimension_ref=dim_elem.attrib.get("ref", "A1") if dim_elem is not None else "A1",
        )

        self._parse_rows_cells(root, shared_strings, sheet)
        self._parse_cols(root, sheet)
        self._parse_merges(root, sheet, warnings)
        return sheet

    def _parse_rows_cells(self, root: ET.Element, shared_strings: list[str], sheet: SheetDoc) -> None:
        for row_elem in root.findall(".//a:sheetData/a:row", NS):
            row_idx = _to_int(row_elem.attrib.get("r"), 0)
            height = _to_float(row_elem.attrib.get("ht"))
            if row_idx and height is not None:
                sheet.row_heights[row_idx] = height

            for cell_elem in row_elem.findall("a:c", NS):
                coord = cell_elem.attrib.get("r")
                if not coord:
                    continue

                row, col = coord_to_rowcol(coord)
                cell_type = cell_elem.attrib.get("t", "n")
                style_id = cell_elem.attrib.get("s")

                formula_elem = cell_elem.find("a:f", NS)
                formula = None
                if formula_elem is not None:
                    formula = (formula_elem.text or "").strip() or None

                value_elem = cell_elem.find("a:v", NS)
                cached_value = value_elem.text if value_elem is not None else None
                value = self._decode_cell_value(cell_elem, cell_type, cached_value, shared_strings)

                sheet.add_cell(
                    CellData(
                        coord=coord,
                        row=row,
                        col=col,
                        cell_type=cell_type,
                        value=value,
                        display_value=self._display_value(value, style_id),
                        formula=formula,
                        style_id=style_id,
                        format=self._format_for(style_id),
                    )
                )

    def _parse_cols(self, root: ET.Element, sheet: SheetDoc) -> None:
        for col_elem in root.findall(".//a:cols/a:col", NS):
            start = _to_int(col_elem.attrib.get("min"), 0)
            end = _to_int(col_elem.attrib.get("max"), 0)
            hidden = col_elem.attrib.get("hidden") in {"1", "true"}
            width = _to_float(col_elem.attrib.get("width"))
            for idx in range(max(start, 1), end + 1):
                sheet.columns[idx] = ColumnDim(index=idx, width=width, hidden=hidden)

    def _parse_merges(self, root: ET.Element, sheet: SheetDoc, warnings: list[str]) -> None:
        for merge in root.findall(".//a:mergeCells/a:mergeCell", NS):
            ref = merge.attrib.get("ref")
            if not ref:
                continue
            try:
                rng = parse_range_ref(ref)
            except ValueError:
                warnings.append(f"{sheet.name}: unreadable merge reference {ref!r}")
                logger.warning("Ignoring unreadable merge reference %r on sheet %r", ref, sheet.name)
                continue
            sheet.merges.append(range_to_merge_region(rng))

    def _format_for(self, style_id: str | None) -> CellFormat | None:
        idx = _to_int(style_id, 0)
        if idx <= 0 or idx >= len(self._formats):
            return None
        return self._formats[idx]

    def _decode_cell_value(
        self,
        cell_elem: ET.Element,
        cell_type: str,
        cached_value: str | None,
        shared_strings: list[str],
    ) -> Any:
        if cell_type == "s":
            idx = _to_int(cached_value, -1)
            return shared_strings[idx] if 0 <= idx < len(shared_strings) else ""

        if cell_type == "inlineStr":
            inline = cell_elem.find("a:is", NS)
            if inline is None:
                return ""
            direct = inline.find("a:t", NS)
            if direct is not None:
                return direct.text or ""
            return "".join((node.text or "") for node in inline.findall(".//a:t", NS))

        if cell_type in {"str", "e"}:
            return cached_value or ""

        if cell_type == "b":
            return cached_value == "1"

        if cached_value is None or cached_value.strip() == "":
            return None
        raw = cached_value.strip()
        try:
            number = float(raw)
        except ValueError:
            return raw
        if number.is_integer() and "." not in raw and "E" not in raw.upper():
            return int(number)
        return number

    def _display_value(self, value: Any, style_id: str | None) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, str):
            return value

        idx = _to_int(style_id, 0)
        fmt = self._numfmts[idx] if 0 <= idx < len(self._numfmts) else ""
        if not fmt or fmt.lower() == "general":
            return _general_number(value)

        primary = fmt.split(";")[0]
        if _is_date_format(primary):
            return _format_excel_date(value, primary)
        if "%" in primary:
            return _format_percent(value, primary)
        if any(token in primary for token in ("0", "#")):
            return _format_decimal(value, primary)
        return _general_number(value)


def _pick(items: list, raw_id: str | None):
    idx = _to_int(raw_id, 0)
    if 0 <= idx < len(items):
        return items[idx]
    return None


def _flag(elem: ET.Element | None) -> bool:
    if elem is None:
        return False
    return elem.attrib.get("val", "1") not in {"0", "false"}


def _to_int(raw: str | None, default):
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _to_float(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _general_number(number: float) -> str:
    if abs(number - round(number)) < 1e-11:
        return str(int(round(number)))
    return repr(float(number))


def _is_date_format(fmt: str) -> bool:
    return bool(_DATE_TOKEN_RE.search(_strip_brackets(_strip_quoted(fmt))))


def _strip_quoted(fmt: str) -> str:
    out: list[str] = []
    in_quote = False
    for ch in fmt:
        if ch == '"':
            in_quote = not in_quote
            continue
        if not in_quote:
            out.append(ch)
    return "".join(out)


def _strip_brackets(fmt: str) -> str:
    # [Red], [$-409] and [>=100] are not date tokens; elapsed [h], [mm], [ss] are.
    return _BRACKET_RE.sub(lambda m: m.group(1) if _ELAPSED_RE.match(m.group(1)) else "", fmt)


def _format_excel_date(number: float, fmt: str) -> str:
    try:
        dt = datetime(1899, 12, 30) + timedelta(days=number)
    except (OverflowError, ValueError):
        return _general_number(number)
    cleaned = fmt.lower()
    has_date = any(t in cleaned for t in ("y", "d", "m"))
    has_time = any(t in cleaned for t in ("h", "s")) or "am/pm" in cleaned
    if has_date and has_time:
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    if has_time:
        return dt.strftime("%H:%M:%S")
    return dt.strftime("%Y-%m-%d")


def _decimals(fmt: str) -> int:
    if "." not in fmt:
        return 0
    after = fmt.split(".", 1)[1]
    return sum(1 for ch in after if ch in {"0", "#"})


def _format_percent(number: float, fmt: str) -> str:
    return f"{number * 100:.{_decimals(fmt)}f}%"


def _format_decimal(number: float, fmt: str) -> str:
    if "," in fmt.split(".", 1)[0]:
        return f"{number:,.{_decimals(fmt)}f}"
    return f"{number:.{_decimals(fmt)}f}"
