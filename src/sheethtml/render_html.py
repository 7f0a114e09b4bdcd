from __future__ import annotations

from html import escape as html_escape

from .model import CellRecord, SheetGrid

TABLE_OPEN = '<table style="border-collapse: collapse" border="0" cellspacing="1" cellpadding="0">'


def render_document(grid: SheetGrid, title: str | None = None) -> str:
    parts: list[str] = []

    parts.append("<!DOCTYPE html>")
    parts.append('<html lang="en">')
    parts.append("<head>")
    parts.append('<meta charset="UTF-8">')
    parts.append(f"<title>{html_escape(title if title is not None else grid.name)}</title>")
    parts.append("</head>")
    parts.append("<body>")
    parts.append(render_table(grid))
    parts.append("</body>")
    parts.append("</html>")

    return "\n".join(parts) + "\n"


def render_table(grid: SheetGrid) -> str:
    out: list[str] = []
    out.append(TABLE_OPEN)
    out.append("<colgroup>")
    for col in grid.cols:
        if col.hidden:
            continue
        out.append(f'<col style="width: {html_escape(col.style["width"])}">')
    out.append("</colgroup>")

    for row in grid.rows:
        out.append("<tr>")
        for cell in row:
            out.append(_cell_html(cell))
        out.append("</tr>")

    out.append("</table>")
    return "\n".join(out)


def style_string(style: dict[str, str]) -> str:
    return "; ".join(f"{key}: {value}" for key, value in style.items())


def _cell_html(cell: CellRecord) -> str:
    attrs: list[str] = []
    colspan = cell.attrs.get("colspan")
    rowspan = cell.attrs.get("rowspan")
    if colspan:
        attrs.append(f'colspan="{colspan}"')
    if rowspan:
        attrs.append(f'rowspan="{rowspan}"')
    attrs.append(f'style="{html_escape(style_string(cell.style))}"')
    text = html_escape(cell.formatted_value or "", quote=False)
    return f"<td {' '.join(attrs)}>{text}</td>"
