from __future__ import annotations

import logging
from pathlib import Path

from .grid import assemble_grid
from .model import ConvertOptions, SheetDoc, SheetGrid, WorkbookDoc
from .parser.ooxml import OOXMLWorkbookParser
from .render_html import render_document

logger = logging.getLogger(__name__)


def load_xlsx(source: bytes | str | Path, *, options: ConvertOptions | None = None) -> WorkbookDoc:
    opts = options or ConvertOptions()
    parser = OOXMLWorkbookParser(source, opts)
    return parser.parse()


def worksheet_to_grid(sheet: SheetDoc, *, options: ConvertOptions | None = None) -> SheetGrid:
    return assemble_grid(sheet, options)


def convert_xlsx_to_html(
    source: bytes | str | Path,
    sheet: str | int | None = None,
    *,
    options: ConvertOptions | None = None,
) -> str:
    """Render one worksheet of an .xlsx file as a standalone HTML document.

    ``sheet`` is a sheet name or a 1-based index; the first sheet is used when
    omitted. Raises ``MissingSheet`` when it does not exist.
    """
    opts = options or ConvertOptions()
    workbook = load_xlsx(source, options=opts)
    worksheet = workbook.get_sheet(sheet)
    grid = worksheet_to_grid(worksheet, options=opts)
    logger.debug("Rendering sheet %r of %s", worksheet.name, workbook.source_name)
    return render_document(grid, title=opts.document_title)
