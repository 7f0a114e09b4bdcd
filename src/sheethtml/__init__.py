from .api import convert_xlsx_to_html, load_xlsx, worksheet_to_grid
from .errors import MalformedMergeRegion, MissingSheet, SheetHtmlError, UnknownThemeColor, UnsupportedSource
from .model import ConvertOptions, SheetGrid, WorkbookDoc
from .render_html import render_document, render_table

__all__ = [
    "ConvertOptions",
    "SheetGrid",
    "WorkbookDoc",
    "load_xlsx",
    "worksheet_to_grid",
    "convert_xlsx_to_html",
    "render_table",
    "render_document",
    "SheetHtmlError",
    "UnknownThemeColor",
    "MalformedMergeRegion",
    "MissingSheet",
    "UnsupportedSource",
]
