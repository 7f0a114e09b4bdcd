"""Exceptions raised while converting a worksheet.

SheetHtmlError (base)
├── UnknownThemeColor     theme index missing from the palette; aborts the conversion
├── MalformedMergeRegion  merge region without concrete cell addresses; skipped per region
├── MissingSheet          requested sheet is not in the workbook
└── UnsupportedSource     input is not an .xlsx package
"""

from __future__ import annotations

from typing import Any


class SheetHtmlError(Exception):
    """Base class for all conversion errors."""


class UnknownThemeColor(SheetHtmlError):
    def __init__(self, theme: int) -> None:
        self.theme = theme
        super().__init__(f"Theme color with index {theme} is not defined")


class MalformedMergeRegion(SheetHtmlError):
    def __init__(self, region: Any, reason: str) -> None:
        self.region = region
        self.reason = reason
        super().__init__(f"Malformed merge region {region!r}: {reason}")


class MissingSheet(SheetHtmlError):
    def __init__(self, selector: str | int, available: list[str] | None = None) -> None:
        self.selector = selector
        self.available = list(available or [])
        names = ", ".join(self.available) or "(none)"
        super().__init__(f"Sheet {selector!r} not found; available sheets: {names}")


class UnsupportedSource(SheetHtmlError):
    pass
