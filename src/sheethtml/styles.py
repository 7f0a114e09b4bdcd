from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

from .colors import resolve_color
from .model import Border, CellFormat, Fill, Font

BORDER_SIDES = ("top", "bottom", "left", "right")
BASE_STYLE = {"border-collapse": "collapse"}


@dataclass(frozen=True, slots=True)
class BorderSideStyle:
    stroke: Literal["solid", "dashed", "dotted", "double"] = "solid"
    width: str = "1px"
    dash: Literal["dot", "dotdot"] | None = None

    def css(self) -> str:
        return f"{self.width} {self.stroke}"


DEFAULT_BORDER_STYLE = BorderSideStyle()

BORDER_STYLES = MappingProxyType(
    {
        "dashDot": BorderSideStyle("dashed", dash="dot"),
        "dashDotDot": BorderSideStyle("dashed", dash="dotdot"),
        "dashed": BorderSideStyle("dashed"),
        "dotted": BorderSideStyle("dotted"),
        "double": BorderSideStyle("double"),
        "hair": BorderSideStyle("solid", "0.5px"),
        "medium": BorderSideStyle("solid", "2px"),
        "mediumDashDot": BorderSideStyle("dashed", "2px", "dot"),
        "mediumDashDotDot": BorderSideStyle("dashed", "2px", "dotdot"),
        "mediumDashed": BorderSideStyle("dashed", "2px"),
        "slantDashDot": BorderSideStyle("dashed", dash="dot"),
        "thick": BorderSideStyle("solid", "3px"),
        "thin": BorderSideStyle("solid", "1px"),
    }
)


def border_side_style(name: str) -> BorderSideStyle:
    return BORDER_STYLES.get(name, DEFAULT_BORDER_STYLE)


def extract_style(cell_format: CellFormat | None) -> dict[str, str]:
    """Map one cell's formatting to a CSS property mapping.

    The result always holds ``border-collapse: collapse``. Every other
    property appears only when the workbook declares it. Only an unknown
    theme index raises.
    """
    styles = dict(BASE_STYLE)
    if cell_format is None:
        return styles

    if cell_format.border is not None:
        styles.update(_border_css(cell_format.border))

    alignment = cell_format.alignment
    if alignment is not None:
        if alignment.horizontal:
            styles["text-align"] = alignment.horizontal
        if alignment.vertical:
            styles["vertical-align"] = alignment.vertical

    if cell_format.fill is not None:
        background = _fill_color(cell_format.fill)
        if background:
            styles["background-color"] = background

    if cell_format.font is not None:
        styles.update(_font_css(cell_format.font))

    return styles


def has_visible_style(styles: dict[str, str]) -> bool:
    return any(key not in BASE_STYLE for key in styles)


def _border_css(border: Border) -> dict[str, str]:
    parts: dict[str, str] = {}
    for side in BORDER_SIDES:
        edge = getattr(border, side)
        if edge is None or not edge.style:
            continue
        parts[f"border-{side}"] = border_side_style(edge.style).css()
        if edge.color is not None:
            parts[f"border-{side}-color"] = resolve_color(edge.color, use_theme=False) or "black"
    return parts


def _fill_color(fill: Fill) -> str | None:
    fg = fill.fg_color
    if fg is None or not (fg.rgb or fg.theme is not None):
        return None
    return resolve_color(fg)


def _font_css(font: Font) -> dict[str, str]:
    parts: dict[str, str] = {}
    if font.size:
        parts["font-size"] = f"{css_number(font.size)}px"
    color = resolve_color(font.color, use_theme=False)
    if color:
        parts["color"] = color
    if font.bold:
        parts["font-weight"] = "bold"
    if font.italic:
        parts["font-style"] = "italic"
    if font.underline:
        parts["text-decoration"] = "underline"
    if font.name:
        parts["font-family"] = font.name
    return parts


def css_number(value: float) -> str:
    """Format a number the way a browser script would: ``11`` not ``11.0``."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
