from __future__ import annotations

import math
from types import MappingProxyType

from .errors import UnknownThemeColor
from .model import ColorRef

THEME_PALETTE = MappingProxyType(
    {
        0: "000000",  # black
        1: "FFFFFF",  # white
        2: "FF0000",  # red
        3: "00FF00",  # green
        4: "0000FF",  # blue
        5: "FF00FF",  # magenta
        6: "00FFFF",  # cyan
        7: "FFFF00",  # yellow
        8: "800000",  # dark red
        9: "008000",  # dark green
        10: "000080",  # dark blue
        11: "800080",  # purple
        12: "008080",  # teal
    }
)


def resolve_color(ref: ColorRef | None, *, use_theme: bool = True) -> str | None:
    """Resolve a declared color to ``#rrggbb``.

    Returns ``None`` when nothing usable is declared; callers treat that as
    "no color", not black. With ``use_theme=False`` only explicit colors count.
    """
    if ref is None:
        return None
    if ref.rgb:
        return f"#{ref.rgb[-6:]}"
    if ref.theme is not None and use_theme:
        return f"#{theme_rgb(ref.theme, ref.tint)}"
    return None


def theme_rgb(theme: int, tint: float = 0.0) -> str:
    base = THEME_PALETTE.get(theme)
    if base is None:
        raise UnknownThemeColor(theme)
    return apply_tint(base, tint)


def apply_tint(rgb: str, tint: float) -> str:
    channels = (int(rgb[0:2], 16), int(rgb[2:4], 16), int(rgb[4:6], 16))
    return "".join(f"{_tint_channel(value, tint):02x}" for value in channels)


def _tint_channel(value: int, tint: float) -> int:
    if tint < 0:
        shifted = value * (1.0 + tint)
    else:
        shifted = value + (255 - value) * tint
    # half-up, not banker's rounding
    return min(255, max(0, math.floor(shifted + 0.5)))
