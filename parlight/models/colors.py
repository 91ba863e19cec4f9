"""Color and mode tables for the ParLight B262, plus the conversions that feed them.

Both tables are read-only for the lifetime of the process. The color table is
the single source of truth for what counts as a valid color name.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Any, Final, List, Mapping, Sequence, Tuple, Union

from parlight.errors import InvalidColor, InvalidMode

RGB = Tuple[int, int, int]
ColorLike = Union[str, Sequence[int]]

COLORS: Final[Mapping[str, RGB]] = MappingProxyType(
    {
        "red": (255, 0, 0),
        "green": (0, 255, 0),
        "blue": (0, 0, 255),
        "white": (255, 255, 255),
        "yellow": (255, 255, 0),
        "cyan": (0, 255, 255),
        "magenta": (255, 0, 255),
        "orange": (255, 127, 0),
        "purple": (127, 0, 255),
        "off": (0, 0, 0),
    }
)

MODES: Final[Mapping[str, int]] = MappingProxyType(
    {
        "manual": 0,
        "hue-select": 35,
        "hue-shift": 85,
        "hue-pulse": 135,
        "hue-transition": 185,
        "sound-control": 235,
    }
)

DEFAULT_CYCLE_COLORS: Final[Tuple[str, ...]] = ("red", "green", "blue", "yellow", "cyan", "magenta")


def clamp(value: Any, low: int = 0, high: int = 255) -> int:
    return max(low, min(high, int(value)))


def list_colors() -> List[str]:
    return list(COLORS)


def list_modes() -> List[str]:
    return list(MODES)


def is_valid_color(name: Any) -> bool:
    if not isinstance(name, str):
        return False
    return name.lower() in COLORS


def normalize_mode(name: str) -> str:
    return "-".join(name.strip().lower().replace("_", " ").replace("-", " ").split())


def mode_code(name: Any) -> int:
    if isinstance(name, str):
        code = MODES.get(normalize_mode(name))
        if code is not None:
            return code
    raise InvalidMode(name, list_modes())


def resolve_color(color: ColorLike) -> RGB:
    """Resolve a color name or an explicit RGB sequence to a byte triple.

    Names are case-insensitive. Explicit triples are clamped to 0..255.
    """
    if isinstance(color, str):
        rgb = COLORS.get(color.lower())
        if rgb is None:
            raise InvalidColor(color, list_colors())
        return rgb
    if isinstance(color, Sequence) and len(color) == 3:
        r, g, b = (clamp(c) for c in color)
        return (r, g, b)
    raise InvalidColor(color, list_colors())


def scale_rgb(rgb: Sequence[int], intensity: Any) -> RGB:
    # floor(component / 255 * intensity), computed in integers
    level = clamp(intensity)
    r, g, b = ((int(c) * level) // 255 for c in rgb)
    return (r, g, b)


def hsv_to_rgb(h: float, s: float, v: float) -> RGB:
    i = math.floor(h * 6)
    f = h * 6 - i
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)

    sector = i % 6
    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return (math.floor(r * 255), math.floor(g * 255), math.floor(b * 255))
