"""Color value normalization: fill/stroke text to canonical ``#rrggbb``."""

from __future__ import annotations

import math
import re

_HEX_RE = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$")
_RGB_RE = re.compile(r"^rgba?\(([^)]*)\)$")
_CHANNEL_SPLIT_RE = re.compile(r"[\s,/]+")

NAMED_COLORS = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "cyan": "#00ffff",
    "magenta": "#ff00ff",
    "gray": "#808080",
    "grey": "#808080",
    "orange": "#ffa500",
    "purple": "#800080",
    "brown": "#a52a2a",
    "pink": "#ffc0cb",
}

# Paint values that are not a concrete color
NON_COLORS = {"none", "transparent", "currentcolor", "inherit", "initial", "unset"}


def normalize_color(value: str | None) -> str | None:
    """Canonical lowercase ``#rrggbb`` for ``value``, or None if it is not a concrete color."""
    if not value:
        return None
    text = value.strip().lower()
    if not text or text in NON_COLORS or text.startswith(("url(", "var(")):
        return None

    m = _HEX_RE.match(text)
    if m:
        digits = m.group(1)
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits[:3])
        return "#" + digits[:6]

    m = _RGB_RE.match(text)
    if m:
        parts = [p for p in _CHANNEL_SPLIT_RE.split(m.group(1).strip()) if p]
        if len(parts) < 3:
            return None
        try:
            channels = [_channel(p) for p in parts[:3]]
        except ValueError:
            return None
        return rgb_to_hex(tuple(channels))  # type: ignore[arg-type]

    return NAMED_COLORS.get(text)


def _channel(text: str) -> int:
    if text.endswith("%"):
        v = float(text[:-1]) * 255 / 100
    else:
        v = float(text)
    return max(0, min(255, round(v)))


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """``#rrggbb`` → (r, g, b). Expects a canonical value."""
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def color_distance(a: str, b: str) -> float:
    """Euclidean distance in RGB space between two canonical colors."""
    return math.dist(hex_to_rgb(a), hex_to_rgb(b))


def brightness(rgb: tuple[int, int, int]) -> float:
    """Perceived brightness 0-255 (W3C formula)."""
    r, g, b = rgb
    return (r * 299 + g * 587 + b * 114) / 1000


def saturation_spread(rgb: tuple[int, int, int]) -> int:
    """max - min channel value, 0-255."""
    return max(rgb) - min(rgb)
