"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import math
import re

import numpy as np
from numpy.typing import NDArray

_NUMBER_SPLIT_RE = re.compile(r"[\s,]+")

# Floor for degenerate extents so log/ratio comparisons stay finite
MIN_EXTENT = 1e-6


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def log_area(width: float, height: float) -> float:
    return math.log(max(width * height, MIN_EXTENT))


def aspect_ratio(width: float, height: float) -> float:
    return width / max(height, MIN_EXTENT)


def parse_float(value: str | None, default: float = 0.0) -> float:
    """Parse an SVG length, tolerating px/pt units. Returns ``default`` when unparseable."""
    if value is None:
        return default
    text = value.strip()
    for unit in ("px", "pt"):
        if text.endswith(unit):
            text = text[: -len(unit)]
    try:
        return float(text)
    except ValueError:
        return default


def parse_number_list(text: str | None) -> list[float]:
    """Split a points/viewBox style list into floats."""
    if not text or not text.strip():
        return []
    return [float(v) for v in _NUMBER_SPLIT_RE.split(text.strip()) if v]


def format_number(value: float, precision: int = 4) -> str:
    """Shortest decimal text for ``value`` at ``precision`` digits ("10", "2.5", "-0.125")."""
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def format_points(points: NDArray[np.float64], precision: int = 4) -> str:
    return " ".join(f"{format_number(x, precision)},{format_number(y, precision)}" for x, y in points)
