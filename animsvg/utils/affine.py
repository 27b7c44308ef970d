"""2D affine matrices as 3×3 homogeneous numpy arrays. No engine imports.

Only the ``translate``, ``scale`` and ``rotate`` transform functions are
understood; ``matrix`` and ``skewX``/``skewY`` raise ``TransformSyntaxError``.
"""

from __future__ import annotations

import math
import re

import numpy as np
from numpy.typing import NDArray

from animsvg.errors import TransformSyntaxError

_FUNCTION_RE = re.compile(r"\s*([A-Za-z]+)\s*\(([^)]*)\)\s*,?")
_ARG_SPLIT_RE = re.compile(r"[\s,]+")

# Entries closer to zero than this are snapped (cos 90° → 0)
_SNAP_EPS = 1e-12


def identity() -> NDArray[np.float64]:
    return np.identity(3)


def translation(tx: float, ty: float = 0.0) -> NDArray[np.float64]:
    m = np.identity(3)
    m[0, 2] = tx
    m[1, 2] = ty
    return m


def scaling(sx: float, sy: float | None = None) -> NDArray[np.float64]:
    m = np.identity(3)
    m[0, 0] = sx
    m[1, 1] = sx if sy is None else sy
    return m


def rotation(degrees: float, cx: float = 0.0, cy: float = 0.0) -> NDArray[np.float64]:
    a = math.radians(degrees)
    m = np.array([
        [math.cos(a), -math.sin(a), 0.0],
        [math.sin(a), math.cos(a), 0.0],
        [0.0, 0.0, 1.0],
    ])
    if cx or cy:
        m = translation(cx, cy) @ m @ translation(-cx, -cy)
    return snap(m)


def snap(m: NDArray[np.float64]) -> NDArray[np.float64]:
    out = m.copy()
    out[np.abs(out) < _SNAP_EPS] = 0.0
    return out


def is_identity(m: NDArray[np.float64]) -> bool:
    return bool(np.allclose(m, np.identity(3), atol=1e-12))


def compose(parent: NDArray[np.float64], own: NDArray[np.float64]) -> NDArray[np.float64]:
    """parent ⊗ own: ``own`` is applied first, then ``parent``."""
    return snap(parent @ own)


def parse_transform(text: str | None) -> NDArray[np.float64]:
    """Parse a ``transform`` attribute into a single matrix (left-to-right composition)."""
    m = identity()
    if not text or not text.strip():
        return m

    pos = 0
    text = text.strip()
    while pos < len(text):
        match = _FUNCTION_RE.match(text, pos)
        if not match:
            raise TransformSyntaxError(f"cannot parse transform {text!r} at offset {pos}")
        name, raw_args = match.group(1), match.group(2).strip()
        try:
            args = [float(a) for a in _ARG_SPLIT_RE.split(raw_args) if a] if raw_args else []
        except ValueError as e:
            raise TransformSyntaxError(f"bad arguments in {name}({raw_args})") from e
        m = m @ _function_matrix(name, args)
        pos = match.end()
    return snap(m)


def _function_matrix(name: str, args: list[float]) -> NDArray[np.float64]:
    if name == "translate" and len(args) in (1, 2):
        return translation(*args)
    if name == "scale" and len(args) in (1, 2):
        return scaling(*args)
    if name == "rotate" and len(args) in (1, 3):
        return rotation(*args)
    raise TransformSyntaxError(f"unsupported transform function {name}({', '.join(map(str, args))})")


def apply_to_points(m: NDArray[np.float64], points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Apply ``m`` to an Nx2 array of points."""
    if len(points) == 0:
        return points
    homogeneous = np.hstack([points, np.ones((len(points), 1))])
    return (homogeneous @ m.T)[:, :2]


def axis_scales(m: NDArray[np.float64]) -> tuple[float, float]:
    """Length of the transformed unit x and y vectors."""
    return float(np.hypot(m[0, 0], m[1, 0])), float(np.hypot(m[0, 1], m[1, 1]))


def keeps_axes(m: NDArray[np.float64]) -> bool:
    """True when axis-aligned boxes stay axis-aligned (scale, translate, quarter turns)."""
    return bool(
        (np.isclose(m[0, 1], 0.0) and np.isclose(m[1, 0], 0.0))
        or (np.isclose(m[0, 0], 0.0) and np.isclose(m[1, 1], 0.0))
    )


def is_similarity(m: NDArray[np.float64]) -> bool:
    """True when circles map to circles: orthogonal columns of equal length."""
    sx, sy = axis_scales(m)
    dot = m[0, 0] * m[0, 1] + m[1, 0] * m[1, 1]
    return bool(np.isclose(sx, sy) and np.isclose(dot, 0.0))
