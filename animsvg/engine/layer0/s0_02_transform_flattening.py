"""S0.02 — Transform Flattening.

Propagate accumulated ``transform`` matrices from each group to its
descendants and bake them into the coordinates of every positioned element
(shapes, paths, text and its tspans, use, image). Groups only pass theirs on.
Every ``transform`` attribute visited is removed, so a second pass is a no-op.

All updates are computed before any attribute is written: a transform or path
that fails to parse leaves the document untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from svgpathtools import parse_path
from svgpathtools.path import transform as transform_path

from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, stage
from animsvg.errors import PathSyntaxError
from animsvg.models.reports import FlattenSummary
from animsvg.svg.document import SvgDocument
from animsvg.svg.path_data import PathCommand, serialize_commands, split_subpaths, tokenize_path
from animsvg.utils.affine import (
    apply_to_points,
    axis_scales,
    compose,
    identity,
    is_identity,
    is_similarity,
    keeps_axes,
    parse_transform,
)
from animsvg.utils.geometry import format_number, format_points, parse_float, parse_number_list

# Resource containers are drawn in the user space of whatever references them
_SKIP_TAGS = {
    "defs",
    "metadata",
    "clipPath",
    "mask",
    "pattern",
    "symbol",
    "marker",
    "linearGradient",
    "radialGradient",
}

_PRECISION = 4


@dataclass
class _Update:
    idx: int
    set_attrs: dict[str, str] = field(default_factory=dict)
    drop_attrs: list[str] = field(default_factory=list)
    new_tag: str | None = None


def _fmt(value: float) -> str:
    return format_number(value, _PRECISION)


def _point(m: NDArray[np.float64], x: float, y: float) -> tuple[float, float]:
    out = apply_to_points(m, np.array([[x, y]], dtype=float))[0]
    return float(out[0]), float(out[1])


def _bake_subpath(commands: list[PathCommand], m: NDArray[np.float64]) -> str | None:
    text = serialize_commands(commands)
    try:
        path = parse_path(text)
    except (ValueError, IndexError) as e:
        raise PathSyntaxError(f"cannot parse path data {text[:40]!r}: {e}") from e
    if len(path) == 0:
        return None
    return serialize_commands(tokenize_path(transform_path(path, m).d()), _PRECISION)


def bake_path_data(d: str, m: NDArray[np.float64]) -> str:
    """Apply ``m`` to path data via svgpathtools, one subpath at a time.

    Closed subpaths keep their ``Z``. Data with nothing drawable is returned as is.
    """
    parts: list[str] = []
    drawn = False
    for commands, closed in split_subpaths(d):
        baked = _bake_subpath(commands, m)
        if baked is None:
            x, y = _point(m, *commands[0].args)
            baked = f"M{_fmt(x)} {_fmt(y)}"
        else:
            drawn = True
        parts.append(f"{baked} Z" if closed else baked)
    return " ".join(parts) if drawn else d


def _radii(m: NDArray[np.float64], rx: float, ry: float) -> tuple[float, float]:
    # Only meaningful when keeps_axes(m)
    return float(np.hypot(rx * m[0, 0], ry * m[0, 1])), float(np.hypot(rx * m[1, 0], ry * m[1, 1]))


def _ellipse_path(cx: float, cy: float, rx: float, ry: float) -> str:
    return (
        f"M{_fmt(cx - rx)} {_fmt(cy)} "
        f"A{_fmt(rx)} {_fmt(ry)} 0 1 0 {_fmt(cx + rx)} {_fmt(cy)} "
        f"A{_fmt(rx)} {_fmt(ry)} 0 1 0 {_fmt(cx - rx)} {_fmt(cy)} Z"
    )


def _rect_path(x: float, y: float, w: float, h: float, rx: float, ry: float) -> str:
    if rx <= 0 or ry <= 0:
        return f"M{_fmt(x)} {_fmt(y)} H{_fmt(x + w)} V{_fmt(y + h)} H{_fmt(x)} Z"
    arc = f"A{_fmt(rx)} {_fmt(ry)} 0 0 1"
    return (
        f"M{_fmt(x + rx)} {_fmt(y)} H{_fmt(x + w - rx)} {arc} {_fmt(x + w)} {_fmt(y + ry)} "
        f"V{_fmt(y + h - ry)} {arc} {_fmt(x + w - rx)} {_fmt(y + h)} "
        f"H{_fmt(x + rx)} {arc} {_fmt(x)} {_fmt(y + h - ry)} "
        f"V{_fmt(y + ry)} {arc} {_fmt(x + rx)} {_fmt(y)} Z"
    )


def _to_path(upd: _Update, d: str, m: NDArray[np.float64], dropped: tuple[str, ...]) -> None:
    upd.new_tag = "path"
    upd.drop_attrs.extend(dropped)
    upd.set_attrs["d"] = bake_path_data(d, m)


def _corner_radii(doc: SvgDocument, idx: int, w: float, h: float) -> tuple[float, float]:
    rx_attr, ry_attr = doc.get(idx, "rx"), doc.get(idx, "ry")
    if rx_attr is None and ry_attr is None:
        return 0.0, 0.0
    rx = parse_float(rx_attr if rx_attr is not None else ry_attr)
    ry = parse_float(ry_attr if ry_attr is not None else rx_attr)
    return min(rx, w / 2), min(ry, h / 2)


def _bake_rect(doc: SvgDocument, idx: int, m: NDArray[np.float64], upd: _Update) -> None:
    x = parse_float(doc.get(idx, "x"))
    y = parse_float(doc.get(idx, "y"))
    w = parse_float(doc.get(idx, "width"))
    h = parse_float(doc.get(idx, "height"))
    rx, ry = _corner_radii(doc, idx, w, h)
    if not keeps_axes(m):
        _to_path(upd, _rect_path(x, y, w, h, rx, ry), m, ("x", "y", "width", "height", "rx", "ry"))
        return

    corners = apply_to_points(m, np.array([[x, y], [x + w, y], [x + w, y + h], [x, y + h]], dtype=float))
    xmin, ymin = corners.min(axis=0)
    xmax, ymax = corners.max(axis=0)
    upd.set_attrs.update(
        x=_fmt(xmin),
        y=_fmt(ymin),
        width=_fmt(xmax - xmin),
        height=_fmt(ymax - ymin),
    )
    if rx or ry:
        hx, hy = _radii(m, rx, ry)
        upd.set_attrs.update(rx=_fmt(hx), ry=_fmt(hy))


def _bake_circle(doc: SvgDocument, idx: int, m: NDArray[np.float64], upd: _Update) -> None:
    cx0, cy0 = parse_float(doc.get(idx, "cx")), parse_float(doc.get(idx, "cy"))
    r = parse_float(doc.get(idx, "r"))
    if is_similarity(m):
        cx, cy = _point(m, cx0, cy0)
        upd.set_attrs.update(cx=_fmt(cx), cy=_fmt(cy), r=_fmt(r * axis_scales(m)[0]))
    elif keeps_axes(m):
        cx, cy = _point(m, cx0, cy0)
        hx, hy = _radii(m, r, r)
        upd.new_tag = "ellipse"
        upd.set_attrs.update(cx=_fmt(cx), cy=_fmt(cy), rx=_fmt(hx), ry=_fmt(hy))
        upd.drop_attrs.append("r")
    elif r > 0:
        _to_path(upd, _ellipse_path(cx0, cy0, r, r), m, ("cx", "cy", "r"))
    else:
        cx, cy = _point(m, cx0, cy0)
        upd.set_attrs.update(cx=_fmt(cx), cy=_fmt(cy))


def _bake_ellipse(doc: SvgDocument, idx: int, m: NDArray[np.float64], upd: _Update) -> None:
    cx0, cy0 = parse_float(doc.get(idx, "cx")), parse_float(doc.get(idx, "cy"))
    rx, ry = parse_float(doc.get(idx, "rx")), parse_float(doc.get(idx, "ry"))
    if not keeps_axes(m) and rx > 0 and ry > 0:
        _to_path(upd, _ellipse_path(cx0, cy0, rx, ry), m, ("cx", "cy", "rx", "ry"))
        return
    cx, cy = _point(m, cx0, cy0)
    hx, hy = _radii(m, rx, ry)
    upd.set_attrs.update(cx=_fmt(cx), cy=_fmt(cy), rx=_fmt(hx), ry=_fmt(hy))


def _bake_line(doc: SvgDocument, idx: int, m: NDArray[np.float64], upd: _Update) -> None:
    x1, y1 = _point(m, parse_float(doc.get(idx, "x1")), parse_float(doc.get(idx, "y1")))
    x2, y2 = _point(m, parse_float(doc.get(idx, "x2")), parse_float(doc.get(idx, "y2")))
    upd.set_attrs.update(x1=_fmt(x1), y1=_fmt(y1), x2=_fmt(x2), y2=_fmt(y2))


def _bake_poly(doc: SvgDocument, idx: int, m: NDArray[np.float64], upd: _Update) -> None:
    try:
        values = parse_number_list(doc.get(idx, "points"))
    except ValueError as e:
        raise PathSyntaxError(f"bad points list on <{doc.tag(idx)}>: {e}") from e
    pairs = np.array(values[: len(values) // 2 * 2], dtype=float).reshape(-1, 2)
    upd.set_attrs["points"] = format_points(apply_to_points(m, pairs), _PRECISION)


def _bake_positioned(doc: SvgDocument, idx: int, m: NDArray[np.float64], upd: _Update) -> None:
    x, y = _point(m, parse_float(doc.get(idx, "x")), parse_float(doc.get(idx, "y")))
    if doc.tag(idx) == "tspan":
        # A tspan without its own position follows the text flow
        for name, value in (("x", x), ("y", y)):
            if doc.get(idx, name) is not None:
                upd.set_attrs[name] = _fmt(value)
        return
    upd.set_attrs.update(x=_fmt(x), y=_fmt(y))
    if doc.tag(idx) in ("use", "image"):
        sx, sy = axis_scales(m)
        for name, scale in (("width", sx), ("height", sy)):
            value = doc.get(idx, name)
            if value is not None:
                upd.set_attrs[name] = _fmt(parse_float(value) * scale)


def _bake_path(doc: SvgDocument, idx: int, m: NDArray[np.float64], upd: _Update) -> None:
    d = doc.get(idx, "d")
    if d:
        upd.set_attrs["d"] = bake_path_data(d, m)


_BAKERS = {
    "path": _bake_path,
    "rect": _bake_rect,
    "circle": _bake_circle,
    "ellipse": _bake_ellipse,
    "line": _bake_line,
    "polygon": _bake_poly,
    "polyline": _bake_poly,
    "text": _bake_positioned,
    "tspan": _bake_positioned,
    "use": _bake_positioned,
    "image": _bake_positioned,
}


def flatten_transforms(doc: SvgDocument) -> FlattenSummary:
    """Bake every transform into coordinates. Mutates ``doc``."""
    matrices: dict[int, NDArray[np.float64]] = {}
    updates: list[_Update] = []

    for idx in doc.iter_preorder(skip=_SKIP_TAGS):
        parent = doc.parent(idx)
        inherited = matrices.get(parent, identity()) if parent is not None else identity()
        own = doc.get(idx, "transform")
        m = compose(inherited, parse_transform(own)) if own is not None else inherited
        matrices[idx] = m

        upd = _Update(idx)
        if own is not None:
            upd.drop_attrs.append("transform")

        baker = _BAKERS.get(doc.tag(idx))
        if baker and not is_identity(m):
            baker(doc, idx, m, upd)

        if upd.set_attrs or upd.drop_attrs:
            updates.append(upd)

    summary = FlattenSummary()
    for upd in updates:
        if "transform" in upd.drop_attrs:
            summary.transforms_removed += 1
        if upd.set_attrs:
            summary.elements_baked += 1
        if upd.new_tag:
            doc.rename(upd.idx, upd.new_tag)
        for name in upd.drop_attrs:
            doc.remove_attribute(upd.idx, name)
        for name, value in upd.set_attrs.items():
            doc.set(upd.idx, name, value)
    return summary


@stage(
    id="S0.02",
    layer=Layer.STRUCTURE,
    option="flatten_transforms",
    description="Bake nested transforms into absolute coordinates",
)
def transform_flattening(ctx: ProcessingContext) -> None:
    ctx.flatten_summary = flatten_transforms(ctx.document)
    ctx.log.info(
        "Flattened transforms: %d removed, %d elements baked",
        ctx.flatten_summary.transforms_removed,
        ctx.flatten_summary.elements_baked,
    )
