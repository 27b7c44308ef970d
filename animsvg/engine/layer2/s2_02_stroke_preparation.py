"""S2.02 — Stroke Preparation.

Measure every stroked outline (path, line, polyline, polygon, circle) and set
it up for a draw-on animation: ``stroke-dasharray`` and ``stroke-dashoffset``
both equal the rounded-up length, so animating the offset to 0 draws the
stroke in. Path lengths come from svgpathtools arc-length integration.

An element counts as stroked when its own or inherited ``stroke`` is set and
is not ``none`` or ``transparent``. Zero-length outlines are skipped.
"""

from __future__ import annotations

import math

import numpy as np
from svgpathtools import parse_path

from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, stage
from animsvg.errors import PathSyntaxError
from animsvg.models.options import StrokeOptions
from animsvg.models.paths import StrokeLength
from animsvg.svg.document import NON_VISUAL_TAGS, SvgDocument
from animsvg.utils.geometry import parse_float, parse_number_list

_NO_STROKE = {"none", "transparent"}


def path_length(d: str) -> float:
    try:
        path = parse_path(d)
    except (ValueError, IndexError) as e:
        raise PathSyntaxError(f"cannot parse path data {d[:40]!r}: {e}") from e
    if len(path) == 0:
        return 0.0
    return float(path.length())


def _polyline_length(doc: SvgDocument, idx: int, closed: bool) -> float:
    try:
        values = parse_number_list(doc.get(idx, "points"))
    except ValueError as e:
        raise PathSyntaxError(f"bad points list on <{doc.tag(idx)}>: {e}") from e
    pts = np.array(values[: len(values) // 2 * 2], dtype=float).reshape(-1, 2)
    if len(pts) < 2:
        return 0.0
    if closed:
        pts = np.vstack([pts, pts[:1]])
    return float(np.hypot(*np.diff(pts, axis=0).T).sum())


def outline_length(doc: SvgDocument, idx: int) -> float:
    """Length of the outline drawn by ``idx``; 0 for tags without one."""
    tag = doc.tag(idx)
    if tag == "path":
        return path_length(doc.get(idx, "d") or "")
    if tag == "line":
        return math.hypot(
            parse_float(doc.get(idx, "x2")) - parse_float(doc.get(idx, "x1")),
            parse_float(doc.get(idx, "y2")) - parse_float(doc.get(idx, "y1")),
        )
    if tag in ("polyline", "polygon"):
        return _polyline_length(doc, idx, closed=tag == "polygon")
    if tag == "circle":
        return 2 * math.pi * max(parse_float(doc.get(idx, "r")), 0.0)
    return 0.0


def prepare_strokes(doc: SvgDocument, options: StrokeOptions | None = None) -> list[StrokeLength]:
    """Measure stroked outlines and write the draw-on attributes. Mutates ``doc``."""
    options = options or StrokeOptions()
    lengths: list[StrokeLength] = []
    seen: dict[str, int] = {}

    for idx in doc.iter_preorder(skip=NON_VISUAL_TAGS):
        tag = doc.tag(idx)
        if tag not in ("path", "line", "polyline", "polygon", "circle"):
            continue
        # Fallback ids count every element of the tag, stroked or not
        position = seen.get(tag, 0)
        seen[tag] = position + 1

        stroke = doc.inherited(idx, "stroke")
        if stroke is None or stroke.strip().lower() in _NO_STROKE:
            continue
        length = outline_length(doc, idx)
        if length <= 0:
            continue

        lengths.append(
            StrokeLength(
                element_id=doc.get(idx, "id") or f"{tag}_{position}",
                tag=tag,
                length=length,
                stroke_width=doc.inherited(idx, "stroke-width") or "1",
                stroke_color=stroke,
            )
        )
        if options.add_path_lengths:
            doc.set(idx, "data-length", f"{length:.2f}")
        if options.setup_draw_on:
            rounded = str(math.ceil(length))
            doc.set(idx, "stroke-dasharray", rounded)
            doc.set(idx, "stroke-dashoffset", rounded)
            doc.set(idx, "data-draw-length", rounded)
        if options.mark_expandable_strokes:
            doc.set(idx, "data-expandable-stroke", "true")

    return lengths


@stage(
    id="S2.02",
    layer=Layer.ANIMATION,
    option="prepare_strokes",
    description="Measure stroked outlines and set up draw-on dashes",
)
def stroke_preparation(ctx: ProcessingContext) -> None:
    ctx.stroke_lengths = prepare_strokes(ctx.document, ctx.options.strokes)
    ctx.log.info("Prepared %d stroked outlines for draw-on", len(ctx.stroke_lengths))
