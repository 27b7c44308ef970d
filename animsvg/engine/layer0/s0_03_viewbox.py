"""S0.03 — ViewBox Normalization.

Make the root scale responsively: ensure a ``viewBox`` (from width/height, or
from the content bounds plus padding), drop the fixed width/height and pin
``preserveAspectRatio``.
"""

from __future__ import annotations

import numpy as np

from animsvg.engine.config import EngineConfig
from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, stage
from animsvg.models.reports import ViewBoxInfo
from animsvg.svg.document import NON_VISUAL_TAGS, SHAPE_TAGS, SvgDocument
from animsvg.svg.shapes import element_points
from animsvg.utils.geometry import bbox, format_number, parse_float, parse_number_list


def read_view_box(doc: SvgDocument) -> ViewBoxInfo | None:
    """The root's viewBox, or None when absent or malformed."""
    text = doc.get(doc.root, "viewBox")
    try:
        values = parse_number_list(text)
    except ValueError:
        return None
    if len(values) != 4 or values[2] <= 0 or values[3] <= 0:
        return None
    x, y, w, h = values
    return ViewBoxInfo(x=x, y=y, width=w, height=h, aspect_ratio=w / h, is_optimized=True)


def content_view_box(doc: SvgDocument, config: EngineConfig | None = None) -> ViewBoxInfo | None:
    """Bounds of every shape element with padding, or None for an empty drawing."""
    config = config or EngineConfig()
    chunks = [
        element_points(doc, idx)
        for idx in doc.iter_preorder(skip=NON_VISUAL_TAGS)
        if doc.tag(idx) in SHAPE_TAGS
    ]
    chunks = [c for c in chunks if len(c)]
    if not chunks:
        return None
    xmin, ymin, xmax, ymax = bbox(np.vstack(chunks))
    padding = max(
        (xmax - xmin) * config.viewbox_padding_fraction,
        (ymax - ymin) * config.viewbox_padding_fraction,
        config.viewbox_min_padding,
    )
    width = (xmax - xmin) + 2 * padding
    height = (ymax - ymin) + 2 * padding
    return ViewBoxInfo(
        x=round(xmin - padding, 2),
        y=round(ymin - padding, 2),
        width=round(width, 2),
        height=round(height, 2),
        aspect_ratio=width / height,
        is_optimized=True,
    )


def optimize_view_box(doc: SvgDocument, config: EngineConfig | None = None) -> ViewBoxInfo:
    """Normalize the root element for responsive scaling. Mutates ``doc``."""
    root = doc.root
    info = read_view_box(doc)
    if info is None:
        width = parse_float(doc.get(root, "width"))
        height = parse_float(doc.get(root, "height"))
        if width > 0 and height > 0:
            info = ViewBoxInfo(width=width, height=height, aspect_ratio=width / height, is_optimized=True)
        else:
            info = content_view_box(doc, config)
        if info is not None:
            doc.set(
                root,
                "viewBox",
                " ".join(format_number(v) for v in (info.x, info.y, info.width, info.height)),
            )

    if info is None:
        # Nothing to size against; keep whatever dimensions are there
        return ViewBoxInfo()

    doc.remove_attribute(root, "width")
    doc.remove_attribute(root, "height")
    if doc.get(root, "preserveAspectRatio") is None:
        doc.set(root, "preserveAspectRatio", "xMidYMid meet")
    return info


@stage(
    id="S0.03",
    layer=Layer.STRUCTURE,
    option="optimize_view_box",
    description="Ensure a responsive viewBox on the root element",
)
def viewbox_normalization(ctx: ProcessingContext) -> None:
    ctx.view_box = optimize_view_box(ctx.document, ctx.config)
    ctx.log.info(
        "ViewBox %.2f %.2f %.2f %.2f (optimized=%s)",
        ctx.view_box.x,
        ctx.view_box.y,
        ctx.view_box.width,
        ctx.view_box.height,
        ctx.view_box.is_optimized,
    )
