"""Geometry of basic shape elements as sample points and shapely footprints."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import LineString, MultiPoint, Point, Polygon
from shapely.geometry.base import BaseGeometry

from animsvg.errors import AnimSvgError
from animsvg.svg.document import SvgDocument
from animsvg.svg.path_data import outline_array
from animsvg.utils.geometry import parse_float, parse_number_list

logger = logging.getLogger(__name__)


def _poly_points(doc: SvgDocument, idx: int) -> NDArray[np.float64]:
    try:
        values = parse_number_list(doc.get(idx, "points"))
    except ValueError:
        logger.debug("Unparseable points list on element %d", idx)
        return np.empty((0, 2))
    return np.array(values[: len(values) // 2 * 2], dtype=float).reshape(-1, 2)


def element_points(doc: SvgDocument, idx: int) -> NDArray[np.float64]:
    """Extreme points of a shape element as Nx2 (empty for non-shapes)."""
    tag = doc.tag(idx)

    def g(name: str) -> float:
        return parse_float(doc.get(idx, name))

    if tag == "rect":
        x, y, w, h = g("x"), g("y"), g("width"), g("height")
        return np.array([[x, y], [x + w, y + h]], dtype=float)
    if tag == "circle":
        cx, cy, r = g("cx"), g("cy"), g("r")
        return np.array([[cx - r, cy - r], [cx + r, cy + r]], dtype=float)
    if tag == "ellipse":
        cx, cy, rx, ry = g("cx"), g("cy"), g("rx"), g("ry")
        return np.array([[cx - rx, cy - ry], [cx + rx, cy + ry]], dtype=float)
    if tag == "line":
        return np.array([[g("x1"), g("y1")], [g("x2"), g("y2")]], dtype=float)
    if tag in ("polygon", "polyline"):
        return _poly_points(doc, idx)
    if tag == "path":
        d = doc.get(idx, "d")
        if not d:
            return np.empty((0, 2))
        try:
            return outline_array(d)
        except AnimSvgError as e:
            logger.debug("Skipping unparseable path on element %d: %s", idx, e)
            return np.empty((0, 2))
    return np.empty((0, 2))


def element_footprint(doc: SvgDocument, idx: int) -> BaseGeometry | None:
    """Shapely geometry covering a shape element, or None for non-shapes."""
    tag = doc.tag(idx)
    if tag == "circle":
        r = parse_float(doc.get(idx, "r"))
        return Point(parse_float(doc.get(idx, "cx")), parse_float(doc.get(idx, "cy"))).buffer(max(r, 0.0))

    points = element_points(doc, idx)
    if len(points) == 0:
        return None
    if tag == "rect" or tag == "ellipse":
        (x0, y0), (x1, y1) = points
        return Polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])
    if tag == "line" or tag == "polyline":
        return LineString(points) if len(points) > 1 else Point(points[0])
    if tag == "polygon" and len(points) >= 3:
        poly = Polygon(points)
        return poly if poly.is_valid else poly.buffer(0)
    return MultiPoint(points)


def footprint_extent(geom: BaseGeometry) -> float:
    """Larger side of the geometry's bounding box."""
    if geom.is_empty:
        return 0.0
    xmin, ymin, xmax, ymax = geom.bounds
    return max(xmax - xmin, ymax - ymin)
