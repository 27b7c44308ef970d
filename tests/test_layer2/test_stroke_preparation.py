"""Tests for S2.02 stroke preparation."""

import math

import pytest

import animsvg.engine.layer2.s2_02_stroke_preparation  # noqa: F401  (registers S2.02)

from animsvg.engine.layer2.s2_02_stroke_preparation import outline_length, path_length, prepare_strokes
from animsvg.models.options import StrokeOptions
from animsvg.svg.document import SvgDocument

STROKED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <path id="edge" d="M0 0 L30 40" stroke="#000" stroke-width="2"/>
  <path d="M0 0 L10 0" fill="red"/>
  <g stroke="blue">
    <line x1="0" y1="0" x2="3" y2="4"/>
    <polygon points="0,0 3,0 3,4"/>
    <polyline points="0,0 3,0 3,4"/>
  </g>
  <path d="M0 0 L5 0" stroke="none"/>
  <line x1="1" y1="1" x2="1" y2="1" stroke="red"/>
</svg>'''


def _doc() -> SvgDocument:
    return SvgDocument.parse(STROKED_SVG)


def test_path_length_straight_and_curved():
    assert path_length("M0 0 L30 40") == pytest.approx(50)
    assert path_length("M0 0 L10 0 L10 10 Z") == pytest.approx(10 + 10 + math.sqrt(200))
    # Quarter circle of radius 10
    assert path_length("M10 0 A10 10 0 0 1 0 10") == pytest.approx(5 * math.pi, rel=1e-4)
    assert path_length("M5 5") == 0.0


def test_outline_lengths_by_tag():
    doc = _doc()
    polygon = doc.find_all("polygon")[0]
    polyline = doc.find_all("polyline")[0]
    assert outline_length(doc, polygon) == pytest.approx(12)
    assert outline_length(doc, polyline) == pytest.approx(7)
    assert outline_length(doc, doc.find_all("g")[0]) == 0.0


def test_only_stroked_outlines_are_measured():
    lengths = prepare_strokes(_doc())
    assert [(s.element_id, s.tag) for s in lengths] == [
        ("edge", "path"),
        ("line_0", "line"),
        ("polygon_0", "polygon"),
        ("polyline_0", "polyline"),
    ]
    edge = lengths[0]
    assert (edge.length, edge.stroke_width, edge.stroke_color) == (pytest.approx(50), "2", "#000")
    # Inherited from the group
    assert lengths[1].stroke_color == "blue"
    assert lengths[1].stroke_width == "1"


def test_draw_on_attributes():
    doc = _doc()
    prepare_strokes(doc)
    edge = doc.find_all("path")[0]
    assert doc.get(edge, "data-length") == "50.00"
    assert doc.get(edge, "stroke-dasharray") == "50"
    assert doc.get(edge, "stroke-dashoffset") == "50"
    assert doc.get(edge, "data-draw-length") == "50"
    polygon = doc.find_all("polygon")[0]
    assert doc.get(polygon, "stroke-dasharray") == "12"
    # Unstroked, stroke="none" and zero-length elements stay untouched
    plain, hidden = doc.find_all("path")[1:]
    assert doc.get(plain, "data-length") is None
    assert doc.get(hidden, "stroke-dasharray") is None
    assert doc.get(doc.find_all("line")[1], "data-length") is None


def test_options_select_attributes():
    doc = _doc()
    prepare_strokes(doc, StrokeOptions(setup_draw_on=False, mark_expandable_strokes=True))
    edge = doc.find_all("path")[0]
    assert doc.get(edge, "data-length") == "50.00"
    assert doc.get(edge, "stroke-dasharray") is None
    assert doc.get(edge, "data-expandable-stroke") == "true"

    doc = _doc()
    prepare_strokes(doc, StrokeOptions(add_path_lengths=False))
    edge = doc.find_all("path")[0]
    assert doc.get(edge, "data-length") is None
    assert doc.get(edge, "stroke-dasharray") == "50"


def test_fractional_length_rounds_up():
    doc = SvgDocument.parse(
        '<svg xmlns="http://www.w3.org/2000/svg"><line x1="0" y1="0" x2="1" y2="1" stroke="red"/></svg>'
    )
    (length,) = prepare_strokes(doc)
    line = doc.find_all("line")[0]
    assert length.length == pytest.approx(math.sqrt(2))
    assert doc.get(line, "data-length") == "1.41"
    assert doc.get(line, "stroke-dasharray") == "2"
