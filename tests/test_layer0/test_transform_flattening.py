"""Tests for S0.02 transform flattening."""

import pytest

import animsvg.engine.layer0.s0_02_transform_flattening  # noqa: F401  (registers S0.02)

from animsvg.engine.layer0.s0_02_transform_flattening import bake_path_data, flatten_transforms
from animsvg.errors import TransformSyntaxError
from animsvg.svg.document import SvgDocument
from animsvg.svg.path_data import parse_path_points
from animsvg.utils.affine import parse_transform
from tests.conftest import NESTED_TRANSFORM_SVG


def _flatten(svg: str) -> SvgDocument:
    doc = SvgDocument.parse(svg)
    flatten_transforms(doc)
    return doc


def test_nested_groups_bake_into_rect():
    doc = _flatten(NESTED_TRANSFORM_SVG)
    rect = doc.find_all("rect")[0]
    assert doc.get(rect, "x") == "20"
    assert doc.get(rect, "y") == "30"
    assert doc.get(rect, "width") == "20"
    assert doc.get(rect, "height") == "20"


def test_path_points_are_transformed():
    doc = _flatten(NESTED_TRANSFORM_SVG)
    path = doc.find_all("path")[0]
    points = parse_path_points(doc.get(path, "d"))
    coords = [(round(p.x, 6), round(p.y, 6)) for p in points[:3]]
    assert coords == [(10, 20), (30, 20), (30, 40)]


def test_non_uniform_scale_turns_circle_into_ellipse():
    doc = _flatten(NESTED_TRANSFORM_SVG)
    assert doc.find_all("circle") == []
    ellipse = doc.find_all("ellipse")[0]
    assert doc.get(ellipse, "cx") == "10"
    assert doc.get(ellipse, "cy") == "20"
    assert doc.get(ellipse, "rx") == "10"
    assert doc.get(ellipse, "ry") == "15"
    assert doc.get(ellipse, "r") is None


def test_uniform_scale_keeps_circle():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg"><circle cx="1" cy="2" r="3" transform="scale(2)"/></svg>'
    )
    circle = doc.find_all("circle")[0]
    assert (doc.get(circle, "cx"), doc.get(circle, "cy"), doc.get(circle, "r")) == ("2", "4", "6")


def test_rotation_bakes_line_endpoints():
    doc = _flatten(NESTED_TRANSFORM_SVG)
    line = doc.find_all("line")[0]
    assert (doc.get(line, "x1"), doc.get(line, "y1")) == ("0", "0")
    assert (doc.get(line, "x2"), doc.get(line, "y2")) == ("0", "10")


def test_polygon_points_and_text_position():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg"><g transform="translate(5 5)">'
        '<polygon points="0,0 10,0 10,10"/><text x="1" y="2">t</text></g></svg>'
    )
    assert doc.get(doc.find_all("polygon")[0], "points") == "5,5 15,5 15,15"
    text = doc.find_all("text")[0]
    assert (doc.get(text, "x"), doc.get(text, "y")) == ("6", "7")


def test_all_transform_attributes_removed():
    doc = _flatten(NESTED_TRANSFORM_SVG)
    assert all(doc.get(i, "transform") is None for i in doc.iter_preorder())


def test_summary_counts():
    doc = SvgDocument.parse(NESTED_TRANSFORM_SVG)
    summary = flatten_transforms(doc)
    assert summary.transforms_removed == 4
    assert summary.elements_baked == 4


def test_flattening_is_idempotent():
    once = _flatten(NESTED_TRANSFORM_SVG).serialize()
    twice = _flatten(once).serialize()
    assert twice == once


def test_defs_are_not_touched():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg"><defs><g id="tpl" transform="scale(2)">'
        '<rect width="1" height="1"/></g></defs><rect width="1" height="1" transform="translate(1 1)"/></svg>'
    )
    doc = _flatten(svg)
    tpl = [i for i in doc.iter_preorder() if doc.get(i, "id") == "tpl"][0]
    assert doc.get(tpl, "transform") == "scale(2)"
    assert doc.get(doc.children(tpl)[0], "width") == "1"


def test_unsupported_transform_leaves_document_untouched():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg"><rect width="1" height="1" transform="translate(1 1)"/>'
        '<rect width="1" height="1" transform="skewX(10)"/></svg>'
    )
    doc = SvgDocument.parse(svg)
    before = doc.serialize()
    with pytest.raises(TransformSyntaxError):
        flatten_transforms(doc)
    assert doc.serialize() == before


def test_bake_path_data_keeps_bare_moveto():
    assert bake_path_data("M1 1", parse_transform("translate(5)")) == "M1 1"


def test_closed_subpaths_keep_their_close_commands():
    doc = _flatten(NESTED_TRANSFORM_SVG)
    assert doc.get(doc.find_all("path")[0], "d") == "M10 20 L30 20 L30 40 Z"

    baked = bake_path_data("M0 0 L10 0 L10 10 Z M20 20 l5 0 l0 5 z", parse_transform("translate(1 1)"))
    assert baked == "M1 1 L11 1 L11 11 Z M21 21 L26 21 L26 26 Z"


def test_drawing_after_close_restarts_at_subpath_start():
    baked = bake_path_data("M0 0 L10 0 Z L0 10", parse_transform("translate(5 0)"))
    assert baked == "M5 0 L15 0 Z M5 0 L5 10"


def test_rotated_rect_becomes_path():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<rect x="0" y="0" width="10" height="10" transform="rotate(45)"/></svg>'
    )
    assert doc.find_all("rect") == []
    path = doc.find_all("path")[0]
    assert doc.get(path, "width") is None
    points = parse_path_points(doc.get(path, "d"))
    coords = [(round(p.x, 4), round(p.y, 4)) for p in points[:4]]
    assert coords == [(0, 0), (7.0711, 7.0711), (0, 14.1421), (-7.0711, 7.0711)]
    assert doc.get(path, "d").endswith("Z")


def test_quarter_turn_keeps_rect():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<rect x="0" y="0" width="10" height="20" transform="rotate(90)"/></svg>'
    )
    rect = doc.find_all("rect")[0]
    assert [doc.get(rect, a) for a in ("x", "y", "width", "height")] == ["-20", "0", "20", "10"]


def test_quarter_turn_swaps_ellipse_radii():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<ellipse cx="0" cy="0" rx="10" ry="2" transform="rotate(90)"/></svg>'
    )
    ellipse = doc.find_all("ellipse")[0]
    assert (doc.get(ellipse, "rx"), doc.get(ellipse, "ry")) == ("2", "10")


def test_rotated_ellipse_becomes_arc_path():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<ellipse cx="0" cy="0" rx="10" ry="2" transform="rotate(30)"/></svg>'
    )
    assert doc.find_all("ellipse") == []
    d = doc.get(doc.find_all("path")[0], "d")
    assert d.count("A") == 2
    assert doc.get(doc.find_all("path")[0], "rx") is None


def test_rotated_circle_stays_circle():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<circle cx="10" cy="0" r="4" transform="rotate(45)"/></svg>'
    )
    circle = doc.find_all("circle")[0]
    assert (doc.get(circle, "cx"), doc.get(circle, "cy"), doc.get(circle, "r")) == ("7.0711", "7.0711", "4")


def test_text_with_tspans_is_baked():
    doc = _flatten(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<text transform="translate(100 0)" x="5">a<tspan x="1">b</tspan><tspan>c</tspan></text></svg>'
    )
    text = doc.find_all("text")[0]
    first, second = doc.find_all("tspan")
    assert doc.get(text, "x") == "105"
    assert doc.get(first, "x") == "101"
    assert doc.get(first, "y") is None
    assert doc.get(second, "x") is None
    assert doc.get(text, "transform") is None
