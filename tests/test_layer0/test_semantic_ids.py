"""Tests for S0.01 semantic id assignment."""

import re

import animsvg.engine.layer0.s0_01_semantic_ids  # noqa: F401  (registers S0.01)

from animsvg.engine.layer0.s0_01_semantic_ids import (
    assign_semantic_ids,
    infer_basename,
    is_auto_generated,
    sanitize_token,
)
from animsvg.engine.registry import Layer, get_registry
from animsvg.svg.document import NON_VISUAL_TAGS, SvgDocument
from tests.conftest import NAMED_SVG, RED_SQUARE_SVG, SHAPES_SVG


def _ids(svg: str, prefix: str = "anim_") -> list[str]:
    doc = SvgDocument.parse(svg)
    assign_semantic_ids(doc, prefix)
    return [doc.get(i, "id") for i in doc.iter_preorder(skip=NON_VISUAL_TAGS)[1:]]


def test_registered_in_structure_layer():
    ids = {s.id for s in get_registry().stages(Layer.STRUCTURE)}
    assert "S0.01" in ids


def test_red_square_scenario():
    assert _ids(RED_SQUARE_SVG) == ["anim_red_square"]
    # Deterministic across runs
    assert _ids(RED_SQUARE_SVG) == _ids(RED_SQUARE_SVG)


def test_shapes_inference():
    assert _ids(SHAPES_SVG) == [
        "anim_blue_wheel",
        "anim_circle",
        "anim_orange_bar",
        "anim_rect",
        "anim_line",
        "anim_curve",
        "anim_green_group",
        "anim_circle_1",
    ]


def test_every_eligible_element_gets_unique_id():
    doc = SvgDocument.parse(SHAPES_SVG)
    assignment = assign_semantic_ids(doc, "anim_")
    eligible = doc.iter_preorder(skip=NON_VISUAL_TAGS)[1:]
    ids = [doc.get(i, "id") for i in eligible]
    assert len(ids) == len(eligible) == len(assignment.id_map)
    assert len(set(ids)) == len(ids)
    pattern = re.compile(r"^anim_[a-z0-9_]+?(_\d+)?$")
    assert all(pattern.match(i) for i in ids)


def test_structural_elements_are_left_alone():
    doc = SvgDocument.parse(SHAPES_SVG)
    assign_semantic_ids(doc, "anim_")
    assert doc.get(doc.find_all("linearGradient")[0], "id") == "grad1"
    assert doc.get(doc.find_all("stop")[0], "id") is None
    assert doc.get(doc.find_all("title")[0], "id") is None
    assert doc.get(doc.root, "id") is None


def test_hierarchy_records_parents_and_depth():
    doc = SvgDocument.parse(SHAPES_SVG)
    assignment = assign_semantic_ids(doc, "anim_")
    by_id = {r.id: r for r in assignment.hierarchy}
    ellipse = by_id["anim_circle_1"]
    assert ellipse.tag == "ellipse"
    assert ellipse.parent_id == "anim_green_group"
    assert ellipse.depth == 2
    assert by_id["anim_green_group"].depth == 1
    assert assignment.id_map["anim_orange_bar"] == "rect"


def test_existing_names_reused_unless_generated():
    assert _ids(NAMED_SVG) == [
        "anim_group",
        "anim_line",
        "anim_left_wheel",
        "anim_hub",
        "anim_square",
    ]


def test_rerun_on_output_is_stable():
    doc = SvgDocument.parse(SHAPES_SVG)
    assign_semantic_ids(doc, "anim_")
    first = doc.serialize()
    assert _ids(first) == _ids(SHAPES_SVG)


def test_reserved_ids_are_not_reused():
    svg = '''<svg xmlns="http://www.w3.org/2000/svg">
      <defs><path id="anim_square" d="M0 0 L1 1"/></defs>
      <rect width="10" height="10"/>
      <rect width="20" height="20"/>
    </svg>'''
    assert _ids(svg) == ["anim_square_1", "anim_square_2"]


def test_custom_prefix():
    assert _ids(RED_SQUARE_SVG, prefix="el_") == ["el_red_square"]


def test_group_named_after_majority_child_fill():
    svg = '''<svg xmlns="http://www.w3.org/2000/svg">
      <g><rect width="1" height="5" fill="#800080"/><circle r="1" fill="purple"/><circle r="1" fill="#ffffff"/></g>
    </svg>'''
    assert _ids(svg)[0] == "anim_purple_group"


def test_infer_basename_shapes():
    doc = SvgDocument.parse(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<rect width="40" height="10"/><path d="M0 0 Z"/><text x="1">hi</text></svg>'
    )
    rect, path, text = doc.children(doc.root)
    assert infer_basename(doc, rect) == "bar"
    assert infer_basename(doc, path) == "shape"
    assert infer_basename(doc, text) == "text"


def test_auto_generated_patterns():
    assert is_auto_generated("path123")
    assert is_auto_generated("g7")
    assert is_auto_generated("layer2")
    assert is_auto_generated("deadbeef00")
    assert is_auto_generated("Untitled-1")
    assert not is_auto_generated("wheel")
    assert not is_auto_generated("path_left")


def test_sanitize_token():
    assert sanitize_token("Left Wheel!") == "left_wheel"
    assert sanitize_token("__a--b__") == "a_b"
    assert sanitize_token("3d-logo") == "_3d_logo"
    assert sanitize_token("!!!") == ""
