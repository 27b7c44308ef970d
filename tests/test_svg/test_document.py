"""Tests for the SVG document arena."""

import pytest

from animsvg.errors import SvgParseError
from animsvg.svg.document import SvgDocument
from tests.conftest import NESTED_GROUPS_SVG, RED_SQUARE_SVG, SHAPES_SVG


def test_parse_builds_arena():
    doc = SvgDocument.parse(RED_SQUARE_SVG)
    assert doc.tag(doc.root) == "svg"
    children = doc.children(doc.root)
    assert len(children) == 1
    assert doc.tag(children[0]) == "rect"
    assert doc.get(children[0], "fill") == "#ff0000"
    assert doc.parent(children[0]) == doc.root


@pytest.mark.parametrize("text", ["", "   ", "<svg><rect></svg>", "not xml at all"])
def test_parse_rejects_malformed(text):
    with pytest.raises(SvgParseError):
        SvgDocument.parse(text)


def test_parse_rejects_non_svg_root():
    with pytest.raises(SvgParseError, match="expected <svg>"):
        SvgDocument.parse("<html><body/></html>")


def test_serialize_round_trip_keeps_namespace():
    doc = SvgDocument.parse(RED_SQUARE_SVG)
    out = doc.serialize()
    assert out.startswith("<svg")
    assert 'xmlns="http://www.w3.org/2000/svg"' in out
    assert 'fill="#ff0000"' in out
    # Re-parsing the output gives the same structure
    again = SvgDocument.parse(out)
    assert again.element_count() == 1


def test_serialize_unprefixed_after_svgpathtools_import():
    import svgpathtools  # noqa: F401  (registers an "svg" prefix for the SVG namespace)

    out = SvgDocument.parse(RED_SQUARE_SVG).serialize()
    assert out.startswith("<svg ")
    assert "svg:" not in out
    assert "<rect " in out


def test_iter_preorder_is_parent_first():
    doc = SvgDocument.parse(NESTED_GROUPS_SVG)
    tags = [doc.tag(i) for i in doc.iter_preorder()]
    assert tags == ["svg", "g", "g", "g", "rect"]


def test_iter_preorder_skips_subtrees():
    doc = SvgDocument.parse(SHAPES_SVG)
    tags = {doc.tag(i) for i in doc.iter_preorder(skip={"defs", "title"})}
    assert "linearGradient" not in tags
    assert "stop" not in tags
    assert "title" not in tags
    assert "circle" in tags


def test_depth_counts_from_root():
    doc = SvgDocument.parse(NESTED_GROUPS_SVG)
    rect = doc.find_all("rect")[0]
    assert doc.depth(doc.root) == 0
    assert doc.depth(rect) == 4


def test_remove_drops_subtree():
    doc = SvgDocument.parse(NESTED_GROUPS_SVG)
    outer = doc.children(doc.root)[0]
    assert doc.remove(outer) == 4
    assert doc.element_count() == 0
    assert not doc.is_live(outer)
    # Removing twice is a no-op
    assert doc.remove(outer) == 0
    assert "<rect" not in doc.serialize()


def test_remove_root_is_rejected():
    doc = SvgDocument.parse(RED_SQUARE_SVG)
    with pytest.raises(ValueError):
        doc.remove(doc.root)


def test_move_reparents_before_sibling():
    doc = SvgDocument.parse(NESTED_GROUPS_SVG)
    outer = doc.children(doc.root)[0]
    rect = doc.find_all("rect")[0]
    doc.move(rect, doc.root, before=outer)
    assert doc.children(doc.root) == [rect, outer]
    assert doc.parent(rect) == doc.root
    assert doc.depth(rect) == 1


def test_inherited_walks_ancestors():
    doc = SvgDocument.parse(SHAPES_SVG)
    ellipse = doc.find_all("ellipse")[0]
    assert doc.get(ellipse, "fill") is None
    assert doc.inherited(ellipse, "fill") == "#00ff00"
    assert doc.inherited(ellipse, "stroke") is None


def test_create_element_uses_document_namespace():
    doc = SvgDocument.parse(RED_SQUARE_SVG)
    idx = doc.create_element("circle", {"cx": "5", "cy": "5", "r": "2"}, parent=doc.root)
    assert doc.node(idx).namespace == "http://www.w3.org/2000/svg"
    assert doc.children(doc.root)[-1] == idx
    out = doc.serialize()
    assert "<circle" in out
    assert "ns0:" not in out


def test_rename_keeps_attributes():
    doc = SvgDocument.parse(RED_SQUARE_SVG)
    rect = doc.find_all("rect")[0]
    doc.rename(rect, "path")
    assert doc.tag(rect) == "path"
    assert doc.get(rect, "fill") == "#ff0000"
