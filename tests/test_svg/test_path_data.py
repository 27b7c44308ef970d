"""Tests for the path data tokenizer and point model."""

import pytest

from animsvg.errors import PathSyntaxError
from animsvg.models.paths import PathCommandType
from animsvg.svg.path_data import (
    count_command_letters,
    outline_array,
    parse_path_points,
    points_to_path,
    serialize_commands,
    tokenize_path,
)


def test_tokenize_basic_commands():
    cmds = tokenize_path("M0 0 L10,0 C1 2 3 4 5 6 Z")
    assert [c.letter for c in cmds] == ["M", "L", "C", "Z"]
    assert cmds[2].args == (1.0, 2.0, 3.0, 4.0, 5.0, 6.0)


def test_tokenize_implicit_lineto_after_moveto():
    cmds = tokenize_path("M0 0 10 10 20 0")
    assert [c.letter for c in cmds] == ["M", "L", "L"]
    rel = tokenize_path("m1 1 2 2")
    assert [c.letter for c in rel] == ["m", "l"]


def test_tokenize_compact_numbers():
    cmds = tokenize_path("M.5.5L-1-2e1")
    assert cmds[0].args == (0.5, 0.5)
    assert cmds[1].args == (-1.0, -20.0)


def test_tokenize_compact_arc_flags():
    cmds = tokenize_path("M0 0 a5 5 0 1010 10")
    assert cmds[1].letter == "a"
    assert cmds[1].args == (5.0, 5.0, 0.0, 1.0, 0.0, 10.0, 10.0)


def test_tokenize_drops_incomplete_arguments():
    cmds = tokenize_path("M0 0 L10")
    assert [c.letter for c in cmds] == ["M"]


@pytest.mark.parametrize("d", ["10 10 L5 5", "M0 0 Z 5", "M0 0 X10 10", "M0 0 A5 5 0 2 0 1 1"])
def test_tokenize_rejects_bad_input(d):
    with pytest.raises(PathSyntaxError):
        tokenize_path(d)


def test_points_resolve_relative_and_hv():
    points = parse_path_points("m10 10 h5 v5 l-5 0 z")
    assert [(p.x, p.y) for p in points] == [(10, 10), (15, 10), (15, 15), (10, 15), (10, 10)]
    assert [p.command for p in points] == [
        PathCommandType.MOVE,
        PathCommandType.LINE,
        PathCommandType.LINE,
        PathCommandType.LINE,
        PathCommandType.CLOSE,
    ]


def test_points_keep_curve_control_points():
    points = parse_path_points("M0 0 c1 1 2 2 3 3 Q10 10 20 20")
    cubic, quad = points[1], points[2]
    assert cubic.command == PathCommandType.CUBIC
    assert [(c.x, c.y) for c in cubic.control_points] == [(1, 1), (2, 2)]
    assert (cubic.x, cubic.y) == (3, 3)
    assert quad.command == PathCommandType.QUADRATIC
    assert len(quad.control_points) == 1


def test_points_drop_shorthand_and_arcs():
    points = parse_path_points("M0 0 S1 1 2 2 T4 4 A1 1 0 0 1 6 6 L8 8")
    assert [p.command for p in points] == [PathCommandType.MOVE, PathCommandType.LINE]
    # The current point still advanced through the dropped commands
    assert (points[1].x, points[1].y) == (8, 8)


def test_points_to_path_formats_two_decimals():
    points = parse_path_points("M0 0 L10 0 Q5 5 0 0 Z")
    assert points_to_path(points) == "M 0.00 0.00 L 10.00 0.00 Q 5.00 5.00 0.00 0.00 Z"


def test_serialize_commands_rounds():
    cmds = tokenize_path("M0.123456 1.98765 l0.5 0.25")
    assert serialize_commands(cmds, 2) == "M0.12 1.99 l0.5 0.25"


def test_count_command_letters():
    assert count_command_letters("M0 0 L1 1 c1 1 2 2 3 3 z") == 4
    assert count_command_letters(None) == 0


def test_outline_array_includes_control_points():
    arr = outline_array("M0 0 C1 1 2 2 3 3")
    assert arr.shape == (4, 2)
