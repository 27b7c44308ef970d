"""Path data tokenizer and point model.

``tokenize_path`` is a small scanner that turns a ``d`` string into typed
``PathCommand``s (implicit repeats expanded, arc flags read one character at a
time). ``parse_path_points`` reduces those commands to the M/L/C/Q/Z point
model used for morphing: H/V become line points, while S, T and A are not
decomposed and are dropped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from animsvg.errors import PathSyntaxError
from animsvg.models.paths import PathCommandType, PathPoint, Point
from animsvg.utils.geometry import format_number

logger = logging.getLogger(__name__)

_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}
_COMMAND_LETTERS = frozenset("MmLlHhVvCcSsQqTtAaZz")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_SEPARATORS = frozenset(" \t\r\n\f,")
_LETTER_RE = re.compile(r"[MLHVCSQTAZ]", re.IGNORECASE)

CURVE_LETTERS = frozenset("CcQqSsTtAa")
LINE_LETTERS = frozenset("LlHhVv")


@dataclass(frozen=True)
class PathCommand:
    letter: str
    args: tuple[float, ...] = ()

    @property
    def kind(self) -> str:
        return self.letter.upper()

    @property
    def relative(self) -> bool:
        return self.letter.islower()


def tokenize_path(d: str) -> list[PathCommand]:
    """Scan ``d`` into commands. Raises ``PathSyntaxError`` on stray input."""
    commands: list[PathCommand] = []
    letter: str | None = None
    args: list[float] = []
    pos, n = 0, len(d)

    def flush() -> None:
        if args:
            logger.debug("Dropping incomplete %s arguments %s", letter, args)
            args.clear()

    while pos < n:
        ch = d[pos]
        if ch in _SEPARATORS:
            pos += 1
            continue
        if ch in _COMMAND_LETTERS:
            flush()
            letter = ch
            pos += 1
            if letter in "Zz":
                commands.append(PathCommand(letter))
            continue
        if letter is None:
            raise PathSyntaxError(f"path data must start with a command, found {ch!r}")
        if letter in "Zz":
            raise PathSyntaxError(f"unexpected {ch!r} after close command at offset {pos}")

        if letter in "Aa" and len(args) in (3, 4):
            # Arc flags are single digits and may be written without separators
            if ch not in "01":
                raise PathSyntaxError(f"bad arc flag {ch!r} at offset {pos}")
            args.append(float(ch))
            pos += 1
        else:
            match = _NUMBER_RE.match(d, pos)
            if not match:
                raise PathSyntaxError(f"unexpected {ch!r} in path data at offset {pos}")
            args.append(float(match.group()))
            pos = match.end()

        if len(args) == _ARITY[letter.upper()]:
            commands.append(PathCommand(letter, tuple(args)))
            args.clear()
            # Coordinate pairs after a moveto are implicit linetos
            if letter == "M":
                letter = "L"
            elif letter == "m":
                letter = "l"
    flush()
    return commands


def walk_commands(
    commands: list[PathCommand],
) -> Iterator[tuple[PathCommand, tuple[float, float], tuple[float, float]]]:
    """Yield ``(command, start, end)`` in absolute coordinates for every command."""
    cx = cy = 0.0
    sx = sy = 0.0
    for cmd in commands:
        kind, a = cmd.kind, cmd.args
        ox, oy = (cx, cy) if cmd.relative else (0.0, 0.0)
        start = (cx, cy)
        if kind == "Z":
            x, y = sx, sy
        elif kind == "H":
            x, y = a[0] + (cx if cmd.relative else 0.0), cy
        elif kind == "V":
            x, y = cx, a[0] + (cy if cmd.relative else 0.0)
        else:
            x, y = a[-2] + ox, a[-1] + oy
        if kind == "M":
            sx, sy = x, y
        cx, cy = x, y
        yield cmd, start, (x, y)


def split_subpaths(d: str) -> list[tuple[list[PathCommand], bool]]:
    """Split ``d`` into ``(commands, closed)`` per subpath.

    Each subpath starts with an absolute moveto, so relative commands keep
    their meaning when a subpath is handled on its own. ``Z`` is not part of
    the command list; it is reported by the ``closed`` flag.
    """
    subpaths: list[tuple[list[PathCommand], bool]] = []
    current: list[PathCommand] = []
    closed = False
    for cmd, start, end in walk_commands(tokenize_path(d)):
        if cmd.kind == "M":
            if current:
                subpaths.append((current, closed))
            current, closed = [PathCommand("M", end)], False
            continue
        # Drawing after a close (or with no moveto) starts a new subpath
        if closed or not current:
            if current:
                subpaths.append((current, closed))
            current, closed = [PathCommand("M", start)], False
        if cmd.kind == "Z":
            closed = True
        else:
            current.append(cmd)
    if current:
        subpaths.append((current, closed))
    return subpaths


def parse_path_points(d: str) -> list[PathPoint]:
    """Reduce path data to M/L/C/Q/Z points in absolute coordinates."""
    points: list[PathPoint] = []
    dropped = 0
    for cmd, (cx, cy), (x, y) in walk_commands(tokenize_path(d)):
        kind, a = cmd.kind, cmd.args
        ox, oy = (cx, cy) if cmd.relative else (0.0, 0.0)
        if kind == "M":
            points.append(PathPoint(x=x, y=y, command=PathCommandType.MOVE))
        elif kind in ("L", "H", "V"):
            points.append(PathPoint(x=x, y=y, command=PathCommandType.LINE))
        elif kind == "C":
            points.append(
                PathPoint(
                    x=x,
                    y=y,
                    command=PathCommandType.CUBIC,
                    control_points=[Point(x=a[0] + ox, y=a[1] + oy), Point(x=a[2] + ox, y=a[3] + oy)],
                )
            )
        elif kind == "Q":
            points.append(
                PathPoint(
                    x=x,
                    y=y,
                    command=PathCommandType.QUADRATIC,
                    control_points=[Point(x=a[0] + ox, y=a[1] + oy)],
                )
            )
        elif kind == "Z":
            points.append(PathPoint(x=x, y=y, command=PathCommandType.CLOSE))
        else:
            dropped += 1
    if dropped:
        logger.debug("Dropped %d unsupported path commands (S/T/A)", dropped)
    return points


def points_to_path(points: list[PathPoint], precision: int = 2) -> str:
    """Serialize points back to path data; the first point is always a moveto."""

    def xy(x: float, y: float) -> str:
        return f"{x:.{precision}f} {y:.{precision}f}"

    parts: list[str] = []
    for i, p in enumerate(points):
        if i == 0 or p.command == PathCommandType.MOVE:
            parts.append(f"M {xy(p.x, p.y)}")
        elif p.command == PathCommandType.CUBIC:
            c1, c2 = p.control_points
            parts.append(f"C {xy(c1.x, c1.y)} {xy(c2.x, c2.y)} {xy(p.x, p.y)}")
        elif p.command == PathCommandType.QUADRATIC:
            (c,) = p.control_points
            parts.append(f"Q {xy(c.x, c.y)} {xy(p.x, p.y)}")
        elif p.command == PathCommandType.CLOSE:
            parts.append("Z")
        else:
            parts.append(f"L {xy(p.x, p.y)}")
    return " ".join(parts)


def serialize_commands(commands: list[PathCommand], precision: int | None = None) -> str:
    """Write commands back out, optionally rounding every coordinate."""
    parts: list[str] = []
    for cmd in commands:
        if not cmd.args:
            parts.append(cmd.letter)
            continue
        values = []
        for i, v in enumerate(cmd.args):
            if cmd.kind == "A" and i in (3, 4):
                values.append(str(int(v)))
            elif precision is None:
                values.append(format_number(v, 6))
            else:
                values.append(format_number(v, precision))
        parts.append(f"{cmd.letter}{' '.join(values)}")
    return " ".join(parts)


def count_command_letters(d: str | None) -> int:
    """Number of command letters in ``d`` (no tokenizing, never raises)."""
    if not d:
        return 0
    return len(_LETTER_RE.findall(d))


def outline_array(d: str) -> NDArray[np.float64]:
    """Endpoints and control points of ``d`` as an Nx2 array."""
    coords: list[tuple[float, float]] = []
    for p in parse_path_points(d):
        coords.append((p.x, p.y))
        coords.extend((c.x, c.y) for c in p.control_points)
    return np.array(coords, dtype=float).reshape(-1, 2)
