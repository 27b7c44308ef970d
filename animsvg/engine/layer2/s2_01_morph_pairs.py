"""S2.01 — Path Normalization & Morph Pairing.

Resample every path to a fixed point count so any two paths can be
interpolated point-for-point, then score each unordered pair for morph
compatibility from point count, curve count, bounding-box area and aspect.

Downsampling picks the nearest source index at evenly spaced positions.
Upsampling inserts points into drawable segments in proportion to their chord
length: straight segments are interpolated linearly, curves are split with de
Casteljau so every inserted point is still a valid C/Q point.
"""

from __future__ import annotations

import hashlib
import math

import numpy as np

from animsvg.engine.config import EngineConfig
from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, stage
from animsvg.errors import PathSyntaxError
from animsvg.models.options import MorphOptions
from animsvg.models.paths import Bounds, MorphPair, NormalizedPath, PathCommandType, PathPoint, Point
from animsvg.svg.document import NON_VISUAL_TAGS, SvgDocument
from animsvg.svg.path_data import parse_path_points, points_to_path
from animsvg.utils.geometry import aspect_ratio, bbox, log_area

_XY = tuple[float, float]


# ── resampling ───────────────────────────────────────────────────────────


def _lerp(a: _XY, b: _XY, t: float) -> _XY:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def _split_bezier(ctrl: list[_XY], t: float) -> tuple[list[_XY], list[_XY]]:
    """de Casteljau split of a Bezier of any degree at ``t``."""
    left, right = [ctrl[0]], [ctrl[-1]]
    level = ctrl
    while len(level) > 1:
        level = [_lerp(level[i], level[i + 1], t) for i in range(len(level) - 1)]
        left.append(level[0])
        right.append(level[-1])
    return left, right[::-1]


def _to_point(command: PathCommandType, ctrl: list[_XY]) -> PathPoint:
    return PathPoint(
        x=ctrl[-1][0],
        y=ctrl[-1][1],
        command=command,
        control_points=[Point(x=x, y=y) for x, y in ctrl[1:-1]],
    )


def _subdivide(start: _XY, end: PathPoint, pieces: int) -> list[PathPoint]:
    """Split the segment ``start`` → ``end`` into ``pieces`` points ending at ``end``."""
    if pieces <= 1:
        return [end]

    if end.is_curve:
        ctrl = [start] + [(c.x, c.y) for c in end.control_points] + [(end.x, end.y)]
        out = []
        remaining = ctrl
        for j in range(pieces - 1):
            left, remaining = _split_bezier(remaining, 1.0 / (pieces - j))
            out.append(_to_point(end.command, left))
        out.append(_to_point(end.command, remaining))
        return out

    # Straight segment (L or the closing line of Z)
    target = (end.x, end.y)
    out = [
        PathPoint(x=x, y=y, command=PathCommandType.LINE)
        for x, y in (_lerp(start, target, j / pieces) for j in range(1, pieces))
    ]
    out.append(end)
    return out


def _allocate(weights: list[float], extra: int) -> list[int]:
    """Largest-remainder split of ``extra`` insertions over ``weights``."""
    total = sum(weights)
    quotas = [extra * w / total for w in weights]
    counts = [math.floor(q) for q in quotas]
    leftover = extra - sum(counts)
    order = sorted(range(len(weights)), key=lambda i: (-(quotas[i] - counts[i]), i))
    for i in order[:leftover]:
        counts[i] += 1
    return counts


def resample_points(points: list[PathPoint], target: int) -> list[PathPoint]:
    """Resample ``points`` to exactly ``target`` points."""
    if not points:
        raise PathSyntaxError("path has no points to normalize")
    if target < 1:
        raise PathSyntaxError(f"target point count must be positive, got {target}")
    n = len(points)
    if n == target:
        return list(points)

    if n > target:
        indices = np.rint(np.linspace(0, n - 1, target)).astype(int)
        return [points[i] for i in indices]

    extra = target - n
    # Segment i runs from points[i] to points[i + 1]; a moveto draws nothing
    drawable = [points[i + 1].command != PathCommandType.MOVE for i in range(n - 1)]
    if not any(drawable):
        last = points[-1]
        pad = [PathPoint(x=last.x, y=last.y, command=PathCommandType.LINE) for _ in range(extra)]
        return list(points) + pad

    weights = [
        math.hypot(points[i + 1].x - points[i].x, points[i + 1].y - points[i].y) if drawable[i] else 0.0
        for i in range(n - 1)
    ]
    if sum(weights) > 0:
        counts = _allocate(weights, extra)
    else:
        # Zero-length outline: spread evenly over the drawable segments
        slots = [i for i, ok in enumerate(drawable) if ok]
        counts = [0] * len(weights)
        for j in range(extra):
            counts[slots[j % len(slots)]] += 1

    out = [points[0]]
    for i, count in enumerate(counts):
        out.extend(_subdivide((points[i].x, points[i].y), points[i + 1], count + 1))
    return out


def _bounds(points: list[PathPoint]) -> Bounds:
    xmin, ymin, xmax, ymax = bbox(np.array([[p.x, p.y] for p in points], dtype=float))
    return Bounds(x=xmin, y=ymin, width=xmax - xmin, height=ymax - ymin)


def normalize_path(d: str, target: int = 100, path_id: str = "path", precision: int = 2) -> NormalizedPath:
    """Parse ``d`` and resample it to ``target`` points."""
    source = parse_path_points(d)
    if not source:
        raise PathSyntaxError(f"path {path_id!r} has no supported commands")
    points = resample_points(source, target)
    return NormalizedPath(
        id=path_id,
        original_path=d,
        normalized_path=points_to_path(points, precision),
        points=points,
        bounds=_bounds(points),
    )


# ── pairing ──────────────────────────────────────────────────────────────


def size_term(a: NormalizedPath, b: NormalizedPath) -> float:
    delta = abs(log_area(a.bounds.width, a.bounds.height) - log_area(b.bounds.width, b.bounds.height))
    return max(0.0, 20.0 - 10.0 * delta)


def compatibility(a: NormalizedPath, b: NormalizedPath) -> float:
    """Morph compatibility in [0, 100]; symmetric in its arguments."""
    score = 30.0 if a.point_count == b.point_count else 0.0
    score += max(0.0, 30.0 - 5.0 * abs(a.curve_count - b.curve_count))
    score += size_term(a, b)
    aspect_delta = abs(
        aspect_ratio(a.bounds.width, a.bounds.height) - aspect_ratio(b.bounds.width, b.bounds.height)
    )
    score += max(0.0, 20.0 - 10.0 * aspect_delta)
    return round(max(0.0, min(100.0, score)), 2)


def find_morph_pairs(paths: list[NormalizedPath], min_score: float = 50.0) -> list[MorphPair]:
    """Every compatible unordered pair, best first."""
    pairs: list[MorphPair] = []
    for i, a in enumerate(paths):
        for b in paths[i + 1:]:
            score = compatibility(a, b)
            # Paths whose areas differ by more than e^2 never morph well
            if score > min_score and size_term(a, b) > 0:
                pairs.append(
                    MorphPair(source_id=a.id, target_id=b.id, compatibility=score, morph_path=b.normalized_path)
                )
    pairs.sort(key=lambda p: p.compatibility, reverse=True)
    return pairs


# ── document stage ───────────────────────────────────────────────────────


def _path_id(doc: SvgDocument, idx: int, d: str, used: set[str]) -> str:
    existing = doc.get(idx, "id")
    if existing:
        return existing
    base = "morph_" + hashlib.sha1(d.encode("utf-8")).hexdigest()[:10]
    candidate, n = base, 1
    while candidate in used:
        candidate = f"{base}_{n}"
        n += 1
    return candidate


def prepare_morphing(
    doc: SvgDocument,
    options: MorphOptions | None = None,
    config: EngineConfig | None = None,
) -> tuple[list[NormalizedPath], list[MorphPair]]:
    """Normalize every path in ``doc``, pair them and annotate the elements."""
    options = options or MorphOptions()
    config = config or EngineConfig()

    normalized: list[NormalizedPath] = []
    elements: dict[str, int] = {}
    for idx in doc.iter_preorder(skip=NON_VISUAL_TAGS):
        d = doc.get(idx, "d")
        if doc.tag(idx) != "path" or not d:
            continue
        path_id = _path_id(doc, idx, d, set(elements))
        path = normalize_path(d, options.target_point_count, path_id, config.path_precision)
        normalized.append(path)
        elements[path_id] = idx

        if options.apply_normalized_paths:
            doc.set(idx, "data-original-path", d)
            doc.set(idx, "d", path.normalized_path)
        doc.set(idx, "data-point-count", str(path.point_count))
        doc.set(idx, "data-morph-ready", "true")

    pairs = find_morph_pairs(normalized, config.morph_min_score)

    if options.annotate_pairs:
        has_target: set[str] = set()
        has_source: set[str] = set()
        for pair in pairs:
            source, target = elements[pair.source_id], elements[pair.target_id]
            for idx, path_id in ((source, pair.source_id), (target, pair.target_id)):
                if doc.get(idx, "id") is None:
                    doc.set(idx, "id", path_id)
            if pair.source_id not in has_target:
                doc.set(source, "data-morph-target", pair.target_id)
                doc.set(source, "data-morph-compatibility", f"{pair.compatibility:g}")
                has_target.add(pair.source_id)
            if pair.target_id not in has_source:
                doc.set(target, "data-morph-source", pair.source_id)
                has_source.add(pair.target_id)

    return normalized, pairs


@stage(
    id="S2.01",
    layer=Layer.ANIMATION,
    option="normalize_paths",
    description="Resample paths and find morph-compatible pairs",
)
def morph_pairs(ctx: ProcessingContext) -> None:
    ctx.normalized_paths, ctx.morph_pairs = prepare_morphing(ctx.document, ctx.options.morph, ctx.config)
    ctx.log.info(
        "Normalized %d paths, %d morph pairs",
        len(ctx.normalized_paths),
        len(ctx.morph_pairs),
    )
