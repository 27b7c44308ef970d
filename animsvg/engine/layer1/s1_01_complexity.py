"""S1.01 — Complexity Analysis.

Score how expensive the document is to animate from four capped inputs:
element count, path count, path command count and nesting depth. The score
maps to a tier, an estimated frame rate and a list of recommendations.
"""

from __future__ import annotations

import math

from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, stage
from animsvg.models.reports import ComplexityReport, ComplexityTier
from animsvg.svg.document import SvgDocument
from animsvg.svg.path_data import count_command_letters

# (upper score bound, fps); the first bound the score fits under wins
_FPS_TABLE = [(20.0, 60), (40.0, 45), (60.0, 30)]
_FPS_FLOOR = 15

_POTENTIAL_REDUCTION_CAP = 50.0


def complexity_score(nodes: int, paths: int, commands: int, depth: int) -> float:
    score = min(nodes * 2, 40) + min(paths * 3, 30) + min(commands / 10, 20) + min(depth * 2, 10)
    return round(max(0.0, min(100.0, float(score))), 2)


def complexity_tier(score: float) -> ComplexityTier:
    if score <= 30:
        return "low"
    if score <= 60:
        return "medium"
    return "high"


def estimated_fps(score: float) -> int:
    for bound, fps in _FPS_TABLE:
        if score <= bound:
            return fps
    return _FPS_FLOOR


def _recommendations(
    nodes: int, paths: int, groups: int, commands: int, depth: int, fps: int
) -> tuple[list[str], float]:
    recs: list[str] = []
    reduction = 0.0
    if paths > 20:
        recs.append(f"Reduce path count from {paths} to ~{math.ceil(paths * 0.7)}")
        reduction += 15
    if groups > 10:
        recs.append(f"Merge redundant groups ({groups} groups found)")
        reduction += 10
    if depth > 4:
        recs.append(f"Flatten nested structure ({depth} levels deep)")
        reduction += 8
    if commands > 100:
        recs.append("Simplify complex path curves")
        reduction += 12
    if nodes > 50:
        recs.append(f"Reduce total element count from {nodes}")
        reduction += 20
    if fps < 60:
        recs.append(f"Optimize for 60fps (currently ~{fps}fps)")
    return recs, min(reduction, _POTENTIAL_REDUCTION_CAP)


def analyze_complexity(doc: SvgDocument) -> ComplexityReport:
    """Complexity report for the live document."""
    elements = doc.descendants()
    paths = [i for i in elements if doc.tag(i) == "path"]
    groups = sum(1 for i in elements if doc.tag(i) == "g")
    commands = sum(count_command_letters(doc.get(i, "d")) for i in paths)
    depth = max((doc.depth(i) for i in elements), default=0)

    score = complexity_score(len(elements), len(paths), commands, depth)
    fps = estimated_fps(score)
    recs, reduction = _recommendations(len(elements), len(paths), groups, commands, depth, fps)
    return ComplexityReport(
        total_nodes=len(elements),
        path_nodes=len(paths),
        group_nodes=groups,
        path_commands=commands,
        max_depth=depth,
        complexity_score=score,
        complexity=complexity_tier(score),
        estimated_fps=fps,
        recommendations=recs,
        potential_reduction=reduction,
    )


@stage(
    id="S1.01",
    layer=Layer.OPTIMIZATION,
    description="Score structural complexity for animation",
)
def complexity_analysis(ctx: ProcessingContext) -> None:
    ctx.complexity = analyze_complexity(ctx.document)
    ctx.log.info(
        "Complexity %s (%.2f/100, ~%dfps)",
        ctx.complexity.complexity,
        ctx.complexity.complexity_score,
        ctx.complexity.estimated_fps,
    )
