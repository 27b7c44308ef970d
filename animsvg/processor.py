"""Public operations — parse, run one or all stages, serialize.

Every operation returns an ``Outcome``: the value on success, or the typed
``AnimSvgError`` that stopped it. Failures are logged at warning level.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from animsvg.config import settings
from animsvg.engine.config import EngineConfig
from animsvg.engine.context import ProcessingContext
from animsvg.engine.layer0.s0_01_semantic_ids import assign_semantic_ids
from animsvg.engine.layer0.s0_02_transform_flattening import flatten_transforms as _flatten
from animsvg.engine.layer0.s0_03_viewbox import optimize_view_box as _optimize_view_box
from animsvg.engine.layer1.s1_01_complexity import analyze_complexity as _analyze
from animsvg.engine.layer1.s1_02_node_budget import optimize_document
from animsvg.engine.layer2.s2_01_morph_pairs import normalize_path as _normalize_path
from animsvg.engine.layer2.s2_01_morph_pairs import prepare_morphing
from animsvg.engine.layer2.s2_02_stroke_preparation import prepare_strokes as _prepare_strokes
from animsvg.engine.layer3.s3_01_palette import extract_palette
from animsvg.engine.layer3.s3_02_token_substitution import apply_tokens, resolve_tokens
from animsvg.engine.outcome import Outcome
from animsvg.engine.pipeline import create_pipeline
from animsvg.errors import AnimSvgError, StageError
from animsvg.models.options import (
    AnimationOptions,
    MorphOptions,
    PaletteOptions,
    PerformanceOptions,
    StrokeOptions,
)
from animsvg.models.palette import ColorPalette
from animsvg.models.paths import NormalizedPath
from animsvg.models.reports import ComplexityReport, IdStabilityReport, IdVariation, OptimizationResult
from animsvg.models.responses import (
    AnimationMetadata,
    FlattenResult,
    IdResult,
    MorphResult,
    ProcessedSvg,
    StrokeResult,
    ViewBoxResult,
)
from animsvg.svg.document import NON_VISUAL_TAGS, SvgDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")

STABILITY_PASS_SCORE = 95.0


def _guarded(operation: str, fn: Callable[[], T]) -> Outcome[T]:
    try:
        return Outcome.success(fn())
    except AnimSvgError as e:
        logger.warning("%s failed at %s: %s", operation, e.stage, e)
        return Outcome.failure(e)


# ── full pipeline ────────────────────────────────────────────────────────


def animation_readiness(ctx: ProcessingContext) -> int:
    """0-100 heuristic of how ready the processed document is for animation."""
    n = ctx.document.element_count()
    score = 90 if n < 10 else 70 if n < 50 else 40
    bonuses = {"S0.01": 10, "S0.02": 10, "S1.02": 15, "S0.03": 5}
    score += sum(points for stage_id, points in bonuses.items() if stage_id in ctx.completed_stages)
    if ctx.document.get(ctx.document.root, "viewBox"):
        score += 5
    return min(score, 100)


def _metadata(ctx: ProcessingContext, had_transforms: bool) -> AnimationMetadata:
    doc = ctx.document
    elements = doc.descendants()
    assignment = ctx.id_assignment
    return AnimationMetadata(
        element_count=len(elements),
        group_count=sum(1 for i in elements if doc.tag(i) == "g"),
        path_count=sum(1 for i in elements if doc.tag(i) == "path"),
        has_transforms=had_transforms,
        complexity=ctx.complexity.complexity if ctx.complexity else "low",
        animation_readiness=animation_readiness(ctx),
        id_map=assignment.id_map if assignment else {},
        hierarchy=assignment.hierarchy if assignment else [],
        view_box=ctx.view_box,
        complexity_report=ctx.complexity,
        optimization=ctx.optimization,
        normalized_paths=ctx.normalized_paths,
        morph_pairs=ctx.morph_pairs,
        stroke_lengths=ctx.stroke_lengths,
        palette=ctx.palette,
        completed_stages=list(ctx.completed_stages),
    )


def _process(svg: str, options: AnimationOptions, config: EngineConfig) -> ProcessedSvg:
    doc = SvgDocument.parse(svg)
    had_transforms = any(doc.get(i, "transform") is not None for i in doc.iter_preorder())
    ctx = ProcessingContext(document=doc, options=options, config=config)
    create_pipeline(config).run(ctx)
    if ctx.errors:
        stage_id, message = next(iter(ctx.errors.items()))
        raise StageError(f"{stage_id}: {message}", stage=stage_id)
    return ProcessedSvg(svg=doc.serialize(), metadata=_metadata(ctx, had_transforms))


def process_for_animation(
    svg: str,
    options: AnimationOptions | None = None,
    config: EngineConfig | None = None,
) -> Outcome[ProcessedSvg]:
    """Run every enabled stage over ``svg``."""
    return _guarded(
        "process_for_animation",
        lambda: _process(svg, options or AnimationOptions(), config or EngineConfig()),
    )


# ── single stages ────────────────────────────────────────────────────────


def generate_stable_ids(svg: str, prefix: str | None = None) -> Outcome[IdResult]:
    def run() -> IdResult:
        doc = SvgDocument.parse(svg)
        assignment = assign_semantic_ids(doc, settings.animsvg_id_prefix if prefix is None else prefix)
        return IdResult(svg=doc.serialize(), id_map=assignment.id_map, hierarchy=assignment.hierarchy)

    return _guarded("generate_stable_ids", run)


def flatten_transforms(svg: str) -> Outcome[FlattenResult]:
    def run() -> FlattenResult:
        doc = SvgDocument.parse(svg)
        summary = _flatten(doc)
        return FlattenResult(
            svg=doc.serialize(),
            transforms_removed=summary.transforms_removed,
            elements_baked=summary.elements_baked,
        )

    return _guarded("flatten_transforms", run)


def optimize_view_box(svg: str, config: EngineConfig | None = None) -> Outcome[ViewBoxResult]:
    def run() -> ViewBoxResult:
        doc = SvgDocument.parse(svg)
        info = _optimize_view_box(doc, config)
        return ViewBoxResult(svg=doc.serialize(), view_box=info)

    return _guarded("optimize_view_box", run)


def analyze_complexity(svg: str) -> Outcome[ComplexityReport]:
    return _guarded("analyze_complexity", lambda: _analyze(SvgDocument.parse(svg)))


def optimize_for_animation(
    svg: str,
    options: PerformanceOptions | None = None,
    config: EngineConfig | None = None,
) -> Outcome[OptimizationResult]:
    def run() -> OptimizationResult:
        result = optimize_document(SvgDocument.parse(svg), options, config)
        # Report the caller's text verbatim, not its re-serialization
        return result.model_copy(update={"original_svg": svg})

    return _guarded("optimize_for_animation", run)


def normalize_path(d: str, target_point_count: int | None = None, path_id: str = "path") -> Outcome[NormalizedPath]:
    target = settings.animsvg_morph_point_count if target_point_count is None else target_point_count
    return _guarded("normalize_path", lambda: _normalize_path(d, target, path_id))


def generate_morphing_ready_svg(
    svg: str,
    options: MorphOptions | None = None,
    config: EngineConfig | None = None,
) -> Outcome[MorphResult]:
    def run() -> MorphResult:
        doc = SvgDocument.parse(svg)
        paths, pairs = prepare_morphing(doc, options, config)
        return MorphResult(svg=doc.serialize(), paths=paths, pairs=pairs)

    return _guarded("generate_morphing_ready_svg", run)


def prepare_strokes(svg: str, options: StrokeOptions | None = None) -> Outcome[StrokeResult]:
    def run() -> StrokeResult:
        doc = SvgDocument.parse(svg)
        lengths = _prepare_strokes(doc, options)
        return StrokeResult(svg=doc.serialize(), lengths=lengths)

    return _guarded("prepare_strokes", run)


def extract_color_palette(svg: str, options: PaletteOptions | None = None) -> Outcome[ColorPalette]:
    return _guarded("extract_color_palette", lambda: extract_palette(SvgDocument.parse(svg), options))


def apply_color_tokens(svg: str, palette: ColorPalette) -> Outcome[str]:
    def run() -> str:
        doc = SvgDocument.parse(svg)
        apply_tokens(doc, palette)
        return doc.serialize()

    return _guarded("apply_color_tokens", run)


def resolve_color_tokens(svg: str, palette: ColorPalette) -> Outcome[str]:
    def run() -> str:
        doc = SvgDocument.parse(svg)
        resolve_tokens(doc, palette)
        return doc.serialize()

    return _guarded("resolve_color_tokens", run)


# ── id stability ─────────────────────────────────────────────────────────


def _assigned_ids(svg: str, prefix: str) -> list[str]:
    doc = SvgDocument.parse(svg)
    assign_semantic_ids(doc, prefix)
    return [doc.get(i, "id") or "" for i in doc.iter_preorder(skip=NON_VISUAL_TAGS)[1:]]


def _stability_recommendations(score: float, variations: list[IdVariation]) -> list[str]:
    recs: list[str] = []
    if score < STABILITY_PASS_SCORE:
        recs.append(f"Consistency score {score:g}% is below required {STABILITY_PASS_SCORE:g}%")
    if variations:
        unstable = sorted({v.expected_id for v in variations})
        recs.append(f"Unstable ids: {', '.join(unstable[:5])}")
    return recs


def check_id_stability(
    svg: str,
    iterations: int = 5,
    prefix: str | None = None,
) -> Outcome[IdStabilityReport]:
    """Assign ids ``iterations`` times on fresh parses and compare by element position."""

    def run() -> IdStabilityReport:
        if iterations < 1:
            raise AnimSvgError("iterations must be at least 1", stage="stability")
        use_prefix = settings.animsvg_id_prefix if prefix is None else prefix
        baseline = _assigned_ids(svg, use_prefix)
        total = passed = 0
        variations: list[IdVariation] = []
        for attempt in range(2, iterations + 1):
            actual = _assigned_ids(svg, use_prefix)
            for position, expected in enumerate(baseline):
                got = actual[position] if position < len(actual) else ""
                total += 1
                if got == expected:
                    passed += 1
                else:
                    variations.append(
                        IdVariation(
                            attempt=attempt,
                            element_index=position,
                            expected_id=expected,
                            actual_id=got,
                            matches=False,
                        )
                    )
        score = round(passed / total * 100, 2) if total else 100.0
        return IdStabilityReport(
            iterations=iterations,
            total_checks=total,
            passed_checks=passed,
            consistency_score=score,
            passed=score >= STABILITY_PASS_SCORE,
            variations=variations,
            recommendations=_stability_recommendations(score, variations),
        )

    return _guarded("check_id_stability", run)
