"""ProcessingContext — the single mutable state object flowing through all stages.

The document arena is mutated in place by tree-writing stages; every report
is written once by the stage that owns it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from animsvg.engine.config import EngineConfig
from animsvg.models.options import AnimationOptions
from animsvg.models.palette import ColorPalette
from animsvg.models.paths import MorphPair, NormalizedPath, StrokeLength
from animsvg.models.reports import (
    ComplexityReport,
    FlattenSummary,
    IdAssignment,
    OptimizationResult,
    ViewBoxInfo,
)
from animsvg.svg.document import SvgDocument


@dataclass
class ProcessingContext:
    """Shared state for one pipeline invocation."""

    document: SvgDocument
    options: AnimationOptions = field(default_factory=AnimationOptions)
    config: EngineConfig = field(default_factory=EngineConfig)
    # Injected by the pipeline; carries the run id
    log: logging.Logger | logging.LoggerAdapter = field(
        default_factory=lambda: logging.getLogger("animsvg.engine")
    )

    # --- Layer 0: structure ---
    id_assignment: IdAssignment | None = None
    flatten_summary: FlattenSummary | None = None
    view_box: ViewBoxInfo | None = None

    # --- Layer 1: complexity ---
    complexity: ComplexityReport | None = None
    optimization: OptimizationResult | None = None

    # --- Layer 2: animation ---
    normalized_paths: list[NormalizedPath] = field(default_factory=list)
    morph_pairs: list[MorphPair] = field(default_factory=list)
    stroke_lengths: list[StrokeLength] = field(default_factory=list)

    # --- Layer 3: palette ---
    palette: ColorPalette | None = None

    # --- Pipeline metadata ---
    completed_stages: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return bool(self.errors)
