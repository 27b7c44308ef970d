"""Results returned by the public operations."""

from __future__ import annotations

from pydantic import BaseModel, Field

from animsvg.models.palette import ColorPalette
from animsvg.models.paths import MorphPair, NormalizedPath, StrokeLength
from animsvg.models.reports import (
    ComplexityReport,
    ComplexityTier,
    ElementRecord,
    OptimizationResult,
    ViewBoxInfo,
)


class IdResult(BaseModel):
    svg: str
    id_map: dict[str, str] = Field(default_factory=dict)
    hierarchy: list[ElementRecord] = Field(default_factory=list)


class FlattenResult(BaseModel):
    svg: str
    transforms_removed: int = 0
    elements_baked: int = 0


class ViewBoxResult(BaseModel):
    svg: str
    view_box: ViewBoxInfo


class MorphResult(BaseModel):
    svg: str
    paths: list[NormalizedPath] = Field(default_factory=list)
    pairs: list[MorphPair] = Field(default_factory=list)


class StrokeResult(BaseModel):
    svg: str
    lengths: list[StrokeLength] = Field(default_factory=list)


class AnimationMetadata(BaseModel):
    element_count: int = 0
    group_count: int = 0
    path_count: int = 0
    has_transforms: bool = False
    complexity: ComplexityTier = "low"
    animation_readiness: int = Field(0, ge=0, le=100)
    id_map: dict[str, str] = Field(default_factory=dict)
    hierarchy: list[ElementRecord] = Field(default_factory=list)
    view_box: ViewBoxInfo | None = None
    complexity_report: ComplexityReport | None = None
    optimization: OptimizationResult | None = None
    normalized_paths: list[NormalizedPath] = Field(default_factory=list)
    morph_pairs: list[MorphPair] = Field(default_factory=list)
    stroke_lengths: list[StrokeLength] = Field(default_factory=list)
    palette: ColorPalette | None = None
    completed_stages: list[str] = Field(default_factory=list)


class ProcessedSvg(BaseModel):
    svg: str
    metadata: AnimationMetadata
