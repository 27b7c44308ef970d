"""Structural reports produced by the engine stages."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ComplexityTier = Literal["low", "medium", "high"]


class ComplexityReport(BaseModel):
    total_nodes: int = 0
    path_nodes: int = 0
    group_nodes: int = 0
    path_commands: int = 0
    max_depth: int = 0
    complexity_score: float = Field(0.0, ge=0.0, le=100.0)
    complexity: ComplexityTier = "low"
    estimated_fps: int = 60
    recommendations: list[str] = Field(default_factory=list)
    potential_reduction: float = Field(0.0, ge=0.0, le=50.0)


class OptimizationResult(BaseModel):
    original_svg: str = ""
    optimized_svg: str = ""
    before: ComplexityReport
    after: ComplexityReport
    reduction_achieved: float = 0.0
    optimizations_applied: list[str] = Field(default_factory=list)


class ElementRecord(BaseModel):
    id: str
    tag: str
    parent_id: str | None = None
    depth: int = 0
    # id/class value the element carried before assignment
    source_id: str | None = None


class IdAssignment(BaseModel):
    id_map: dict[str, str] = Field(default_factory=dict)
    hierarchy: list[ElementRecord] = Field(default_factory=list)


class FlattenSummary(BaseModel):
    transforms_removed: int = 0
    elements_baked: int = 0


class ViewBoxInfo(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 100.0
    height: float = 100.0
    aspect_ratio: float = 1.0
    is_optimized: bool = False


class IdVariation(BaseModel):
    attempt: int
    element_index: int
    expected_id: str
    actual_id: str
    matches: bool


class IdStabilityReport(BaseModel):
    iterations: int
    total_checks: int = 0
    passed_checks: int = 0
    consistency_score: float = 100.0
    passed: bool = True
    variations: list[IdVariation] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
