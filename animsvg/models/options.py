"""Option models for the public operations."""

from __future__ import annotations

from pydantic import BaseModel, Field

from animsvg.config import settings


class PerformanceOptions(BaseModel):
    target_reduction: float = Field(30.0, ge=0.0, le=100.0, description="Percent of elements to remove")
    remove_redundant_groups: bool = True
    merge_paths: bool = True
    simplify_paths: bool = True
    enable_node_reduction: bool = True


class MorphOptions(BaseModel):
    target_point_count: int = Field(default_factory=lambda: settings.animsvg_morph_point_count, ge=1)
    apply_normalized_paths: bool = Field(
        default=True,
        description="Rewrite each path's d with its normalized outline",
    )
    annotate_pairs: bool = True


class StrokeOptions(BaseModel):
    add_path_lengths: bool = Field(True, description="Write data-length with the outline length")
    setup_draw_on: bool = Field(True, description="Set dasharray and dashoffset to the rounded-up length")
    mark_expandable_strokes: bool = False


class PaletteOptions(BaseModel):
    max_colors: int = Field(10, ge=1)
    min_usage: int = Field(1, ge=1)
    generate_semantic_names: bool = True
    variable_prefix: str = "color-"
    group_similar_colors: bool = False
    color_tolerance: float = Field(30.0, ge=0.0)


class AnimationOptions(BaseModel):
    id_prefix: str = Field(default_factory=lambda: settings.animsvg_id_prefix)
    generate_stable_ids: bool = True
    flatten_transforms: bool = True
    optimize_view_box: bool = False
    optimize_performance: bool = False
    performance: PerformanceOptions = Field(default_factory=PerformanceOptions)
    normalize_paths: bool = False
    morph: MorphOptions = Field(default_factory=MorphOptions)
    prepare_strokes: bool = False
    strokes: StrokeOptions = Field(default_factory=StrokeOptions)
    extract_palette: bool = False
    palette: PaletteOptions = Field(default_factory=PaletteOptions)
    apply_color_tokens: bool = False
