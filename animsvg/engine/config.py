"""Engine configuration — thresholds for every stage."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Tunable thresholds shared by the stages."""

    # Semantic ids
    wheel_radius_threshold: float = 25.0
    square_ratio_tolerance: float = 0.2
    bar_ratio_threshold: float = 3.0

    # Path normalization / morph pairing
    morph_min_score: float = 50.0
    path_precision: int = 2

    # Node-budget optimizer
    simplify_length_threshold: int = 200
    simplify_precision: int = 2
    tiny_segment_threshold: float = 0.5
    subpixel_size: float = 1.0
    short_path_length: int = 20

    # Palette naming
    palette_name_distance: float = 60.0
    palette_primary_usage: int = 10
    palette_secondary_usage: int = 5

    # ViewBox fitting
    viewbox_padding_fraction: float = 0.05
    viewbox_min_padding: float = 5.0
