"""Path point, normalized path and morph pair models."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field, model_validator


class PathCommandType(str, enum.Enum):
    MOVE = "M"
    LINE = "L"
    CUBIC = "C"
    QUADRATIC = "Q"
    CLOSE = "Z"


# Number of control points each command carries
CONTROL_POINT_COUNT = {
    PathCommandType.MOVE: 0,
    PathCommandType.LINE: 0,
    PathCommandType.CUBIC: 2,
    PathCommandType.QUADRATIC: 1,
    PathCommandType.CLOSE: 0,
}


class Point(BaseModel):
    x: float
    y: float


class PathPoint(BaseModel):
    x: float
    y: float
    command: PathCommandType
    control_points: list[Point] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_control_points(self) -> PathPoint:
        expected = CONTROL_POINT_COUNT[self.command]
        if len(self.control_points) != expected:
            raise ValueError(
                f"{self.command.value} point needs {expected} control points, "
                f"got {len(self.control_points)}"
            )
        return self

    @property
    def is_curve(self) -> bool:
        return self.command in (PathCommandType.CUBIC, PathCommandType.QUADRATIC)


class Bounds(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class NormalizedPath(BaseModel):
    id: str
    original_path: str
    normalized_path: str
    points: list[PathPoint] = Field(default_factory=list)
    bounds: Bounds = Field(default_factory=Bounds)

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def curve_count(self) -> int:
        return sum(1 for p in self.points if p.is_curve)


class MorphPair(BaseModel):
    source_id: str
    target_id: str
    compatibility: float = Field(..., ge=0.0, le=100.0)
    # Destination outline handed to the animation runtime
    morph_path: str


class StrokeLength(BaseModel):
    element_id: str
    tag: str
    length: float = Field(..., gt=0.0)
    stroke_width: str = "1"
    stroke_color: str
