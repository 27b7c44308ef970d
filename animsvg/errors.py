"""Typed failures raised by the engine's low-level helpers."""

from __future__ import annotations


class AnimSvgError(Exception):
    """Base class for every failure the engine reports."""

    stage: str = "engine"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class SvgParseError(AnimSvgError):
    stage = "parse"


class PathSyntaxError(AnimSvgError):
    stage = "path"


class TransformSyntaxError(AnimSvgError):
    stage = "transform"


class StageError(AnimSvgError):
    """A pipeline stage failed; wraps the underlying engine error."""

    stage = "pipeline"
