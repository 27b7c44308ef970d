"""animsvg stage engine."""

from animsvg.engine.registry import stage, Layer, get_registry
from animsvg.engine.context import ProcessingContext
from animsvg.engine.outcome import Outcome
from animsvg.engine.pipeline import Pipeline, create_pipeline, load_stages

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "ProcessingContext",
    "Outcome",
    "Pipeline",
    "create_pipeline",
    "load_stages",
]
