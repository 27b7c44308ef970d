"""Pipeline orchestrator — runs the planned stages in layer order with option gating."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time
import uuid

from animsvg.engine.config import EngineConfig
from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, StageRegistry, StageSpec, get_registry
from animsvg.errors import AnimSvgError

logger = logging.getLogger(__name__)

_LAYER_PACKAGES = ["layer0", "layer1", "layer2", "layer3"]


class RunLogAdapter(logging.LoggerAdapter):
    """Prefixes every record with the run id."""

    def process(self, msg, kwargs):
        return f"[{self.extra['run_id']}] {msg}", kwargs


def load_stages() -> int:
    """Import every stage module so its decorator registers it."""
    for layer_name in _LAYER_PACKAGES:
        package = importlib.import_module(f"animsvg.engine.{layer_name}")
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"animsvg.engine.{layer_name}.{module_name}")
    return len(get_registry())


class Pipeline:
    """Orchestrates the stage pipeline."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or EngineConfig()

    def run(self, ctx: ProcessingContext, only: set[str] | None = None) -> ProcessingContext:
        """Run the pipeline on ``ctx``.

        With ``only`` the named stages (and their dependencies) run regardless of
        the option flags; otherwise every stage whose option is enabled runs.
        The first failing stage is recorded in ``ctx.errors`` and stops the run.
        """
        start = time.perf_counter()
        run_id = uuid.uuid4().hex[:8]
        ctx.log = RunLogAdapter(logging.getLogger("animsvg.engine"), {"run_id": run_id})
        ctx.config = self.config

        if only is None:
            skip_ids = self._option_gate(ctx)
            requested = {s.id for s in self.registry.stages()} - skip_ids
        else:
            skip_ids = set()
            requested = set(only)
        ordered = self.registry.plan(requested)

        ctx.log.info("Pipeline: %d stages queued (%d skipped)", len(ordered), len(skip_ids))

        for spec in ordered:
            if not self._run_stage(ctx, spec):
                break

        total = (time.perf_counter() - start) * 1000
        ctx.log.info(
            "Pipeline complete: %d/%d stages in %.0fms",
            len(ctx.completed_stages),
            len(ordered),
            total,
        )
        return ctx

    def run_layer(self, ctx: ProcessingContext, layer: Layer) -> ProcessingContext:
        """Run only stages in a specific layer."""
        for spec in self.registry.stages(layer):
            if not self._run_stage(ctx, spec):
                break
        return ctx

    def _run_stage(self, ctx: ProcessingContext, spec: StageSpec) -> bool:
        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
        except AnimSvgError as e:
            ctx.errors[spec.id] = str(e)
            ctx.log.warning("  %s FAILED: %s", spec.id, e)
            return False
        ctx.completed_stages.append(spec.id)
        ctx.log.debug("  %s completed in %.1fms", spec.id, (time.perf_counter() - t0) * 1000)
        return True

    def _option_gate(self, ctx: ProcessingContext) -> set[str]:
        """Stages whose enabling option is switched off."""
        skip: set[str] = set()
        for spec in self.registry.stages():
            if spec.option and not getattr(ctx.options, spec.option):
                skip.add(spec.id)
        return skip


def create_pipeline(config: EngineConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    load_stages()
    return Pipeline(config=config)
