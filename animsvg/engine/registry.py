"""Stage registry — stage functions register themselves with ``@stage``.

Usage:
    @stage(id="S1.01", layer=Layer.OPTIMIZATION, description="Score structural complexity")
    def complexity_analysis(ctx: ProcessingContext) -> None:
        ctx.complexity = analyze_complexity(ctx.document)

Stages always run in (layer, id) order. A stage may only depend on stages that
sort before it, so a plan is a filtered slice of that order and never needs a
graph search. Selecting a stage pulls in everything it depends on.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from animsvg.engine.context import ProcessingContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    STRUCTURE = 0
    OPTIMIZATION = 1
    ANIMATION = 2
    PALETTE = 3


@dataclass(frozen=True)
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["ProcessingContext"], None]
    dependencies: tuple[str, ...] = ()
    # Option flag that must be true on AnimationOptions for the stage to run
    option: str | None = None
    description: str = ""

    @property
    def sort_key(self) -> tuple[int, str]:
        return (int(self.layer), self.id)


class StageRegistry:
    """Stages by id, planned in layer order."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def __len__(self) -> int:
        return len(self._stages)

    def __contains__(self, stage_id: object) -> bool:
        return stage_id in self._stages

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def stages(self, layer: Layer | None = None) -> list[StageSpec]:
        """Registered stages in run order, optionally limited to one layer."""
        specs = [s for s in self._stages.values() if layer is None or s.layer == layer]
        return sorted(specs, key=lambda s: s.sort_key)

    def plan(self, selected: set[str] | None = None) -> list[StageSpec]:
        """Stages to run for ``selected`` (all when None), dependencies included.

        Raises ``ValueError`` for an unknown stage id, or for a dependency that
        is missing or would not run before its dependent.
        """
        wanted = set(self._stages) if selected is None else self._with_dependencies(selected)
        ordered = [s for s in self.stages() if s.id in wanted]
        for spec in ordered:
            for dep in spec.dependencies:
                if dep not in self._stages:
                    raise ValueError(f"{spec.id} depends on unknown stage {dep}")
                if self._stages[dep].sort_key >= spec.sort_key:
                    raise ValueError(f"{spec.id} depends on {dep}, which does not run before it")
        return ordered

    def _with_dependencies(self, selected: set[str]) -> set[str]:
        closure: set[str] = set()
        pending = list(selected)
        while pending:
            sid = pending.pop()
            if sid in closure:
                continue
            if sid not in self._stages:
                raise ValueError(f"Unknown stage: {sid}")
            closure.add(sid)
            pending.extend(self._stages[sid].dependencies)
        return closure


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    option: str | None = None,
    description: str = "",
):
    """Register the decorated function as a stage of the default registry."""

    def decorator(fn: Callable[["ProcessingContext"], None]):
        _registry.register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=tuple(dependencies or ()),
                option=option,
                description=description,
            )
        )
        return fn

    return decorator
