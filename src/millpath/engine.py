"""
Toolpath engine: mesh + settings -> G-code program.

Chains: validate settings -> plan layers -> compute layers -> emit program

An engine is built for one generation call and holds no global state. Layer
computation only reads the immutable mesh and settings, so it may run on a
thread pool; the program is always emitted in planned layer order.

Usage:
    engine = ToolpathEngine(settings, observer=my_observer, max_workers=4)
    result = engine.generate(mesh)
    text = result.program
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from millpath.core.config import MachiningSettings, validate_settings
from millpath.core.exceptions import GenerationCancelled, InvalidSettingsError
from millpath.core.logging import get_logger
from millpath.core.mesh import Mesh
from millpath.postprocessor.gcode import get_post_processor
from millpath.slicing.strategies import get_strategy
from millpath.slicing.toolpath import LayerPlan, ToolpathLayer

logger = get_logger(__name__)


class GenerationObserver(Protocol):
    """Receives progress notifications synchronously from the engine."""

    def on_layer_complete(self, layer: ToolpathLayer) -> None:
        ...

    def on_validation_failure(self, errors: List[str]) -> None:
        ...


class LoggingObserver:
    """Observer that reports through the structured logger."""

    def on_layer_complete(self, layer: ToolpathLayer) -> None:
        logger.debug(
            "layer_complete",
            layer=layer.index,
            z=round(layer.z, 4),
            points=len(layer.points),
        )

    def on_validation_failure(self, errors: List[str]) -> None:
        logger.error("settings_invalid", errors=errors)


@dataclass
class GenerationResult:
    """Result of one generation call."""

    program: str
    layers: List[ToolpathLayer] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)

    @property
    def lines(self) -> List[str]:
        return self.program.splitlines()

    @property
    def emitted_layers(self) -> List[ToolpathLayer]:
        return [layer for layer in self.layers if not layer.is_empty]


class ToolpathEngine:
    """
    Generate a milling program for one mesh.

    Args:
        settings: Fully populated machining settings
        observer: Receives layer and validation notifications
        max_workers: Threads used for layer computation (1 = sequential)
        cancel_event: When set, generation stops before the next layer
    """

    def __init__(
        self,
        settings: MachiningSettings,
        observer: Optional[GenerationObserver] = None,
        max_workers: int = 1,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.settings = settings
        self.observer = observer or LoggingObserver()
        self.max_workers = max(1, int(max_workers))
        self.cancel_event = cancel_event

    def generate(self, mesh: Optional[Mesh]) -> GenerationResult:
        """
        Validate settings, compute every layer and emit the program.

        Args:
            mesh: Mesh in machining coordinates; None or an empty mesh yields
                a program with header and footer only

        Returns:
            GenerationResult with program text and computed layers

        Raises:
            InvalidSettingsError: If settings fail validation (nothing is
                emitted)
            GenerationCancelled: If the cancel event is set mid-run
        """
        validation = validate_settings(self.settings)
        if not validation.ok:
            self.observer.on_validation_failure(validation.errors)
            raise InvalidSettingsError(
                "Invalid machining settings",
                errors=validation.errors,
                details={"errors": validation.errors},
            )

        t0 = time.perf_counter()
        post = get_post_processor(self.settings.post_processor)
        strategy = get_strategy(self.settings.strategy)

        if mesh is None or mesh.is_empty:
            logger.warning("mesh_empty", strategy=strategy.strategy.value)
            plans: List[LayerPlan] = []
        else:
            plans = strategy.plan_layers(mesh, self.settings)

        layers: List[ToolpathLayer] = []

        def completed():
            for layer in self._compute_layers(strategy, mesh, plans):
                layers.append(layer)
                self.observer.on_layer_complete(layer)
                yield layer

        program = post.build_program(self.settings, completed())
        duration = time.perf_counter() - t0
        statistics = {
            "strategy": strategy.strategy.value,
            "postProcessor": post.format_name,
            "totalLayers": len(layers),
            "emittedLayers": sum(1 for layer in layers if not layer.is_empty),
            "totalPoints": sum(len(layer.points) for layer in layers),
            "totalLines": len(program.splitlines()),
            "duration_s": duration,
        }
        logger.info(
            "generation_complete",
            strategy=statistics["strategy"],
            layers=statistics["totalLayers"],
            points=statistics["totalPoints"],
            duration_s=round(duration, 3),
        )
        return GenerationResult(program=program, layers=layers, statistics=statistics)

    def _check_cancelled(self, completed: int) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            logger.info("generation_cancelled", completed_layers=completed)
            raise GenerationCancelled(
                "Toolpath generation cancelled", completed_layers=completed
            )

    def _compute_layers(self, strategy, mesh, plans: List[LayerPlan]):
        """Yield computed layers in plan order."""
        if self.max_workers == 1 or len(plans) < 2:
            for i, plan in enumerate(plans):
                self._check_cancelled(i)
                yield strategy.compute_layer(mesh, self.settings, plan)
            return

        def compute(plan: LayerPlan) -> ToolpathLayer:
            if self.cancel_event is not None and self.cancel_event.is_set():
                return ToolpathLayer.from_plan(plan, [])
            return strategy.compute_layer(mesh, self.settings, plan)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(compute, plan) for plan in plans]
            try:
                for i, future in enumerate(futures):
                    self._check_cancelled(i)
                    yield future.result()
            finally:
                for future in futures:
                    future.cancel()


def generate_program(
    mesh: Optional[Mesh],
    settings: MachiningSettings,
    observer: Optional[GenerationObserver] = None,
    max_workers: int = 1,
) -> str:
    """Generate program text for ``mesh``; see :class:`ToolpathEngine`."""
    engine = ToolpathEngine(settings, observer=observer, max_workers=max_workers)
    return engine.generate(mesh).program
