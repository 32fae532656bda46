"""
Layer strategies for milling toolpaths.

Each strategy splits its work into two steps:

- ``plan_layers`` walks the layer heights and returns an ordered list of
  :class:`LayerPlan`. It is cheap and sequential.
- ``compute_layer`` turns one plan into a :class:`ToolpathLayer`. It reads
  only the immutable mesh and settings, so layers may be computed in any
  order or concurrently.

Available strategies:

- ``parallel``: slice, stitch and optionally compensate each layer
- ``spiral``: Archimedean spiral around the mesh centre, growing per layer
- ``contour``: not implemented, plans no layers
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Type, Union

import numpy as np

from millpath.core.config import MachiningSettings, Strategy
from millpath.core.logging import get_logger
from millpath.core.mesh import Mesh
from millpath.slicing.compensation import apply_tool_compensation
from millpath.slicing.plane_slicer import slice_mesh
from millpath.slicing.stitcher import chain_segments
from millpath.slicing.toolpath import LayerPlan, ToolpathLayer

logger = get_logger(__name__)


class ToolpathStrategy(ABC):
    """Base class for layer strategies."""

    strategy: Strategy
    implemented: bool = True

    @abstractmethod
    def plan_layers(self, mesh: Mesh, settings: MachiningSettings) -> List[LayerPlan]:
        """Return the layers of the program in emission order."""
        ...

    @abstractmethod
    def compute_layer(
        self, mesh: Mesh, settings: MachiningSettings, plan: LayerPlan
    ) -> ToolpathLayer:
        """Compute the points of one planned layer."""
        ...


class ParallelStrategy(ToolpathStrategy):
    """
    Contour-following layers from the bottom of the mesh upward.

    Heights start at the lowest vertex and advance by ``step_down`` while
    they stay below the highest vertex.
    """

    strategy = Strategy.PARALLEL

    def plan_layers(self, mesh: Mesh, settings: MachiningSettings) -> List[LayerPlan]:
        lo, hi = mesh.bounds
        z_max = float(hi[2])
        current_z = float(lo[2])

        plans = []
        while current_z < z_max:
            plans.append(
                LayerPlan(
                    index=len(plans),
                    z=current_z,
                    comment=f"Layer Z={current_z:.2f}",
                )
            )
            current_z += settings.step_down
        return plans

    def compute_layer(
        self, mesh: Mesh, settings: MachiningSettings, plan: LayerPlan
    ) -> ToolpathLayer:
        segments = slice_mesh(mesh, plan.z)
        chains = chain_segments(segments)
        points = [p for chain in chains for p in chain]

        if settings.tool_compensation and points:
            points = apply_tool_compensation(points, settings.tool_radius)

        return ToolpathLayer.from_plan(
            plan,
            points,
            chains=len(chains),
            metadata={
                "segments": len(segments),
                "compensated": settings.tool_compensation,
            },
        )


def spiral_points(center, radius: float, step: float) -> List[np.ndarray]:
    """
    Archimedean spiral starting at ``radius`` and growing by ``step`` per turn.

    Angles run from 0 in 1 degree increments while
    ``angle < 360 * radius / step``, so a zero radius gives no points.

    Args:
        center: (3,) spiral centre, its Z is copied to every point
        radius: Start radius (mm)
        step: Radius growth per full turn (mm)

    Returns:
        List of (3,) points
    """
    limit = 360.0 * (radius / step)
    angles = np.arange(0.0, limit, 1.0) if limit > 0 else np.zeros(0)
    r = radius + angles / 360.0 * step
    theta = np.radians(angles)

    points = np.column_stack([
        center[0] + r * np.cos(theta),
        center[1] + r * np.sin(theta),
        np.full(len(angles), center[2]),
    ])
    return list(points)


class SpiralStrategy(ToolpathStrategy):
    """
    Spiral infill whose start radius grows by ``step_over`` each layer.

    Layers stop once the height reaches the top of the mesh or the radius
    passes the bounding sphere radius.
    """

    strategy = Strategy.SPIRAL

    def plan_layers(self, mesh: Mesh, settings: MachiningSettings) -> List[LayerPlan]:
        lo, hi = mesh.bounds
        z_max = float(hi[2])
        max_radius = mesh.bounding_radius
        current_z = float(lo[2])
        radius = 0.0

        plans = []
        while current_z < z_max:
            plans.append(
                LayerPlan(
                    index=len(plans),
                    z=current_z,
                    comment=f"Spiral layer Z={current_z:.2f}",
                    radius=radius,
                )
            )
            radius += settings.step_over
            current_z += settings.step_down
            if radius > max_radius:
                break
        return plans

    def compute_layer(
        self, mesh: Mesh, settings: MachiningSettings, plan: LayerPlan
    ) -> ToolpathLayer:
        points = spiral_points(mesh.center, plan.radius or 0.0, settings.step_over)
        return ToolpathLayer.from_plan(
            plan, points, chains=1 if points else 0, metadata={"radius": plan.radius}
        )


class ContourStrategy(ToolpathStrategy):
    """
    Perimeter tracing with path-length optimised ordering.

    Not implemented: no layers are planned, so programs built with this
    strategy hold only the header and footer.
    """

    strategy = Strategy.CONTOUR
    implemented = False

    def plan_layers(self, mesh: Mesh, settings: MachiningSettings) -> List[LayerPlan]:
        logger.warning("strategy_not_implemented", strategy=self.strategy.value)
        return []

    def compute_layer(
        self, mesh: Mesh, settings: MachiningSettings, plan: LayerPlan
    ) -> ToolpathLayer:
        return ToolpathLayer.from_plan(plan, [])


STRATEGY_REGISTRY: Dict[Strategy, Type[ToolpathStrategy]] = {
    Strategy.PARALLEL: ParallelStrategy,
    Strategy.SPIRAL: SpiralStrategy,
    Strategy.CONTOUR: ContourStrategy,
}


def get_strategy(strategy: Union[str, Strategy]) -> ToolpathStrategy:
    """
    Create a strategy instance.

    Args:
        strategy: A :class:`Strategy` or its name ('parallel', 'spiral',
            'contour'), case-insensitive

    Returns:
        Strategy instance

    Raises:
        ValueError: If the name is not registered

    Examples:
        >>> get_strategy("spiral").strategy
        <Strategy.SPIRAL: 'spiral'>
    """
    if not isinstance(strategy, Strategy):
        name = str(strategy).strip().lower()
        try:
            strategy = Strategy(name)
        except ValueError:
            available = ", ".join(sorted(s.value for s in STRATEGY_REGISTRY))
            raise ValueError(
                f"Unknown toolpath strategy '{name}'. "
                f"Available strategies: {available}"
            ) from None

    strategy_cls = STRATEGY_REGISTRY[strategy]
    logger.debug("strategy_created", strategy=strategy.value, cls=strategy_cls.__name__)
    return strategy_cls()
