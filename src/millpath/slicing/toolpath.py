"""
Toolpath data structures for layer-by-layer milling programs.

A strategy first plans its layers (:class:`LayerPlan`) and then computes each
one independently into a :class:`ToolpathLayer`.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class LayerPlan:
    """
    Description of one layer before its points are computed.

    Attributes:
        index: Position of the layer in the program (0-based)
        z: Layer height (mm), also used as the cut depth
        comment: Text of the comment line written before the layer
        radius: Spiral start radius (mm), None for non-spiral layers
    """

    index: int
    z: float
    comment: str
    radius: Optional[float] = None


@dataclass
class ToolpathLayer:
    """
    Computed points for one layer.

    Attributes:
        index: Position of the layer in the program (0-based)
        z: Layer height (mm)
        comment: Comment line text
        points: Ordered path points as (3,) arrays
        chains: Number of stitched chains merged into ``points``
        metadata: Strategy-specific data
    """

    index: int
    z: float
    comment: str
    points: List[np.ndarray] = field(default_factory=list)
    chains: int = 0
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_plan(cls, plan: LayerPlan, points: List[np.ndarray], **kwargs) -> "ToolpathLayer":
        return cls(index=plan.index, z=plan.z, comment=plan.comment, points=points, **kwargs)

    @property
    def depth(self) -> float:
        return self.z

    @property
    def is_empty(self) -> bool:
        return not self.points

    def get_length(self) -> float:
        """Calculate the cutting length of the layer."""
        if len(self.points) < 2:
            return 0.0
        pts = np.asarray(self.points)
        return float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())

    def get_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get bounding box of the layer points.

        Returns:
            Tuple of (min_point, max_point)
        """
        if not self.points:
            raise ValueError("Layer has no points")
        pts = np.asarray(self.points)
        return pts.min(axis=0), pts.max(axis=0)
