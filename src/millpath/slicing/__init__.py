"""
Slicing module - Layer toolpath generation for subtractive machining.

- plane_slicer: mesh / horizontal plane intersection segments
- stitcher: head-to-tail chaining of segments into paths
- compensation: tool radius offset of closed paths
- strategies: parallel and spiral layer generators (contour is a stub)
"""

from millpath.slicing.plane_slicer import (
    IntersectionSegment,
    intersect_z_plane,
    slice_mesh,
    slice_triangle,
)
from millpath.slicing.stitcher import STITCH_TOLERANCE, chain_segments, is_closed, stitch_segments
from millpath.slicing.compensation import apply_tool_compensation
from millpath.slicing.toolpath import LayerPlan, ToolpathLayer
from millpath.slicing.strategies import (
    STRATEGY_REGISTRY,
    ContourStrategy,
    ParallelStrategy,
    SpiralStrategy,
    ToolpathStrategy,
    get_strategy,
    spiral_points,
)

__all__ = [
    "IntersectionSegment",
    "intersect_z_plane",
    "slice_mesh",
    "slice_triangle",
    "STITCH_TOLERANCE",
    "chain_segments",
    "is_closed",
    "stitch_segments",
    "apply_tool_compensation",
    "LayerPlan",
    "ToolpathLayer",
    "STRATEGY_REGISTRY",
    "ContourStrategy",
    "ParallelStrategy",
    "SpiralStrategy",
    "ToolpathStrategy",
    "get_strategy",
    "spiral_points",
]
