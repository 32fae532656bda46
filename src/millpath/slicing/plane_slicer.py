"""
Horizontal plane slicing of triangle meshes.

Intersects every triangle of a :class:`~millpath.core.mesh.Mesh` with the
plane ``Z = z`` and returns one segment per properly crossed triangle.
The machining Z axis is used both for the crossing test here and for the
layer heights chosen by the strategies.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from millpath.core.logging import get_logger
from millpath.core.mesh import Mesh

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class IntersectionSegment:
    """Ordered pair of points where a plane crosses one triangle."""

    start: np.ndarray
    end: np.ndarray

    def reversed(self) -> "IntersectionSegment":
        return IntersectionSegment(start=self.end, end=self.start)

    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))


def straddles(z1: float, z2: float, z: float) -> bool:
    """
    True if an edge with endpoint heights ``z1`` and ``z2`` crosses ``z``.

    A vertex lying exactly on the plane counts as above it, so an edge
    touching the plane at one end only crosses when the other end is below.
    """
    return (z1 - z >= 0) != (z2 - z >= 0)


def intersect_z_plane(p1: np.ndarray, p2: np.ndarray, z: float) -> Optional[np.ndarray]:
    """
    Point where the edge ``p1 -> p2`` meets the plane at height ``z``.

    Args:
        p1: Edge start (x, y, z)
        p2: Edge end (x, y, z)
        z: Plane height

    Returns:
        Crossing point with its Z set to ``z``, or None when the edge is
        parallel to the plane
    """
    dz = p2[2] - p1[2]
    if dz == 0:
        return None
    t = (z - p1[2]) / dz
    if not math.isfinite(t):
        return None
    return np.array(
        [p1[0] + t * (p2[0] - p1[0]), p1[1] + t * (p2[1] - p1[1]), z],
        dtype=np.float64,
    )


def _orient(segment: IntersectionSegment, a, b, c) -> IntersectionSegment:
    # outward normal must lie to the right of the direction when seen from +Z
    normal = np.cross(b - a, c - a)
    direction = segment.end - segment.start
    if direction[0] * normal[1] - direction[1] * normal[0] > 0:
        return segment.reversed()
    return segment


def slice_triangle(
    a: np.ndarray, b: np.ndarray, c: np.ndarray, z: float
) -> Optional[IntersectionSegment]:
    """
    Intersect one triangle with the plane at height ``z``.

    Edges are tested in the order (a, b), (b, c), (c, a). A segment is
    produced only when exactly two of them cross the plane.

    Returns:
        Oriented segment, or None if the triangle does not properly cross
    """
    points = []
    for p, q in ((a, b), (b, c), (c, a)):
        if straddles(p[2], q[2], z):
            crossing = intersect_z_plane(p, q, z)
            if crossing is not None:
                points.append(crossing)

    if len(points) != 2:
        return None
    return _orient(IntersectionSegment(points[0], points[1]), a, b, c)


def slice_mesh(mesh: Mesh, z: float) -> List[IntersectionSegment]:
    """
    Intersect every triangle of ``mesh`` with the plane at height ``z``.

    Args:
        mesh: Mesh in machining coordinates
        z: Plane height (mm)

    Returns:
        Unordered list of segments, at most one per triangle
    """
    if mesh.is_empty:
        return []

    corners = mesh.triangle_vertices()
    heights = corners[:, :, 2]
    # cheap rejection of triangles entirely above or below the plane
    candidates = np.nonzero(
        (heights.min(axis=1) < z) & (heights.max(axis=1) >= z)
    )[0]

    segments = []
    for index in candidates:
        a, b, c = corners[index]
        segment = slice_triangle(a, b, c, z)
        if segment is not None:
            segments.append(segment)

    logger.debug(
        "plane_sliced", z=round(float(z), 4), candidates=len(candidates), segments=len(segments)
    )
    return segments
