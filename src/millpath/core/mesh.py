"""
Mesh model in machining coordinates.

Models arrive from an importer in a Y-up source frame measured in metres.
Machining uses millimetres with Z as the vertical axis, so every source
point is scaled by ``UNIT_SCALE`` and has its second and third coordinates
swapped. The conversion happens once, in :meth:`Mesh.from_source`.
"""

from typing import Any, Sequence, Tuple

import numpy as np

from millpath.core.exceptions import GeometryError

UNIT_SCALE = 1000.0


def to_machining_coordinates(points: Any, scale: float = UNIT_SCALE) -> np.ndarray:
    """
    Convert source-frame points to machining coordinates.

    Args:
        points: (3,) or (n, 3) array-like in source units
        scale: Unit factor applied to every coordinate

    Returns:
        Array of the same shape, ``(x, y, z) -> (s*x, s*z, s*y)``
    """
    points = np.asarray(points, dtype=np.float64)
    return points[..., [0, 2, 1]] * scale


def to_source_coordinates(points: Any, scale: float = UNIT_SCALE) -> np.ndarray:
    """Inverse of :func:`to_machining_coordinates`."""
    points = np.asarray(points, dtype=np.float64)
    return points[..., [0, 2, 1]] / scale


class Mesh:
    """
    Immutable triangle mesh in machining coordinates (mm, Z up).

    Args:
        vertices: (n, 3) vertex positions
        triangles: (m, 3) vertex indices

    Raises:
        GeometryError: If the arrays have the wrong shape or an index is
            out of range
    """

    def __init__(self, vertices: Any, triangles: Any):
        vertices = np.array(vertices, dtype=np.float64)
        triangles = np.array(triangles, dtype=np.int64)
        if vertices.size == 0:
            vertices = np.zeros((0, 3), dtype=np.float64)
        if triangles.size == 0:
            triangles = np.zeros((0, 3), dtype=np.int64)

        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise GeometryError("Vertices must be an (n, 3) array")
        if triangles.ndim != 2 or triangles.shape[1] != 3:
            raise GeometryError("Triangles must be an (m, 3) array of indices")
        if len(triangles) and (triangles.min() < 0 or triangles.max() >= len(vertices)):
            raise GeometryError(
                "Triangle index out of range",
                details={
                    "vertex_count": len(vertices),
                    "min_index": int(triangles.min()),
                    "max_index": int(triangles.max()),
                },
            )

        vertices.flags.writeable = False
        triangles.flags.writeable = False
        self._vertices = vertices
        self._triangles = triangles

    @classmethod
    def from_source(
        cls,
        vertices: Sequence[Sequence[float]],
        triangles: Sequence[Sequence[int]],
        scale: float = UNIT_SCALE,
    ) -> "Mesh":
        """Build a mesh from source-frame vertices, converting axes once."""
        if len(vertices) == 0:
            return cls([], triangles)
        return cls(to_machining_coordinates(vertices, scale), triangles)

    @classmethod
    def from_trimesh(cls, tmesh: Any, scale: float = UNIT_SCALE) -> "Mesh":
        """Build a mesh from a ``trimesh.Trimesh`` in source coordinates."""
        return cls.from_source(
            np.asarray(tmesh.vertices), np.asarray(tmesh.faces), scale=scale
        )

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    @property
    def triangles(self) -> np.ndarray:
        return self._triangles

    @property
    def is_empty(self) -> bool:
        return len(self._vertices) == 0 or len(self._triangles) == 0

    @property
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Axis-aligned bounds as ``(min_xyz, max_xyz)``.

        Raises:
            GeometryError: If the mesh has no vertices
        """
        if len(self._vertices) == 0:
            raise GeometryError("Mesh has no vertices")
        return self._vertices.min(axis=0), self._vertices.max(axis=0)

    @property
    def center(self) -> np.ndarray:
        lo, hi = self.bounds
        return (lo + hi) / 2.0

    @property
    def extents(self) -> np.ndarray:
        """Half size of the bounding box along each axis."""
        lo, hi = self.bounds
        return (hi - lo) / 2.0

    @property
    def bounding_radius(self) -> float:
        """Radius of the sphere through the bounding box corners."""
        return float(np.linalg.norm(self.extents))

    def triangle_vertices(self) -> np.ndarray:
        """Vertex positions per triangle as an (m, 3, 3) array."""
        return self._vertices[self._triangles]

    def __len__(self) -> int:
        return len(self._triangles)

    def __repr__(self) -> str:
        return f"Mesh(vertices={len(self._vertices)}, triangles={len(self._triangles)})"
