"""
Tests for the mesh model and axis conversion.
"""

import numpy as np
import pytest

from millpath.core.exceptions import GeometryError
from millpath.core.mesh import Mesh, to_machining_coordinates, to_source_coordinates


@pytest.mark.unit
class TestAxisConversion:
    """Tests for source <-> machining coordinate conversion."""

    def test_scales_and_swaps(self):
        """Y-up metres become Z-up millimetres."""
        result = to_machining_coordinates([0.5, 0.3, 0.8])
        assert np.allclose(result, [500.0, 800.0, 300.0])

    def test_batch_conversion(self):
        """(n, 3) arrays convert row by row."""
        points = np.array([[1.0, 2.0, 3.0], [-1.0, 0.0, 0.25]])
        result = to_machining_coordinates(points)
        assert result.shape == (2, 3)
        assert np.allclose(result[1], [-1000.0, 250.0, 0.0])

    def test_inverse_recovers_original(self):
        """Converting there and back is the identity."""
        rng = np.random.default_rng(7)
        points = rng.uniform(-2.0, 2.0, size=(50, 3))
        restored = to_source_coordinates(to_machining_coordinates(points))
        assert np.allclose(restored, points)

    def test_custom_scale(self):
        """Scale factor is configurable."""
        result = to_machining_coordinates([1.0, 2.0, 3.0], scale=1.0)
        assert np.allclose(result, [1.0, 3.0, 2.0])


@pytest.mark.unit
class TestMesh:
    """Tests for Mesh construction and derived properties."""

    def test_from_source_converts_once(self):
        """from_source applies the axis conversion to every vertex."""
        mesh = Mesh.from_source(
            [[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]],
            [[0, 1, 2], [0, 2, 3]],
        )
        assert np.allclose(mesh.vertices[2], [0.0, 0.0, 1000.0])
        assert np.allclose(mesh.vertices[3], [0.0, 1000.0, 0.0])

    def test_bounds_and_center(self, box_mesh):
        """Bounds, centre and extents of a centred box."""
        lo, hi = box_mesh.bounds
        assert np.allclose(lo, [-10, -10, -5])
        assert np.allclose(hi, [10, 10, 5])
        assert np.allclose(box_mesh.center, [0, 0, 0])
        assert np.allclose(box_mesh.extents, [10, 10, 5])

    def test_bounding_radius(self, box_mesh):
        """Bounding radius is the half diagonal of the box."""
        assert box_mesh.bounding_radius == pytest.approx(15.0)

    def test_index_out_of_range(self):
        """Triangle indices must reference existing vertices."""
        with pytest.raises(GeometryError):
            Mesh([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, 3]])

    def test_negative_index(self):
        """Negative indices are rejected."""
        with pytest.raises(GeometryError):
            Mesh([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, -1]])

    def test_bad_vertex_shape(self):
        """Vertices must have three coordinates."""
        with pytest.raises(GeometryError):
            Mesh([[0, 0], [1, 0], [0, 1]], [[0, 1, 2]])

    def test_arrays_are_read_only(self, quad_mesh):
        """The mesh cannot be mutated through its arrays."""
        with pytest.raises(ValueError):
            quad_mesh.vertices[0, 0] = 99.0
        with pytest.raises(ValueError):
            quad_mesh.triangles[0, 0] = 1

    def test_input_is_copied(self):
        """Changing the caller's array does not change the mesh."""
        vertices = np.array([[0.0, 0, 0], [1, 0, 0], [0, 1, 0]])
        mesh = Mesh(vertices, [[0, 1, 2]])
        vertices[0, 0] = 5.0
        assert mesh.vertices[0, 0] == 0.0

    def test_empty_mesh(self):
        """An empty mesh is allowed but has no bounds."""
        mesh = Mesh([], [])
        assert mesh.is_empty
        assert len(mesh) == 0
        with pytest.raises(GeometryError):
            _ = mesh.bounds

    def test_triangle_vertices(self, quad_mesh):
        """Per-triangle corner array has shape (m, 3, 3)."""
        corners = quad_mesh.triangle_vertices()
        assert corners.shape == (2, 3, 3)
        assert np.allclose(corners[1][1], [10.0, 0.0, 10.0])
