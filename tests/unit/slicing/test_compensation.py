"""
Tests for tool radius compensation.
"""

import numpy as np
import pytest

from millpath.slicing.compensation import apply_tool_compensation, offset_direction
from millpath.slicing.plane_slicer import slice_mesh
from millpath.slicing.stitcher import stitch_segments


def pts(*coords):
    return [np.array(c, dtype=float) for c in coords]


@pytest.mark.unit
@pytest.mark.slicing
class TestApplyToolCompensation:
    """Offset distance and direction checks."""

    def test_offset_distance_equals_radius(self):
        """Every point of a non-degenerate path moves by the radius."""
        path = pts([0, 0, 0], [10, 0, 0], [10, 10, 0])
        result = apply_tool_compensation(path, 1.0)

        assert len(result) == 3
        for before, after in zip(path, result):
            assert np.linalg.norm(after - before) == pytest.approx(1.0, abs=0.1)

    def test_offset_is_horizontal(self):
        """Compensation never changes Z."""
        path = pts([0, 0, 2], [10, 0, 2], [10, 10, 2], [0, 10, 2])
        result = apply_tool_compensation(path, 0.5)
        assert all(p[2] == 2.0 for p in result)

    def test_counter_clockwise_square_grows(self):
        """A counter-clockwise square is offset outward."""
        path = pts([0, 0, 0], [10, 0, 0], [10, 10, 0], [0, 10, 0])
        result = np.array(apply_tool_compensation(path, 1.0))
        s = np.sqrt(0.5)
        assert np.allclose(result[0], [-s, -s, 0])
        assert np.allclose(result[2], [10 + s, 10 + s, 0])

    def test_input_not_modified(self):
        path = pts([0, 0, 0], [10, 0, 0], [10, 10, 0])
        apply_tool_compensation(path, 1.0)
        assert np.allclose(path[1], [10, 0, 0])

    def test_empty_path(self):
        assert apply_tool_compensation([], 1.0) == []

    def test_coincident_points_no_nan(self):
        """A path collapsed to a point stays where it is."""
        path = pts([1, 1, 0], [1, 1, 0], [1, 1, 0])
        result = apply_tool_compensation(path, 1.0)
        assert np.all(np.isfinite(np.array(result)))
        assert np.allclose(result, path)

    def test_reversal_is_skipped(self):
        """A two-point ring has opposing directions at both points."""
        path = pts([0, 0, 0], [10, 0, 0])
        result = apply_tool_compensation(path, 1.0)
        assert np.allclose(result, path)

    def test_box_perimeter(self, box_mesh):
        """Compensated box perimeter lies one radius outside the box."""
        path = stitch_segments(slice_mesh(box_mesh, 0.0))
        result = apply_tool_compensation(path, 1.0)

        for before, after in zip(path, result):
            assert np.linalg.norm(after - before) == pytest.approx(1.0)
        xy = np.abs(np.array(result)[:, :2])
        assert np.all(xy.max(axis=1) > 10.0)


@pytest.mark.unit
@pytest.mark.slicing
class TestOffsetDirection:
    def test_straight_line(self):
        """On a straight run the offset is perpendicular to the right."""
        d = offset_direction(np.zeros(3), np.array([1.0, 0, 0]), np.array([2.0, 0, 0]))
        assert np.allclose(d, [0, -1, 0])

    def test_undefined(self):
        d = offset_direction(np.zeros(3), np.zeros(3), np.zeros(3))
        assert not d.any()
