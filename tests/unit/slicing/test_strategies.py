"""
Tests for layer strategies.
"""

import numpy as np
import pytest
import trimesh

from millpath.core.config import MachiningSettings, Strategy
from millpath.core.mesh import Mesh
from millpath.slicing.strategies import (
    STRATEGY_REGISTRY,
    ContourStrategy,
    ParallelStrategy,
    SpiralStrategy,
    get_strategy,
    spiral_points,
)


@pytest.mark.unit
@pytest.mark.slicing
class TestGetStrategy:
    def test_by_name(self):
        assert isinstance(get_strategy("parallel"), ParallelStrategy)
        assert isinstance(get_strategy(" Spiral "), SpiralStrategy)

    def test_by_enum(self):
        assert isinstance(get_strategy(Strategy.CONTOUR), ContourStrategy)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown toolpath strategy"):
            get_strategy("zigzag")

    def test_registry_covers_enum(self):
        assert set(STRATEGY_REGISTRY) == set(Strategy)


@pytest.mark.unit
@pytest.mark.slicing
class TestParallelStrategy:
    def test_layer_heights(self, box_mesh, settings):
        """Layers run from the bottom while below the top."""
        plans = ParallelStrategy().plan_layers(box_mesh, settings)
        assert [p.z for p in plans] == [float(z) for z in range(-5, 5)]
        assert [p.index for p in plans] == list(range(10))
        assert plans[0].comment == "Layer Z=-5.00"

    def test_bottom_layer_is_empty(self, box_mesh, settings):
        strategy = ParallelStrategy()
        plans = strategy.plan_layers(box_mesh, settings)
        layer = strategy.compute_layer(box_mesh, settings, plans[0])
        assert layer.is_empty

    def test_mid_layer_perimeter(self, box_mesh, settings):
        strategy = ParallelStrategy()
        plans = strategy.plan_layers(box_mesh, settings)
        layer = strategy.compute_layer(box_mesh, settings, plans[5])

        assert layer.z == 0.0
        assert layer.chains == 1
        assert len(layer.points) == 9
        assert layer.metadata["segments"] == 8
        assert layer.get_length() == pytest.approx(80.0)

    def test_compensation_enabled(self, box_mesh):
        settings = MachiningSettings(tool_diameter=2.0, step_down=1.0, tool_compensation=True)
        strategy = ParallelStrategy()
        plan = strategy.plan_layers(box_mesh, settings)[5]
        layer = strategy.compute_layer(box_mesh, settings, plan)

        lo, hi = layer.get_bounds()
        assert lo[0] < -10.0 and hi[0] > 10.0
        assert layer.metadata["compensated"] is True


@pytest.mark.unit
@pytest.mark.slicing
class TestSpiralPoints:
    def test_zero_radius_gives_no_points(self):
        assert spiral_points(np.zeros(3), 0.0, 0.5) == []

    def test_point_count_and_bound(self):
        """Angles step by one degree and stop before 360 * radius / step."""
        points = spiral_points(np.zeros(3), 1.0, 0.5)
        assert len(points) == 720

        pts = np.array(points)
        angles = np.degrees(np.unwrap(np.arctan2(pts[:, 1], pts[:, 0])))
        assert np.all(np.diff(angles) > 0)
        assert angles[-1] == pytest.approx(719.0)

    def test_radius_grows(self):
        points = np.array(spiral_points(np.array([5.0, 5.0, 2.0]), 1.0, 0.5))
        radii = np.linalg.norm(points[:, :2] - 5.0, axis=1)
        assert radii[0] == pytest.approx(1.0)
        assert radii[-1] == pytest.approx(1.0 + 719.0 / 360.0 * 0.5)
        assert np.all(np.diff(radii) > 0)
        assert np.allclose(points[:, 2], 2.0)


@pytest.mark.unit
@pytest.mark.slicing
class TestSpiralStrategy:
    def test_plans(self, box_mesh, settings):
        plans = SpiralStrategy().plan_layers(box_mesh, settings)
        assert len(plans) == 10
        assert [p.radius for p in plans[:3]] == [0.0, 0.5, 1.0]
        assert plans[0].comment == "Spiral layer Z=-5.00"

    def test_first_layer_empty(self, box_mesh, settings):
        strategy = SpiralStrategy()
        plans = strategy.plan_layers(box_mesh, settings)
        assert strategy.compute_layer(box_mesh, settings, plans[0]).is_empty
        assert len(strategy.compute_layer(box_mesh, settings, plans[1]).points) == 360

    def test_stops_at_bounding_radius(self):
        """Layer planning stops once the radius passes the bounding radius."""
        box = trimesh.creation.box(extents=[2, 2, 10])
        mesh = Mesh(box.vertices, box.faces)
        settings = MachiningSettings(step_over=0.9, step_down=0.1)

        plans = SpiralStrategy().plan_layers(mesh, settings)
        assert len(plans) == 6
        assert plans[-1].radius == pytest.approx(4.5)


@pytest.mark.unit
@pytest.mark.slicing
class TestContourStrategy:
    def test_not_implemented_plans_nothing(self, box_mesh, settings):
        strategy = ContourStrategy()
        assert strategy.implemented is False
        assert strategy.plan_layers(box_mesh, settings) == []
