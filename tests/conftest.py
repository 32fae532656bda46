"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest
import trimesh

from millpath.core.config import MachiningSettings
from millpath.core.mesh import Mesh


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def box_mesh():
    """Closed 20 x 20 x 10 mm box centred on the origin, machining coordinates."""
    box = trimesh.creation.box(extents=[20, 20, 10])
    return Mesh(box.vertices, box.faces)


@pytest.fixture
def quad_mesh():
    """Vertical 10 x 10 mm square in the XZ plane made of two triangles."""
    vertices = [
        [0.0, 0.0, 0.0],
        [10.0, 0.0, 0.0],
        [10.0, 0.0, 10.0],
        [0.0, 0.0, 10.0],
    ]
    triangles = [[0, 1, 2], [0, 2, 3]]
    return Mesh(vertices, triangles)


@pytest.fixture
def settings():
    """Valid settings with round numbers for easy assertions."""
    return MachiningSettings(
        tool_diameter=2.0,
        step_over=0.5,
        step_down=1.0,
        spindle_speed=12000,
        safe_height=5.0,
    )


@pytest.fixture
def sample_settings_file(temp_dir):
    """Write a settings YAML file and return its path."""
    settings_yaml = """
machining:
  tool_diameter: 3.0
  step_over: 0.4
  step_down: 0.5
  spindle_speed: 18000
  safe_height: 8.0
  strategy: Spiral
  post_processor: MACH3
  tool_compensation: true
"""
    path = temp_dir / "settings.yaml"
    path.write_text(settings_yaml)
    return path
