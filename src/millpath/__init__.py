"""
millpath - Mesh to G-code toolpath engine for 3-axis CNC milling.

Slices a triangle mesh into horizontal layers, stitches each layer into a
continuous path, optionally offsets it by the tool radius and writes the
result as G-code for GRBL, Mach3 or LinuxCNC controllers.
"""

__version__ = "0.1.0"
__author__ = "millpath Contributors"

from millpath.core.config import MachiningSettings, validate_settings
from millpath.core.mesh import Mesh
from millpath.engine import ToolpathEngine, generate_program
from millpath.postprocessor.parser import parse_program

__all__ = [
    "__version__",
    "MachiningSettings",
    "Mesh",
    "ToolpathEngine",
    "generate_program",
    "parse_program",
    "validate_settings",
]
