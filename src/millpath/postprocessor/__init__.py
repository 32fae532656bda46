"""
millpath Post Processor Module

Writes layer toolpaths as G-code:
- GRBL (.nc)
- Mach3 (.tap), motion lines terminated with ';'
- LinuxCNC (.ngc)

Also parses cutting moves back out of emitted programs for preview.
"""

from .base import PostProcessorBase, PostProcessorConfig
from .gcode import (
    GCodePostProcessor,
    GRBLPostProcessor,
    LinuxCNCPostProcessor,
    Mach3PostProcessor,
    get_post_processor,
)
from .parser import parse_line, parse_program, preview_points

__all__ = [
    'PostProcessorBase',
    'PostProcessorConfig',
    'GCodePostProcessor',
    'GRBLPostProcessor',
    'Mach3PostProcessor',
    'LinuxCNCPostProcessor',
    'get_post_processor',
    'parse_line',
    'parse_program',
    'preview_points',
]
