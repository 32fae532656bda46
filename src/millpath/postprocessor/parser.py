"""
Recover cutting points from emitted G-code for preview.

Only horizontal cutting moves (lines starting with ``G1 X``) are read. X, Y
and Z words are parsed and any missing axis is reported as 0, so the result
is a lossy reconstruction rather than a machine-state interpreter. Lines that
do not match are skipped; parsing never fails.
"""

import math
from typing import Iterable, List, Optional, Union

import numpy as np

from millpath.core.logging import get_logger
from millpath.core.mesh import UNIT_SCALE, to_source_coordinates

logger = get_logger(__name__)

CUT_PREFIX = "G1 X"
COMMENT_CHAR = ";"


def parse_line(line: str) -> Optional[np.ndarray]:
    """
    Parse one cutting move.

    Args:
        line: One program line, with or without a trailing separator

    Returns:
        (3,) point, or None if the line is not a ``G1 X`` move or holds an
        unreadable number
    """
    text = line.strip()
    if not text.startswith(CUT_PREFIX):
        return None

    # drop trailing separators and comments
    text = text.split(COMMENT_CHAR, 1)[0]

    coords = {"X": 0.0, "Y": 0.0, "Z": 0.0}
    for word in text.split():
        axis = word[0].upper()
        if axis not in coords:
            continue
        try:
            value = float(word[1:])
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        coords[axis] = value

    return np.array([coords["X"], coords["Y"], coords["Z"]], dtype=np.float64)


def parse_program(program: Union[str, Iterable[str]]) -> List[np.ndarray]:
    """
    Extract cutting points from program text.

    Args:
        program: Whole program as one string, or an iterable of lines

    Returns:
        Points in program order
    """
    lines = program.splitlines() if isinstance(program, str) else program

    points = []
    skipped = 0
    for line in lines:
        point = parse_line(line)
        if point is not None:
            points.append(point)
        elif line.strip().startswith(CUT_PREFIX):
            skipped += 1

    if skipped:
        logger.debug("malformed_cut_lines_skipped", skipped=skipped)
    return points


def preview_points(program: Union[str, Iterable[str]], scale: float = UNIT_SCALE) -> np.ndarray:
    """
    Parsed points converted back to the source frame for display.

    Returns:
        (n, 3) array in source units and axis order
    """
    points = parse_program(program)
    if not points:
        return np.zeros((0, 3))
    return to_source_coordinates(np.asarray(points), scale)
