"""
Tool radius compensation.

Moves every point of a closed path sideways by the tool radius so the edge of
the cutter, rather than its centre, follows the sliced contour. The offset
direction at each point is the horizontal perpendicular of the sum of the
incoming and outgoing directions.
"""

from typing import List, Sequence

import numpy as np

from millpath.core.logging import get_logger

logger = get_logger(__name__)

UP = np.array([0.0, 0.0, 1.0])

_EPSILON = 1e-12


def _normalized(vector: np.ndarray) -> np.ndarray:
    """Unit vector, or the zero vector when ``vector`` has no length."""
    length = np.linalg.norm(vector)
    if length < _EPSILON:
        return np.zeros(3)
    return vector / length


def offset_direction(prev: np.ndarray, current: np.ndarray, nxt: np.ndarray) -> np.ndarray:
    """
    Unit offset direction at ``current``, or zeros if it is undefined.

    For a counter-clockwise path the direction points outward.
    """
    incoming = _normalized(current - prev)
    outgoing = _normalized(nxt - current)
    return _normalized(np.cross(incoming + outgoing, UP))


def apply_tool_compensation(
    path: Sequence[np.ndarray], radius: float
) -> List[np.ndarray]:
    """
    Offset a closed path by ``radius``.

    Neighbours wrap around, so the first point uses the last as its
    predecessor. Points whose offset direction is undefined (coincident
    neighbours, a full reversal) are kept unchanged.

    Args:
        path: Points of the path as (3,) arrays
        radius: Tool radius (mm)

    Returns:
        New list with one offset point per input point
    """
    count = len(path)
    points = [np.asarray(p, dtype=np.float64) for p in path]
    result = []
    skipped = 0

    for i in range(count):
        direction = offset_direction(
            points[(i - 1 + count) % count], points[i], points[(i + 1) % count]
        )
        if not direction.any():
            skipped += 1
            result.append(points[i].copy())
            continue
        result.append(points[i] + direction * radius)

    if skipped:
        logger.debug("compensation_points_skipped", skipped=skipped, total=count)
    return result
