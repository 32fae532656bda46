"""
Segment stitching.

Joins the unordered segments of one layer into continuous point chains by
matching segment endpoints at either end of a chain.
"""

from typing import Iterable, List, Optional

import numpy as np

from millpath.slicing.plane_slicer import IntersectionSegment

# Endpoint match distance (mm)
STITCH_TOLERANCE = 0.01


def _find(
    segments: List[IntersectionSegment], point: np.ndarray, side: str, tolerance: float
) -> Optional[int]:
    for i, segment in enumerate(segments):
        if np.linalg.norm(getattr(segment, side) - point) < tolerance:
            return i
    return None


def chain_segments(
    segments: Iterable[IntersectionSegment],
    tolerance: float = STITCH_TOLERANCE,
) -> List[List[np.ndarray]]:
    """
    Chain segments head-to-tail into point sequences.

    The first remaining segment starts a chain. The remaining segments are
    scanned for one whose start lies within ``tolerance`` of the chain end;
    each match is removed, its end appended, and the scan restarts from the
    top. When nothing extends the end, a segment whose end meets the chain
    head is prepended instead, so open paths join no matter which segment
    came first. A chain ends when neither scan finds anything.

    Args:
        segments: Segments of one layer, in any order
        tolerance: Maximum endpoint distance for a match (mm)

    Returns:
        List of chains, each a list of points
    """
    remaining = list(segments)
    chains = []

    while remaining:
        first = remaining.pop(0)
        chain = [first.start, first.end]

        while remaining:
            i = _find(remaining, chain[-1], "start", tolerance)
            if i is not None:
                chain.append(remaining.pop(i).end)
                continue
            i = _find(remaining, chain[0], "end", tolerance)
            if i is None:
                break
            chain.insert(0, remaining.pop(i).start)

        chains.append(chain)

    return chains


def stitch_segments(
    segments: Iterable[IntersectionSegment],
    tolerance: float = STITCH_TOLERANCE,
) -> List[np.ndarray]:
    """
    Stitch segments into one flat point sequence.

    Chains are concatenated in the order they were built; separate loops are
    not marked in the result.
    """
    path = []
    for chain in chain_segments(segments, tolerance):
        path.extend(chain)
    return path


def is_closed(path: List[np.ndarray], tolerance: float = STITCH_TOLERANCE) -> bool:
    """True if the path has at least three points and ends where it starts."""
    if len(path) < 3:
        return False
    return bool(np.linalg.norm(path[-1] - path[0]) < tolerance)
