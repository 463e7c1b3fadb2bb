"""Path simplification: raw pixel walk → polyline under an angular budget.

Each segment starts at a raw point; the next point fixes the segment
direction. Every later step adds ``1 - dot(step_dir, segment_dir)`` to the
segment's error (0 when straight, 1 at a right angle, 2 for a reversal).
While the error stays below the tolerance the step is merged. Once it
reaches the tolerance, the previous point becomes a vertex and a new segment
starts at the current point. First and last points are always vertices.
"""

import math
from typing import List, Optional, Sequence, Tuple

EDGE_ANGLE_TOLERANCE = 2.0

Polyline = List[Tuple[float, float]]


def _unit(dx: float, dy: float) -> Tuple[float, float]:
    length = math.hypot(dx, dy)
    if length < 1e-12:
        return (0.0, 0.0)
    return (dx / length, dy / length)


def simplify_path_indices(
    contour: Sequence[Tuple[int, int]],
    tolerance: float = EDGE_ANGLE_TOLERANCE,
) -> List[int]:
    """Indices of the contour points kept as polyline vertices.

    Indices are strictly increasing, start at 0 and end at len(contour) - 1,
    so every raw point belongs to exactly one vertex or merged span.
    """
    n = len(contour)
    if n < 2:
        return list(range(n))

    kept = [0]
    segment_start = contour[0]
    direction: Optional[Tuple[float, float]] = None
    error = 0.0

    for i in range(1, n):
        x, y = contour[i]
        if direction is None:
            direction = _unit(x - segment_start[0], y - segment_start[1])
            continue

        px, py = contour[i - 1]
        sx, sy = _unit(x - px, y - py)
        error += 1.0 - (sx * direction[0] + sy * direction[1])
        if error < tolerance:
            continue

        kept.append(i - 1)
        segment_start = contour[i]
        direction = None
        error = 0.0

    kept.append(n - 1)
    return kept


def simplify_path(
    contour: Sequence[Tuple[int, int]],
    tolerance: float = EDGE_ANGLE_TOLERANCE,
) -> Polyline:
    """Collapse a raw contour into a polyline.

    Parameters
    ----------
    contour : sequence of (x, y)
        Pixel-exact walk from the tracer
    tolerance : float
        Angular-error budget per segment, default 2.0

    Returns
    -------
    Polyline
        Float vertices, never more than len(contour); contours shorter than
        two points are returned unchanged (callers drop them)
    """
    return [
        (float(contour[i][0]), float(contour[i][1]))
        for i in simplify_path_indices(contour, tolerance)
    ]
