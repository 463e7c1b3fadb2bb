"""ShapeOutline helpers: nested-list (de)serialization and counts.

A ShapeOutline is a list of polylines; each polyline is a list of (x, y)
float tuples in pixel coordinates. The persisted form is the same structure
as plain nested lists:

    [[[x1, y1], [x2, y2], ...], [[x3, y3], ...]]
"""

from typing import List, Sequence

from .simplify import Polyline

ShapeOutline = List[Polyline]


def outline_to_lists(outline: Sequence[Polyline]) -> List[List[List[float]]]:
    """Convert to YAML/JSON-friendly nested lists of floats."""
    return [[[float(x), float(y)] for x, y in polyline] for polyline in outline]


def outline_from_lists(data: Sequence[Sequence[Sequence[float]]]) -> ShapeOutline:
    """Rebuild a ShapeOutline from nested lists.

    Raises
    ------
    ValueError
        If a point doesn't have exactly two coordinates
    """
    outline = []
    for i, polyline in enumerate(data):
        points = []
        for pt in polyline:
            if len(pt) != 2:
                raise ValueError(f"Polyline {i}: point must have 2 coordinates, got {len(pt)}")
            points.append((float(pt[0]), float(pt[1])))
        outline.append(points)
    return outline


def vertex_count(outline: Sequence[Polyline]) -> int:
    return sum(len(polyline) for polyline in outline)
