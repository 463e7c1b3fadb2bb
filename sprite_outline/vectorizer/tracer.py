"""Contour tracing over a BoundaryMap.

Repeatedly finds the first untraced edge pixel in row-major order and walks
the 8-connected boundary from there, marking every emitted pixel VISITED.

Neighbor priority (load-bearing, do not reorder):

    right, bottom-right, bottom, bottom-left, left, top-left, top, top-right

The first qualifying neighbor in this order is taken. Starting from the
top-left-most pixel of a ring, this walks the ring clockwise and keeps the
walk from splitting or doubling back at ambiguous junctions. A walk ends
when no neighbor qualifies; one-pixel walks are dropped as noise.

Every pixel is emitted at most once, so a full trace is bounded by W×H steps.
"""

from typing import Iterator, List, Optional, Tuple

import numpy as np

from .boundary import EDGE_TABLE, VISITED, BoundaryMap


Point = Tuple[int, int]
RawContour = List[Point]

# (dx, dy) in walk priority order
NEIGHBOR_ORDER = (
    (1, 0),    # right
    (1, 1),    # bottom-right
    (0, 1),    # bottom
    (-1, 1),   # bottom-left
    (-1, 0),   # left
    (-1, -1),  # top-left
    (0, -1),   # top
    (1, -1),   # top-right
)


class ContourTracer:
    """Greedy tracer that consumes a BoundaryMap in place.

    Parameters
    ----------
    boundary_map : BoundaryMap
        Map produced by classify_boundaries(); VISITED bits are set as
        pixels are emitted

    Examples
    --------
    >>> tracer = ContourTracer(classify_boundaries(buffer))
    >>> for contour in tracer.iter_contours():
    ...     print(len(contour))
    """

    def __init__(self, boundary_map: BoundaryMap):
        self.boundary_map = boundary_map
        self._width = boundary_map.width
        # Flat view: writes land in boundary_map.flags
        self._flat = boundary_map.flags.reshape(-1)
        self._offsets = tuple(dy * self._width + dx for dx, dy in NEIGHBOR_ORDER)
        # Pixels can only lose edge status (by being visited), so the
        # row-major scan never needs to look behind the last start pixel.
        self._candidates = np.flatnonzero(boundary_map.edge_mask()).tolist()
        self._cursor = 0
        self.steps = 0

    def _find_start(self) -> Optional[int]:
        flat = self._flat
        candidates = self._candidates
        while self._cursor < len(candidates):
            index = candidates[self._cursor]
            if EDGE_TABLE[flat[index]]:
                return index
            self._cursor += 1
        return None

    def _next_neighbor(self, index: int) -> Optional[int]:
        flat = self._flat
        for offset in self._offsets:
            neighbor = index + offset
            if EDGE_TABLE[flat[neighbor]]:
                return neighbor
        return None

    def _point(self, index: int) -> Point:
        y, x = divmod(index, self._width)
        return (x, y)

    def _walk(self, start: int) -> RawContour:
        flat = self._flat
        flat[start] |= VISITED
        self.steps += 1
        path = [self._point(start)]

        current = start
        while True:
            neighbor = self._next_neighbor(current)
            if neighbor is None:
                break
            flat[neighbor] |= VISITED
            self.steps += 1
            path.append(self._point(neighbor))
            current = neighbor

        return path

    def next_contour(self) -> Optional[RawContour]:
        """Trace the next contour, or return None once the map is exhausted."""
        while True:
            start = self._find_start()
            if start is None:
                return None
            contour = self._walk(start)
            if len(contour) > 1:
                return contour

    def iter_contours(self) -> Iterator[RawContour]:
        """Yield contours until no untraced edge pixel remains."""
        while True:
            contour = self.next_contour()
            if contour is None:
                return
            yield contour


def trace_contours(boundary_map: BoundaryMap) -> List[RawContour]:
    """Trace every contour in the map (mutates its VISITED bits)."""
    return list(ContourTracer(boundary_map).iter_contours())
