"""Boundary classification: PixelBuffer → per-pixel BoundaryMap.

Each BoundaryMap byte is a bitset:

    LEFT_NEIGHBOR    0x01  pixel to the left is a boundary pixel
    RIGHT_NEIGHBOR   0x02  pixel to the right is a boundary pixel
    TOP_NEIGHBOR     0x04  pixel above is a boundary pixel
    BOTTOM_NEIGHBOR  0x08  pixel below is a boundary pixel
    SELF_EDGE        0x10  this pixel is a boundary pixel
    VISITED          0x20  the tracer has emitted this pixel

A pixel is a boundary pixel when it is opaque (alpha >= alpha_threshold) and
at least one of its 8 neighbors is transparent or differs in RGB by more than
color_threshold (squared distance compared, strict >). Neighbor flags are
written by the boundary pixel onto its four cardinal neighbors.

The outermost ring of pixels is never classified, so every SELF_EDGE pixel
has all 8 neighbors in range.
"""

import numpy as np

from .pixel_buffer import ALPHA_OFFSET, PixelBuffer


LEFT_NEIGHBOR = 0x01
RIGHT_NEIGHBOR = 0x02
TOP_NEIGHBOR = 0x04
BOTTOM_NEIGHBOR = 0x08
SELF_EDGE = 0x10
VISITED = 0x20

ALL_NEIGHBORS = LEFT_NEIGHBOR | RIGHT_NEIGHBOR | TOP_NEIGHBOR | BOTTOM_NEIGHBOR

ALPHA_THRESHOLD = 128
COLOR_THRESHOLD = 50

# (dy, dx): left, right, up, down, then the four diagonals
COLOR_NEIGHBOR_OFFSETS = (
    (0, -1), (0, 1), (-1, 0), (1, 0),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
)


def is_edge_value(value: int) -> bool:
    """True if a map byte qualifies as an untraced edge pixel.

    SELF_EDGE set, one to three cardinal neighbor flags set, VISITED clear.
    """
    if not value & SELF_EDGE or value & VISITED:
        return False
    neighbors = value & ALL_NEIGHBORS
    return neighbors != 0 and neighbors != ALL_NEIGHBORS


# Indexed by map byte; used by the tracer's inner loop
EDGE_TABLE = tuple(is_edge_value(v) for v in range(256))


class BoundaryMap:
    """Mutable W×H bitset map, exclusively owned by one vectorize call."""

    def __init__(self, flags: np.ndarray):
        if flags.ndim != 2 or flags.dtype != np.uint8:
            raise ValueError(f"BoundaryMap expects a 2-D uint8 array, got {flags.dtype} {flags.shape}")
        self.flags = np.ascontiguousarray(flags)

    @classmethod
    def empty(cls, width: int, height: int) -> "BoundaryMap":
        return cls(np.zeros((height, width), dtype=np.uint8))

    @property
    def width(self) -> int:
        return self.flags.shape[1]

    @property
    def height(self) -> int:
        return self.flags.shape[0]

    def is_edge_pixel(self, x: int, y: int) -> bool:
        return EDGE_TABLE[int(self.flags[y, x])]

    def mark_visited(self, x: int, y: int) -> None:
        self.flags[y, x] |= VISITED

    def boundary_mask(self) -> np.ndarray:
        """Boolean (H, W) mask of SELF_EDGE pixels."""
        return (self.flags & SELF_EDGE) != 0

    def visited_mask(self) -> np.ndarray:
        """Boolean (H, W) mask of pixels already traced."""
        return (self.flags & VISITED) != 0

    def edge_mask(self) -> np.ndarray:
        """Boolean (H, W) mask of pixels that currently qualify as edge pixels."""
        neighbors = self.flags & ALL_NEIGHBORS
        return (
            self.boundary_mask()
            & ~self.visited_mask()
            & (neighbors != 0)
            & (neighbors != ALL_NEIGHBORS)
        )


def classify_boundaries(
    buffer: PixelBuffer,
    alpha_threshold: int = ALPHA_THRESHOLD,
    color_threshold: int = COLOR_THRESHOLD,
) -> BoundaryMap:
    """Classify every interior pixel and build the neighbor flags.

    Parameters
    ----------
    buffer : PixelBuffer
        Decoded RGBA8 pixels (W, H >= 3)
    alpha_threshold : int
        Pixels with alpha below this are background, default 128
    color_threshold : int
        RGB distance above which two neighbors are on different regions,
        default 50 (compared squared, strict >)

    Returns
    -------
    BoundaryMap
        SELF_EDGE and cardinal neighbor flags set, VISITED clear everywhere

    Notes
    -----
    Vectorized over shifted interior views; equivalent to checking each
    pixel's 8 neighbors in turn and stopping at the first hit.
    """
    height, width = buffer.height, buffer.width
    bmap = BoundaryMap.empty(width, height)

    pixels = buffer.as_array().astype(np.int32)
    center = pixels[1:-1, 1:-1]
    opaque = center[..., ALPHA_OFFSET] >= alpha_threshold
    color_threshold_sq = color_threshold * color_threshold

    on_edge = np.zeros(opaque.shape, dtype=bool)
    for dy, dx in COLOR_NEIGHBOR_OFFSETS:
        neighbor = pixels[1 + dy:height - 1 + dy, 1 + dx:width - 1 + dx]
        diff = neighbor[..., :3] - center[..., :3]
        dist_sq = np.einsum('ijk,ijk->ij', diff, diff)
        on_edge |= (neighbor[..., ALPHA_OFFSET] < alpha_threshold) | (dist_sq > color_threshold_sq)

    self_edge = np.zeros((height, width), dtype=bool)
    self_edge[1:-1, 1:-1] = opaque & on_edge

    flags = bmap.flags
    flags[self_edge] |= np.uint8(SELF_EDGE)
    # Announce each boundary pixel to its cardinal neighbors
    flags[:, :-1][self_edge[:, 1:]] |= np.uint8(RIGHT_NEIGHBOR)
    flags[:, 1:][self_edge[:, :-1]] |= np.uint8(LEFT_NEIGHBOR)
    flags[:-1, :][self_edge[1:, :]] |= np.uint8(BOTTOM_NEIGHBOR)
    flags[1:, :][self_edge[:-1, :]] |= np.uint8(TOP_NEIGHBOR)

    return bmap
