"""Shared pytest fixtures: synthetic RGBA sprites.

Fixtures:
    make_rgba: factory → (H, W, 4) uint8 array with filled rectangles
    make_sprite: factory → PixelBuffer built from make_rgba
    square_sprite: 10x10 transparent image, opaque 5x5 square at (2..6, 2..6)
    blob_sprite: 24x24 seeded random blobs in two colors (determinism tests)
"""

import numpy as np
import pytest

from sprite_outline.vectorizer.pixel_buffer import PixelBuffer


TRANSPARENT = (0, 0, 0, 0)
RED = (220, 30, 30, 255)
BLUE = (30, 30, 220, 255)


def _make_rgba(width, height, rects=(), background=TRANSPARENT):
    """rects: iterable of (x0, y0, x1, y1, rgba), bounds inclusive."""
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[...] = background
    for x0, y0, x1, y1, rgba in rects:
        img[y0:y1 + 1, x0:x1 + 1] = rgba
    return img


@pytest.fixture
def make_rgba():
    return _make_rgba


@pytest.fixture
def make_sprite():
    def factory(width, height, rects=(), background=TRANSPARENT):
        return PixelBuffer.from_array(_make_rgba(width, height, rects, background))
    return factory


@pytest.fixture
def square_sprite(make_sprite):
    return make_sprite(10, 10, [(2, 2, 6, 6, RED)])


@pytest.fixture
def blob_sprite():
    rng = np.random.default_rng(1234)
    img = np.zeros((24, 24, 4), dtype=np.uint8)
    for _ in range(6):
        x0, y0 = rng.integers(2, 16, size=2)
        w, h = rng.integers(2, 7, size=2)
        color = RED if rng.random() < 0.5 else BLUE
        img[y0:y0 + h, x0:x0 + w] = color
    return PixelBuffer.from_array(img)
