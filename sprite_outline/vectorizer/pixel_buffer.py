"""Decoded sprite pixels: immutable RGBA8 buffer plus the Pillow decoder.

A PixelBuffer is the only input the vectorizer core accepts:
    - width × height pixels, row-major
    - 4 bytes per pixel in (R, G, B, A) order, 8 bits per channel
    - width, height >= 3 (classification needs a 1-pixel interior margin)

decode_image() is the upstream collaborator: it turns a file path, file
object or PIL image into a PixelBuffer. It performs no color-space conversion
or premultiplication beyond Pillow's own RGBA conversion.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
from PIL import Image


BYTES_PER_PIXEL = 4
RED_OFFSET = 0
GREEN_OFFSET = 1
BLUE_OFFSET = 2
ALPHA_OFFSET = 3

MIN_DIMENSION = 3

ImageSource = Union[str, Path, BinaryIO, Image.Image]


class InvalidDimensions(ValueError):
    """Pixel buffer is missing, too small, or its length doesn't match W×H×4."""


@dataclass(frozen=True)
class PixelBuffer:
    """Immutable row-major RGBA8 pixel data."""
    width: int
    height: int
    data: bytes

    def __post_init__(self):
        # Copy mutable inputs (bytearray, memoryview) so the buffer stays immutable
        object.__setattr__(self, "data", bytes(self.data))
        if self.width < MIN_DIMENSION or self.height < MIN_DIMENSION:
            raise InvalidDimensions(
                f"Image must be at least {MIN_DIMENSION}x{MIN_DIMENSION} pixels, "
                f"got {self.width}x{self.height}"
            )
        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.data) != expected:
            raise InvalidDimensions(
                f"Buffer length {len(self.data)} does not match "
                f"{self.width}x{self.height}x{BYTES_PER_PIXEL} = {expected}"
            )

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        """Build from an (H, W, 4) uint8 array.

        Raises
        ------
        InvalidDimensions
            If the array is None or not shaped (H, W, 4) uint8
        """
        if rgba is None:
            raise InvalidDimensions("Pixel buffer unavailable")
        rgba = np.asarray(rgba)
        if rgba.ndim != 3 or rgba.shape[2] != BYTES_PER_PIXEL:
            raise InvalidDimensions(f"Expected (H, W, 4) RGBA array, got shape {rgba.shape}")
        if rgba.dtype != np.uint8:
            raise InvalidDimensions(f"Expected uint8 RGBA array, got dtype {rgba.dtype}")
        height, width = rgba.shape[:2]
        return cls(width=width, height=height, data=np.ascontiguousarray(rgba).tobytes())

    def as_array(self) -> np.ndarray:
        """Read-only (H, W, 4) uint8 view over the buffer."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, BYTES_PER_PIXEL
        )

    def pixel(self, x: int, y: int) -> tuple:
        """(r, g, b, a) at pixel (x, y)."""
        i = (y * self.width + x) * BYTES_PER_PIXEL
        return tuple(self.data[i:i + BYTES_PER_PIXEL])


def decode_image(source: ImageSource) -> PixelBuffer:
    """Decode an image into a PixelBuffer.

    Parameters
    ----------
    source : str, Path, binary file object or PIL.Image.Image
        Image to decode; any mode Pillow can convert to RGBA

    Returns
    -------
    PixelBuffer
        RGBA8 pixels

    Raises
    ------
    InvalidDimensions
        If source is None or the decoded image is smaller than 3x3
    FileNotFoundError, PIL.UnidentifiedImageError
        Propagated from Pillow when the file is missing or undecodable
    """
    if source is None:
        raise InvalidDimensions("Pixel buffer unavailable")

    if isinstance(source, Image.Image):
        rgba = source.convert("RGBA")
    else:
        with Image.open(source) as img:
            rgba = img.convert("RGBA")

    return PixelBuffer.from_array(np.asarray(rgba, dtype=np.uint8))
