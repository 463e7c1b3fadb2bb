"""Raster → outline polyline core.

Modules:
    - pixel_buffer: PixelBuffer (RGBA8, row-major), decode_image (Pillow)
    - boundary: per-pixel boundary classification into a BoundaryMap
    - tracer: 8-connected contour walk with fixed neighbor priority
    - simplify: angular-budget path simplification
    - outline: ShapeOutline nested-list (de)serialization
    - pipeline: VectorizationPipeline / vectorize()

Data flows strictly forward:
    PixelBuffer → BoundaryMap → raw contours → polylines → ShapeOutline

Nothing in this package performs I/O besides decode_image().
"""

from .boundary import BoundaryMap, classify_boundaries
from .outline import ShapeOutline, outline_from_lists, outline_to_lists
from .pipeline import VectorizationPipeline, vectorize
from .pixel_buffer import InvalidDimensions, PixelBuffer, decode_image
from .simplify import simplify_path
from .tracer import ContourTracer, trace_contours

__all__ = [
    'BoundaryMap',
    'ContourTracer',
    'InvalidDimensions',
    'PixelBuffer',
    'ShapeOutline',
    'VectorizationPipeline',
    'classify_boundaries',
    'decode_image',
    'outline_from_lists',
    'outline_to_lists',
    'simplify_path',
    'trace_contours',
    'vectorize',
]
