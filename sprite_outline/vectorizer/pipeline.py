"""Vectorization pipeline: PixelBuffer → ShapeOutline.

Pipeline (strictly sequential, one image at a time):
    1. classify_boundaries(): BoundaryMap with SELF_EDGE and neighbor flags
    2. ContourTracer: walk every boundary ring, marking pixels VISITED
    3. simplify_path(): collapse each raw contour under the angular budget
    4. Keep polylines with at least two vertices

An image without boundary pixels (fully transparent or uniform) yields an
empty outline. The only error raised here is InvalidDimensions.

Each call allocates its own BoundaryMap, so separate images can be
vectorized concurrently from different threads with no coordination.
"""

import logging
from typing import Any, Dict, Optional

from ..utils import validators
from .boundary import ALPHA_THRESHOLD, COLOR_THRESHOLD, classify_boundaries
from .outline import ShapeOutline, vertex_count
from .pixel_buffer import InvalidDimensions, PixelBuffer
from .simplify import EDGE_ANGLE_TOLERANCE, simplify_path
from .tracer import ContourTracer

logger = logging.getLogger(__name__)


class VectorizationPipeline:
    """Classifier + tracer + simplifier with fixed parameters.

    Parameters
    ----------
    alpha_threshold : int
        Alpha below this is background, default 128
    color_threshold : int
        RGB distance above which neighbors belong to different regions, default 50
    edge_angle_tolerance : float
        Angular-error budget per polyline segment, default 2.0
    """

    def __init__(
        self,
        alpha_threshold: int = ALPHA_THRESHOLD,
        color_threshold: int = COLOR_THRESHOLD,
        edge_angle_tolerance: float = EDGE_ANGLE_TOLERANCE,
    ):
        self.alpha_threshold = alpha_threshold
        self.color_threshold = color_threshold
        self.edge_angle_tolerance = edge_angle_tolerance

    @classmethod
    def from_config(cls, cfg: validators.VectorizerV1) -> "VectorizationPipeline":
        return cls(
            alpha_threshold=cfg.classification.alpha_threshold,
            color_threshold=cfg.classification.color_threshold,
            edge_angle_tolerance=cfg.simplification.edge_angle_tolerance,
        )

    def parameters(self) -> Dict[str, Any]:
        """Parameters that determine the output (hashed into cache provenance)."""
        return {
            'alpha_threshold': self.alpha_threshold,
            'color_threshold': self.color_threshold,
            'edge_angle_tolerance': self.edge_angle_tolerance,
        }

    def vectorize(self, buffer: PixelBuffer) -> ShapeOutline:
        """Extract simplified outline polylines from one image.

        Parameters
        ----------
        buffer : PixelBuffer
            Decoded RGBA8 pixels

        Returns
        -------
        ShapeOutline
            Polylines in trace order; empty if the image has no boundary

        Raises
        ------
        InvalidDimensions
            If buffer is missing or not a PixelBuffer
        """
        if not isinstance(buffer, PixelBuffer):
            raise InvalidDimensions(
                f"Pixel buffer unavailable (got {type(buffer).__name__})"
            )

        boundary_map = classify_boundaries(
            buffer,
            alpha_threshold=self.alpha_threshold,
            color_threshold=self.color_threshold,
        )
        tracer = ContourTracer(boundary_map)

        outline: ShapeOutline = []
        for contour in tracer.iter_contours():
            polyline = simplify_path(contour, self.edge_angle_tolerance)
            if len(polyline) >= 2:
                outline.append(polyline)

        logger.debug(
            "Traced %d pixels into %d polylines (%d vertices) for %dx%d image",
            tracer.steps, len(outline), vertex_count(outline),
            buffer.width, buffer.height,
        )
        return outline


_default_pipeline = VectorizationPipeline()


def vectorize(
    buffer: PixelBuffer,
    pipeline: Optional[VectorizationPipeline] = None,
) -> ShapeOutline:
    """Vectorize with the default thresholds (or the given pipeline)."""
    return (pipeline or _default_pipeline).vectorize(buffer)
