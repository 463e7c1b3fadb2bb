"""Sprite Outline: silhouette polylines from RGBA sprite images.

This package turns decoded sprite pixels into compact outline polylines
(collision outlines, stylized strokes) and caches them by sprite name.

Architecture layers (strict one-way dependency):
    scripts/ → sprite_outline/{batch, shapes}/ → sprite_outline/vectorizer/ → sprite_outline/utils/

Key invariants:
    - Pixels are RGBA8, row-major; images are at least 3x3
    - Coordinates are integer pixel positions (top-left origin, +Y down)
    - Vectorization is deterministic: same pixels → identical polylines
    - YAML-only configs and cache artifacts
"""

__version__ = "1.0.0"
