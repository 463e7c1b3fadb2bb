"""Batch vectorization of a sprite directory through a ShapeCache.

Shape names are file stems: ``sprites/cloud1.png`` → ``cloud1``. Files are
processed in sorted order so log output and combined YAML are stable.

Public API:
    discover_sprites(input_dir, pattern="*.png") → {name: path}
    vectorize_directory(input_dir, cfg=None, cache=None, pattern="*.png")
        → {name: ShapeOutline}
    write_outlines_yaml(outlines, output_path)
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .shapes import ShapeCache, build_shape_cache
from .utils import fs, validators
from .vectorizer.outline import ShapeOutline, outline_to_lists, vertex_count
from .vectorizer.pixel_buffer import InvalidDimensions

logger = logging.getLogger(__name__)

OUTLINES_SCHEMA = "shape_outlines.v1"


def discover_sprites(input_dir: Union[str, Path], pattern: str = "*.png") -> Dict[str, Path]:
    """Map shape names to sprite files directly under ``input_dir``.

    Raises
    ------
    FileNotFoundError
        If input_dir doesn't exist
    ValueError
        If two files share a stem
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Sprite directory not found: {input_dir}")

    sprites: Dict[str, Path] = {}
    for path in sorted(input_dir.glob(pattern)):
        if not path.is_file():
            continue
        if path.stem in sprites:
            raise ValueError(f"Duplicate shape name '{path.stem}': {sprites[path.stem]} and {path}")
        sprites[path.stem] = path
    return sprites


def vectorize_directory(
    input_dir: Union[str, Path],
    cfg: Optional[validators.VectorizerV1] = None,
    cache: Optional[ShapeCache] = None,
    pattern: str = "*.png",
) -> Dict[str, ShapeOutline]:
    """Vectorize every sprite in a directory.

    Parameters
    ----------
    input_dir : Union[str, Path]
        Directory of sprite images
    cfg : VectorizerV1, optional
        Used to build the cache when ``cache`` is None
    cache : ShapeCache, optional
        Cache to read from and populate
    pattern : str
        Glob for sprite files, default "*.png"

    Returns
    -------
    Dict[str, ShapeOutline]
        Outlines by shape name; sprites too small to vectorize are skipped
        with a warning
    """
    sprites = discover_sprites(input_dir, pattern)
    if cache is None:
        cache = build_shape_cache(cfg, resolve_source=sprites.get)

    outlines: Dict[str, ShapeOutline] = {}
    for name, path in sprites.items():
        try:
            outlines[name] = cache.get_or_vectorize(name, path)
        except InvalidDimensions as e:
            logger.warning("Skipping %s: %s", path, e)

    logger.info(
        "Vectorized %d/%d sprites (%d vertices total)",
        len(outlines), len(sprites), sum(vertex_count(o) for o in outlines.values()),
    )
    return outlines


def write_outlines_yaml(outlines: Dict[str, ShapeOutline], output_path: Union[str, Path]) -> None:
    """Write all outlines to one YAML document atomically.

    Format:
        schema: shape_outlines.v1
        shapes:
          cloud1: [[[x, y], ...], ...]
    """
    doc = {
        'schema': OUTLINES_SCHEMA,
        'shapes': {name: outline_to_lists(outline) for name, outline in outlines.items()},
    }
    fs.atomic_yaml_dump(doc, output_path)
