"""On-disk store of computed outlines, one YAML file per shape name.

File layout (shape_cache.v1):

    <cache_dir>/<name>.vcache.yaml

    schema: shape_cache.v1
    name: cloud1
    polylines:
      - [[2.0, 2.0], [6.0, 3.0], [5.0, 6.0], [2.0, 5.0], [2.0, 3.0]]
    metadata:
      generated_at: '2026-10-17T08:00:00+00:00'
      vertex_count: 5
      source_sha256: 9f2c...
      config_sha256: 41ab...

Writes are atomic (fs.atomic_yaml_dump). Files that fail to parse or
validate are logged and reported as absent, so the caller recomputes.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import yaml

from ..utils import fs, validators
from ..vectorizer.outline import ShapeOutline, outline_from_lists, outline_to_lists, vertex_count

logger = logging.getLogger(__name__)

CACHE_SUFFIX = ".vcache.yaml"


class ShapeStore:
    """Name-keyed YAML persistence for ShapeOutlines.

    Parameters
    ----------
    cache_dir : Union[str, Path]
        Directory holding the artifacts (created on first save)
    """

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)

    def path_for(self, name: str) -> Path:
        """Artifact path for a shape name.

        Raises
        ------
        ValueError
            If the name is empty or would escape cache_dir
        """
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"Invalid shape name: {name!r}")
        return self.cache_dir / f"{name}{CACHE_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def load_document(self, name: str) -> Optional[validators.ShapeCacheFileV1]:
        """Validated artifact for ``name``, or None if missing or invalid."""
        path = self.path_for(name)
        if not path.exists():
            return None

        try:
            doc = validators.load_shape_cache_file(path)
        except (ValueError, yaml.YAMLError) as e:
            logger.warning("Ignoring invalid shape cache file %s: %s", path, e)
            return None

        if doc.name != name:
            logger.warning("Shape cache file %s holds '%s', expected '%s'", path, doc.name, name)
            return None
        return doc

    def load(self, name: str) -> Optional[ShapeOutline]:
        doc = self.load_document(name)
        if doc is None:
            return None
        return outline_from_lists(doc.polylines)

    def save(
        self,
        name: str,
        outline: ShapeOutline,
        source_sha256: Optional[str] = None,
        config_sha256: Optional[str] = None,
    ) -> Path:
        """Write the outline atomically and return the artifact path.

        Raises
        ------
        RuntimeError
            If the atomic write fails
        """
        doc = validators.ShapeCacheFileV1(
            name=name,
            polylines=outline_to_lists(outline),
            metadata=validators.ShapeCacheMetadata(
                generated_at=datetime.now(timezone.utc).isoformat(),
                vertex_count=vertex_count(outline),
                source_sha256=source_sha256,
                config_sha256=config_sha256,
            ),
        )
        path = self.path_for(name)
        fs.atomic_yaml_dump(doc.model_dump(by_alias=True), path)
        return path

    def remove(self, name: str) -> bool:
        return fs.safe_remove(self.path_for(name))
