"""Shape cache collaborator: named outlines in memory and on disk.

Modules:
    - store: ShapeStore, one shape_cache.v1 YAML file per name
    - freshness: staleness policies (mtime, sha256, none)
    - cache: ShapeCache lookup/compute/persist flow, build_shape_cache()
"""

from .cache import ShapeCache, build_shape_cache
from .freshness import AlwaysFresh, FreshnessPolicy, MtimeFreshness, SourceHashFreshness
from .store import ShapeStore

__all__ = [
    'AlwaysFresh',
    'FreshnessPolicy',
    'MtimeFreshness',
    'ShapeCache',
    'ShapeStore',
    'SourceHashFreshness',
    'build_shape_cache',
]
