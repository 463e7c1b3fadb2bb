"""Name-keyed cache of vectorized sprite outlines.

Lookup order for get_or_vectorize(name):
    1. In-memory dict (shared by every caller holding this cache)
    2. Disk artifact, unless the cache is disabled, the name is in the
       force list, or the freshness policy says it's stale (stale artifacts
       are deleted)
    3. Decode the sprite and run the VectorizationPipeline; the result is
       stored in memory and written to disk

Cache failures never reach the caller: unreadable artifacts are treated as
misses and failed writes are logged. The vectorizer core knows nothing
about this module.

Not thread-safe; callers sharing one cache across threads must serialize
access.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ..utils import hashing, logging_config, validators
from ..vectorizer.outline import ShapeOutline, vertex_count
from ..vectorizer.pipeline import VectorizationPipeline
from ..vectorizer.pixel_buffer import ImageSource, PixelBuffer, decode_image
from .freshness import AlwaysFresh, FreshnessPolicy, MtimeFreshness, SourceHashFreshness, SourceResolver
from .store import ShapeStore

logger = logging.getLogger(__name__)


class ShapeCache:
    """Memory + disk cache in front of a VectorizationPipeline.

    Parameters
    ----------
    store : ShapeStore, optional
        Disk persistence; memory-only when None
    freshness : FreshnessPolicy, optional
        Staleness check for disk artifacts; AlwaysFresh when None
    force : iterable of str
        Shape names that always skip the disk artifact
    enabled : bool
        False disables the disk layer entirely (no reads, no writes)
    pipeline : VectorizationPipeline, optional
        Used on cache misses; default thresholds when None
    resolve_source : callable, optional
        Maps a shape name to its sprite file when get_or_vectorize() is
        called without an image
    """

    def __init__(
        self,
        store: Optional[ShapeStore] = None,
        freshness: Optional[FreshnessPolicy] = None,
        force: Iterable[str] = (),
        enabled: bool = True,
        pipeline: Optional[VectorizationPipeline] = None,
        resolve_source: Optional[SourceResolver] = None,
    ):
        self.store = store
        self.freshness = freshness or AlwaysFresh()
        self.force = frozenset(force)
        self.enabled = enabled
        self.pipeline = pipeline or VectorizationPipeline()
        self.resolve_source = resolve_source
        self._memory: Dict[str, ShapeOutline] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._memory

    def _disk_enabled(self) -> bool:
        return self.enabled and self.store is not None

    def get(self, name: str) -> Optional[ShapeOutline]:
        """Cached outline for ``name``, or None on a miss."""
        if name in self._memory:
            return self._memory[name]

        if not self._disk_enabled() or name in self.force:
            return None

        artifact = self.store.path_for(name)
        if not self.freshness.is_fresh(name, artifact):
            logger.info("Shape determined to be out of date: %s", name)
            self.store.remove(name)
            return None

        outline = self.store.load(name)
        if outline is not None:
            logger.debug("Loaded %d polylines for [%s] from %s", len(outline), name, artifact)
            self._memory[name] = outline
        return outline

    def put(
        self,
        name: str,
        outline: ShapeOutline,
        source_sha256: Optional[str] = None,
    ) -> None:
        """Store in memory and, when enabled, on disk (write errors are logged)."""
        self._memory[name] = outline
        if not self._disk_enabled():
            return

        config_sha256 = hashing.hash_dict(self.pipeline.parameters())
        try:
            self.store.save(name, outline, source_sha256=source_sha256, config_sha256=config_sha256)
        except (RuntimeError, OSError) as e:
            logger.error("Error writing shape cache for [%s]: %s", name, e)

    def invalidate(self, name: str) -> None:
        """Forget ``name`` in memory and delete its disk artifact."""
        self._memory.pop(name, None)
        if self.store is not None:
            self.store.remove(name)

    def clear_memory(self) -> None:
        self._memory.clear()

    def _source_digest(self, name: str, image) -> Optional[str]:
        """SHA-256 of the sprite file behind ``image``, or None if there is no file.

        In-memory images (PixelBuffer, PIL image, file object) fall back to
        the file resolve_source maps the name to.
        """
        source = image if isinstance(image, (str, Path)) else None
        if source is None and self.resolve_source is not None:
            source = self.resolve_source(name)
        if source is None or not Path(source).exists():
            return None
        return hashing.sha256_file(source)

    def get_or_vectorize(
        self,
        name: str,
        image: Optional[Union[PixelBuffer, ImageSource]] = None,
        pipeline: Optional[VectorizationPipeline] = None,
    ) -> ShapeOutline:
        """Return the cached outline for ``name`` or compute and cache it.

        Parameters
        ----------
        name : str
            Logical shape name
        image : PixelBuffer, path, file object or PIL image, optional
            Sprite to vectorize on a miss; resolved via resolve_source when None
        pipeline : VectorizationPipeline, optional
            Overrides the cache's pipeline for this call

        Raises
        ------
        InvalidDimensions
            On a miss when no usable pixel buffer can be obtained
        """
        logging_config.push_context(shape=name)
        try:
            cached = self.get(name)
            if cached is not None:
                return cached

            if image is None and self.resolve_source is not None:
                image = self.resolve_source(name)

            source_sha256 = self._source_digest(name, image)
            buffer = image if isinstance(image, PixelBuffer) else decode_image(image)

            outline = (pipeline or self.pipeline).vectorize(buffer)
            if outline:
                logger.info("Vectorized %d points for [%s]", vertex_count(outline), name)
            else:
                logger.info("Vectorization found no paths for [%s]", name)

            self.put(name, outline, source_sha256=source_sha256)
            return outline
        finally:
            logging_config.pop_context(keys=["shape"])


def build_shape_cache(
    cfg: Optional[validators.VectorizerV1] = None,
    resolve_source: Optional[SourceResolver] = None,
) -> ShapeCache:
    """Build a ShapeCache (store, freshness, force list) from config.

    Parameters
    ----------
    cfg : VectorizerV1, optional
        Validated config; defaults when None
    resolve_source : callable, optional
        Shape name → sprite path; needed by sha256 freshness and by
        per-sprite mtime freshness when cache.asset_path is unset
    """
    cfg = cfg or validators.default_vectorizer_config()
    cache_cfg = cfg.cache

    freshness: FreshnessPolicy = AlwaysFresh()
    if cache_cfg.freshness == "mtime":
        if cache_cfg.asset_path:
            freshness = MtimeFreshness(Path(cache_cfg.asset_path))
        elif resolve_source is not None:
            freshness = MtimeFreshness(resolve_source)
    elif cache_cfg.freshness == "sha256":
        if resolve_source is None:
            logger.warning("sha256 freshness needs a source resolver; cached shapes won't be checked")
        else:
            freshness = SourceHashFreshness(resolve_source)

    return ShapeCache(
        store=ShapeStore(cache_cfg.cache_dir),
        freshness=freshness,
        force=cache_cfg.force_revectorize,
        enabled=cache_cfg.enabled,
        pipeline=VectorizationPipeline.from_config(cfg),
        resolve_source=resolve_source,
    )
