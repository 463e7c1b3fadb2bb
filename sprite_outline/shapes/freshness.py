"""Staleness policies for cached shape outlines.

A policy answers one question: is the artifact on disk for this shape name
still valid? The cache deletes and recomputes stale artifacts.

Policies:
    - AlwaysFresh: never stale (freshness: none)
    - MtimeFreshness: stale when the source asset was modified after the
      artifact (freshness: mtime). The source can be one shared asset bundle
      or a per-name path resolver.
    - SourceHashFreshness: stale when the SHA-256 of the source differs from
      the digest stored in the artifact (freshness: sha256)
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Union

import yaml

from ..utils import fs, hashing, validators

logger = logging.getLogger(__name__)

SourceResolver = Callable[[str], Optional[Union[str, Path]]]


class FreshnessPolicy(ABC):
    """Decides whether a persisted artifact may be reused."""

    @abstractmethod
    def is_fresh(self, name: str, artifact_path: Path) -> bool:
        """True if the artifact for ``name`` can be reused."""


class AlwaysFresh(FreshnessPolicy):

    def is_fresh(self, name: str, artifact_path: Path) -> bool:
        return True


class MtimeFreshness(FreshnessPolicy):
    """Compare modification times of the source asset and the artifact.

    Parameters
    ----------
    source : path or callable
        Either a single asset path shared by all names (e.g. a sprite atlas
        or bundle) or a callable mapping a shape name to its source path

    Notes
    -----
    Stale only when the source is strictly newer than the artifact. If
    either timestamp can't be read the artifact is considered fresh; a
    missing artifact is then simply a cache miss.
    """

    def __init__(self, source: Union[str, Path, SourceResolver]):
        self.source = source

    def _source_path(self, name: str) -> Optional[Path]:
        if callable(self.source):
            resolved = self.source(name)
            return Path(resolved) if resolved is not None else None
        return Path(self.source)

    def is_fresh(self, name: str, artifact_path: Path) -> bool:
        artifact_mtime = fs.modification_time(artifact_path)
        source_path = self._source_path(name)
        source_mtime = fs.modification_time(source_path) if source_path is not None else None
        if artifact_mtime is None or source_mtime is None:
            return True
        return source_mtime <= artifact_mtime


class SourceHashFreshness(FreshnessPolicy):
    """Compare the live source digest with ``metadata.source_sha256``.

    Artifacts without a stored digest, or that fail validation, are stale.
    Names whose source can't be resolved are fresh (nothing to compare).
    """

    def __init__(self, resolve_source: SourceResolver):
        self.resolve_source = resolve_source

    def is_fresh(self, name: str, artifact_path: Path) -> bool:
        if not Path(artifact_path).exists():
            return True
        source = self.resolve_source(name)
        if source is None or not Path(source).exists():
            return True

        try:
            doc = validators.load_shape_cache_file(artifact_path)
        except (ValueError, yaml.YAMLError) as e:
            logger.warning("Unreadable shape cache file %s: %s", artifact_path, e)
            return False

        stored = doc.metadata.source_sha256
        return stored is not None and hashing.verify_file_hash(source, stored)
