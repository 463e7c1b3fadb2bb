"""YAML schema validation and config loading.

Provides centralized validation for all files this project reads, using pydantic:
    - Vectorizer schema (vectorizer.v1.yaml): thresholds, cache and logging settings
    - Shape cache schema (shape_cache.v1): one cached ShapeOutline per sprite name

Loaders fail fast with actionable messages (offending keys, expected ranges).

Units:
    - Thresholds: 8-bit channel values (0-255)
    - Color distance: Euclidean RGB distance (0-442)
    - Coordinates: pixels, image frame (top-left origin, +Y down)

Usage:
    from sprite_outline.utils import validators

    cfg = validators.load_vectorizer_config("configs/vectorizer.v1.yaml")
    doc = validators.load_shape_cache_file("outputs/shape_cache/cloud1.vcache.yaml")
"""

from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


VECTORIZER_SCHEMA = "vectorizer.v1"
SHAPE_CACHE_SCHEMA = "shape_cache.v1"


# ============================================================================
# VECTORIZER SCHEMA V1
# ============================================================================

class ClassificationConfig(BaseModel):
    """Boundary classification thresholds."""
    alpha_threshold: int = Field(128, ge=1, le=255, description="Alpha below this is background")
    color_threshold: int = Field(50, ge=0, le=442, description="RGB distance above this is an edge")


class SimplificationConfig(BaseModel):
    """Path simplification budget."""
    edge_angle_tolerance: float = Field(
        2.0, gt=0.0,
        description="Accumulated 1-cos error before a new polyline vertex is emitted"
    )


class CacheConfig(BaseModel):
    """Shape cache settings (consumed by the caller, never by the core)."""
    enabled: bool = Field(True, description="False disables the disk cache entirely")
    cache_dir: str = Field("outputs/shape_cache", description="Directory for .vcache.yaml files")
    force_revectorize: List[str] = Field(default_factory=list, description="Names always recomputed")
    freshness: str = Field("mtime", description="Staleness policy: mtime, sha256 or none")
    asset_path: Optional[str] = Field(None, description="Asset bundle compared by mtime freshness")

    @field_validator('freshness')
    @classmethod
    def validate_freshness(cls, v: str) -> str:
        allowed = {"mtime", "sha256", "none"}
        if v not in allowed:
            raise ValueError(f"freshness must be one of {sorted(allowed)}, got '{v}'")
        return v


class LoggingConfig(BaseModel):
    """Arguments forwarded to logging_config.setup_logging()."""
    model_config = ConfigDict(populate_by_name=True)

    log_level: str = Field("INFO", description="Root logger level")
    log_file: Optional[str] = Field(None, description="Optional log file path")
    json_format: bool = Field(False, alias="json", description="JSON lines in the log file")

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}, got '{v}'")
        return v.upper()


class VectorizerV1(BaseModel):
    """Vectorizer config schema v1."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field(VECTORIZER_SCHEMA, alias="schema", description="Schema version")
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    simplification: SimplificationConfig = Field(default_factory=SimplificationConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != VECTORIZER_SCHEMA:
            raise ValueError(f"Expected schema '{VECTORIZER_SCHEMA}', got '{v}'")
        return v


# ============================================================================
# SHAPE CACHE SCHEMA V1
# ============================================================================

class ShapeCacheMetadata(BaseModel):
    """Provenance stored next to a cached outline."""
    generated_at: str = Field(..., description="ISO 8601 timestamp")
    vertex_count: int = Field(..., ge=0, description="Total polyline vertices")
    source_sha256: Optional[str] = Field(None, description="Digest of the source sprite")
    config_sha256: Optional[str] = Field(None, description="Digest of the vectorizer parameters")


class ShapeCacheFileV1(BaseModel):
    """Cached ShapeOutline for one sprite name."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field(SHAPE_CACHE_SCHEMA, alias="schema", description="Schema version")
    name: str = Field(..., min_length=1, description="Logical shape name")
    polylines: List[List[List[float]]] = Field(..., description="Polylines as [[x, y], ...]")
    metadata: ShapeCacheMetadata

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SHAPE_CACHE_SCHEMA:
            raise ValueError(f"Expected schema '{SHAPE_CACHE_SCHEMA}', got '{v}'")
        return v

    @field_validator('polylines')
    @classmethod
    def validate_polylines(cls, v: List[List[List[float]]]) -> List[List[List[float]]]:
        for i, polyline in enumerate(v):
            if len(polyline) < 2:
                raise ValueError(f"Polyline {i} must have at least 2 points, got {len(polyline)}")
            for j, pt in enumerate(polyline):
                if len(pt) != 2:
                    raise ValueError(f"Polyline {i} point {j} must have 2 coordinates, got {len(pt)}")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def default_vectorizer_config() -> VectorizerV1:
    """Config with every field at its default (matches the core constants)."""
    return VectorizerV1()


def load_vectorizer_config(path: Union[str, Path]) -> VectorizerV1:
    """Load and validate vectorizer config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to vectorizer.v1.yaml file

    Returns
    -------
    VectorizerV1
        Validated vectorizer configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vectorizer config not found: {path}")

    data = fs.load_yaml(path) or {}
    try:
        return VectorizerV1(**data)
    except Exception as e:
        raise ValueError(f"Vectorizer config validation failed at {path}: {e}") from e


def load_shape_cache_file(path: Union[str, Path]) -> ShapeCacheFileV1:
    """Load and validate a cached shape outline from YAML.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Shape cache file not found: {path}")

    data = fs.load_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"Shape cache validation failed at {path}: expected a mapping")
    try:
        return ShapeCacheFileV1(**data)
    except Exception as e:
        raise ValueError(f"Shape cache validation failed at {path}: {e}") from e
