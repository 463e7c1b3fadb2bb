"""Atomic filesystem operations for shape cache artifacts and YAML handling.

Provides:
    - Atomic writes: tmp file → fsync → rename (prevents partial reads)
    - YAML load/save
    - Directory creation with exist_ok semantics
    - Modification-time lookup for cache freshness checks

Shape cache files are written by one process and may be read by another
(e.g. a batch run warming the cache while a game build reads it), so every
artifact goes through atomic_write_bytes.

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from sprite_outline.utils import fs
    fs.atomic_yaml_dump(doc, cache_dir / "cloud1.vcache.yaml")
    doc = fs.load_yaml(cache_dir / "cloud1.vcache.yaml")

Note: Module named `fs.py` rather than `io.py` to avoid shadowing stdlib `io`.
"""

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    RuntimeError
        If the write or rename fails (tmp file is cleaned up)

    Notes
    -----
    Uses same directory for tmp file to ensure atomic rename on same filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Atomic rename (overwrites existing file on POSIX)
        tmp_path.replace(path)
    except Exception as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8"
) -> None:
    """Write text to file atomically.

    Convenience wrapper around atomic_write_bytes.
    """
    atomic_write_bytes(path, text.encode(encoding))


def atomic_yaml_dump(obj: Any, path: Union[str, Path]) -> None:
    """Save object as YAML atomically.

    Parameters
    ----------
    obj : Any
        Python object (dict, list, primitives)
    path : Union[str, Path]
        Target YAML file path

    Notes
    -----
    Uses PyYAML safe_dump, so only plain Python types are accepted
    (numpy scalars must be converted by the caller).
    Key order is preserved.
    """
    yaml_str = yaml.safe_dump(
        obj,
        default_flow_style=None,
        sort_keys=False,
        allow_unicode=True
    )
    atomic_write_text(path, yaml_str)


def load_yaml(path: Union[str, Path]) -> Any:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Any
        Parsed YAML content (usually a dict)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def modification_time(path: Union[str, Path]) -> Optional[float]:
    """Return the file's modification time, or None if it can't be read.

    Parameters
    ----------
    path : Union[str, Path]
        File path

    Returns
    -------
    Optional[float]
        ``st_mtime`` in seconds since the epoch, None for missing files
    """
    try:
        return Path(path).stat().st_mtime
    except OSError:
        return None


def safe_remove(path: Union[str, Path]) -> bool:
    """Remove file safely (no error if missing).

    Parameters
    ----------
    path : Union[str, Path]
        Path to remove

    Returns
    -------
    bool
        True if removed, False if it didn't exist or couldn't be removed
    """
    path = Path(path)
    try:
        if path.is_symlink() or path.exists():
            path.unlink()
            return True
        return False
    except OSError:
        return False
