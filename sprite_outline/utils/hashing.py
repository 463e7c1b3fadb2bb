"""SHA-256 hashing for sprite and config provenance.

Provides:
    - sha256_file(): Hash file contents (source sprites, cache artifacts)
    - sha256_bytes(): Hash raw bytes (decoded pixel buffers)
    - hash_dict(): Hash a JSON-serializable dict (vectorizer parameters)

Used by the shape cache:
    - ``source_sha256`` recorded next to each cached outline
    - ``config_sha256`` so outlines computed with other thresholds are
      recognisable
    - SourceHashFreshness compares the stored digest with the live sprite

Deterministic hashing:
    - Files read in chunks (1 MB default) for memory efficiency
    - Dict keys sorted before serialization
    - Results are hex strings (64 chars)

Note: Module named `hashing.py` to avoid shadowing builtin `hash()`.
"""

import hashlib
import json
from pathlib import Path
from typing import Union


def sha256_file(path: Union[str, Path], chunk_size: int = 1 << 20) -> str:
    """Compute SHA-256 hash of file contents.

    Parameters
    ----------
    path : Union[str, Path]
        File path
    chunk_size : int
        Read chunk size in bytes, default 1 MB

    Returns
    -------
    str
        SHA-256 hex digest (64 characters)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256 = hashlib.sha256()

    with open(path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            sha256.update(chunk)

    return sha256.hexdigest()


def sha256_bytes(data: bytes) -> str:
    """Compute SHA-256 hash of a bytes-like object.

    Examples
    --------
    >>> sha256_bytes(pixel_buffer.data)
    """
    return hashlib.sha256(data).hexdigest()


def hash_dict(d: dict) -> str:
    """Compute SHA-256 hash of dictionary (sorted keys).

    Parameters
    ----------
    d : dict
        Dictionary to hash (must be JSON-serializable)

    Returns
    -------
    str
        SHA-256 hex digest
    """
    json_str = json.dumps(d, sort_keys=True)
    return sha256_bytes(json_str.encode('utf-8'))


def verify_file_hash(path: Union[str, Path], expected_hash: str) -> bool:
    """Verify file matches expected hash.

    Returns False (instead of raising) when the file is missing.
    """
    try:
        return sha256_file(path) == expected_hash
    except FileNotFoundError:
        return False
