"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - Atomic I/O (fs)
    - Hashing for provenance (hashing)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (vectorizer, shapes, batch).

Convenience imports:
    from sprite_outline.utils import fs, validators
    from sprite_outline.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import hashing
from . import logging_config
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'hashing',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
