#!/usr/bin/env python3
"""Vectorize a directory of sprites into cached outline polylines.

For every image in the input directory (shape name = file stem):
    1. Reuse the cached outline if it is still fresh
    2. Otherwise decode, vectorize and write <cache_dir>/<name>.vcache.yaml
    3. Optionally write all outlines to one combined YAML

Usage:
    # Default config
    python scripts/vectorize_sprites.py assets/sprites/

    # Custom config, recompute two shapes, combined output
    python scripts/vectorize_sprites.py assets/sprites/ --config configs/vectorizer.v1.yaml \\
        --force cloud1 platform1 --output outputs/outlines.yaml

    # Ignore the disk cache entirely
    python scripts/vectorize_sprites.py assets/sprites/ --no-cache
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sprite_outline.batch import discover_sprites, vectorize_directory, write_outlines_yaml
from sprite_outline.shapes import build_shape_cache
from sprite_outline.utils import validators
from sprite_outline.utils.logging_config import get_logger, install_excepthook, setup_logging

DEFAULT_CONFIG = Path("configs/vectorizer.v1.yaml")
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def main(argv=None) -> int:
    """CLI entrypoint for sprite vectorization."""
    parser = argparse.ArgumentParser(
        description="Extract outline polylines from sprite images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input_dir", type=Path, help="Directory containing sprite images")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Vectorizer config YAML (default: {DEFAULT_CONFIG} if present)",
    )
    parser.add_argument("--pattern", default="*.png", help="Sprite file glob (default: *.png)")
    parser.add_argument("--cache-dir", type=Path, default=None, help="Override cache.cache_dir")
    parser.add_argument("--force", nargs="*", default=[], metavar="NAME", help="Shape names to recompute")
    parser.add_argument("--no-cache", action="store_true", help="Disable the disk cache")
    parser.add_argument("--output", type=Path, default=None, help="Write all outlines to this YAML")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override logging.log_level",
    )

    args = parser.parse_args(argv)

    config_path = args.config
    if config_path is None and DEFAULT_CONFIG.exists():
        config_path = DEFAULT_CONFIG
    cfg = (
        validators.load_vectorizer_config(config_path)
        if config_path is not None
        else validators.default_vectorizer_config()
    )

    if args.cache_dir is not None:
        cfg.cache.cache_dir = str(args.cache_dir)
    if args.force:
        cfg.cache.force_revectorize = sorted(set(cfg.cache.force_revectorize) | set(args.force))
    if args.no_cache:
        cfg.cache.enabled = False
    if args.log_level:
        cfg.logging.log_level = args.log_level

    setup_logging(**cfg.logging.model_dump(by_alias=True), context={"app": "vectorize"})
    install_excepthook()
    logger = get_logger(__name__)

    try:
        sprites = discover_sprites(args.input_dir, args.pattern)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    if not sprites:
        logger.warning("No sprites matching %s in %s", args.pattern, args.input_dir)
        return 0

    cache = build_shape_cache(cfg, resolve_source=sprites.get)
    outlines = vectorize_directory(args.input_dir, cache=cache, pattern=args.pattern)

    for name, outline in outlines.items():
        print(f"{name:24s} {len(outline):4d} polylines {sum(len(p) for p in outline):6d} vertices")

    if args.output is not None:
        write_outlines_yaml(outlines, args.output)
        logger.info("Wrote %s", args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
