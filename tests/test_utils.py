"""Test the cross-cutting utils (fs, hashing, logging_config).

Tests for sprite_outline.utils:
    - Atomic writes leave no tmp files and overwrite in place
    - YAML roundtrip preserves key order
    - modification_time() / safe_remove() on missing files
    - SHA-256 helpers are deterministic; hash_dict ignores key order
    - Logging idempotency, JSON file output and context fields

Run:
    pytest tests/test_utils.py -v
"""

import contextlib
import io
import json
import logging

import pytest

from sprite_outline.utils import fs, hashing, logging_config


@pytest.fixture
def restore_logging():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(False)
    logging_config.pop_context()


# ============================================================================
# FS
# ============================================================================

def test_ensure_dir_creates_parents(tmp_path):
    target = fs.ensure_dir(tmp_path / "a" / "b" / "c")
    assert target.is_dir()
    assert fs.ensure_dir(target) == target


def test_atomic_write_bytes(tmp_path):
    path = tmp_path / "sub" / "data.bin"
    fs.atomic_write_bytes(path, b"first")
    fs.atomic_write_bytes(path, b"second")

    assert path.read_bytes() == b"second"
    assert [p.name for p in path.parent.iterdir()] == ["data.bin"]


def test_atomic_yaml_roundtrip_keeps_order(tmp_path):
    doc = {"schema": "x.v1", "name": "cloud1", "polylines": [[[1.0, 2.0], [3.0, 4.0]]]}
    path = tmp_path / "doc.yaml"
    fs.atomic_yaml_dump(doc, path)

    loaded = fs.load_yaml(path)
    assert loaded == doc
    assert list(loaded) == ["schema", "name", "polylines"]


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        fs.load_yaml(tmp_path / "missing.yaml")


def test_modification_time(tmp_path):
    path = tmp_path / "file.txt"
    assert fs.modification_time(path) is None
    path.write_text("x")
    assert fs.modification_time(path) == path.stat().st_mtime


def test_safe_remove(tmp_path):
    path = tmp_path / "file.txt"
    path.write_text("x")
    assert fs.safe_remove(path) is True
    assert not path.exists()
    assert fs.safe_remove(path) is False


# ============================================================================
# HASHING
# ============================================================================

def test_sha256_file_matches_bytes(tmp_path):
    path = tmp_path / "sprite.bin"
    payload = bytes(range(256)) * 10
    path.write_bytes(payload)

    digest = hashing.sha256_file(path, chunk_size=100)
    assert digest == hashing.sha256_bytes(payload)
    assert len(digest) == 64


def test_sha256_file_empty(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    assert hashing.sha256_file(path) == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_sha256_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        hashing.sha256_file(tmp_path / "missing.bin")


def test_hash_dict_order_independence():
    a = {"alpha_threshold": 128, "color_threshold": 50, "edge_angle_tolerance": 2.0}
    b = {"edge_angle_tolerance": 2.0, "color_threshold": 50, "alpha_threshold": 128}
    assert hashing.hash_dict(a) == hashing.hash_dict(b)
    assert hashing.hash_dict(a) != hashing.hash_dict({**a, "color_threshold": 60})


def test_hash_and_verify_workflow(tmp_path):
    path = tmp_path / "sprite.png"
    path.write_bytes(b"pixels")
    digest = hashing.sha256_file(path)

    assert hashing.verify_file_hash(path, digest)
    path.write_bytes(b"other pixels")
    assert not hashing.verify_file_hash(path, digest)
    assert not hashing.verify_file_hash(tmp_path / "missing.png", digest)


# ============================================================================
# LOGGING
# ============================================================================

def test_logging_idempotency(tmp_path, restore_logging):
    """Test logging file output and idempotency."""
    log_path = tmp_path / "test.log"

    errbuf = io.StringIO()
    with contextlib.redirect_stderr(errbuf):
        logging_config.setup_logging(
            log_level="INFO",
            log_file=str(log_path),
            json=True,
            to_stderr=False,
            context={"app": "test"}
        )
        logger = logging_config.get_logger("utils_test")
        logger.info("hello")

        info = logging_config.setup_logging(
            log_level="INFO",
            log_file=str(log_path),
            json=True,
            to_stderr=False,
            context={"app": "test"}
        )
        logger.info("world")

    assert len(info["handlers"]) == 1
    lines = log_path.read_text().strip().splitlines()
    assert len(lines) == 2

    rec = json.loads(lines[0])
    assert rec["msg"] == "hello"
    assert rec["lvl"] == "INFO"
    assert rec.get("app") == "test"


def test_logging_context_push_pop(tmp_path, restore_logging):
    log_path = tmp_path / "ctx.log"
    logging_config.setup_logging(log_file=str(log_path), json=True, to_stderr=False)
    logger = logging_config.get_logger("utils_test")

    logging_config.push_context(shape="cloud1", batch=3)
    logger.info("inside")
    logging_config.pop_context(keys=["shape"])
    logger.info("outside")

    first, second = [json.loads(line) for line in log_path.read_text().splitlines()]
    assert first["shape"] == "cloud1" and first["batch"] == 3
    assert "shape" not in second
    assert second["batch"] == 3


def test_human_format_and_level(tmp_path, restore_logging):
    log_path = tmp_path / "human.log"
    logging_config.setup_logging(
        log_level="warning",
        log_file=str(log_path),
        to_stderr=False,
        context={"app": "vectorize"},
    )
    logger = logging_config.get_logger("utils_test")
    logger.info("dropped")
    logger.warning("kept %d", 1)

    text = log_path.read_text()
    assert "dropped" not in text
    assert "| WARNING  | app=vectorize | kept 1" in text


def test_unknown_rotation_mode(tmp_path, restore_logging):
    with pytest.raises(ValueError, match="rotation mode"):
        logging_config.setup_logging(
            log_file=str(tmp_path / "r.log"), to_stderr=False, rotate={"mode": "weekly"}
        )
