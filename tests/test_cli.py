"""Test the vectorize_sprites command line entrypoint.

Tests for scripts/vectorize_sprites.py:
    - Unknown --log-level values are rejected by argparse
    - --log-level is case-insensitive
    - End-to-end run writes the combined outlines YAML

Run:
    pytest tests/test_cli.py -v
"""

import logging
import sys

import numpy as np
import pytest
from PIL import Image

from scripts.vectorize_sprites import main
from sprite_outline.utils import fs, logging_config


RED = (220, 30, 30, 255)


@pytest.fixture
def restore_logging(monkeypatch):
    """Undo setup_logging() and install_excepthook() after each run."""
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
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


@pytest.fixture
def sprite_dir(tmp_path):
    d = tmp_path / "sprites"
    d.mkdir()
    img = np.zeros((10, 10, 4), dtype=np.uint8)
    img[2:7, 2:7] = RED
    Image.fromarray(img).save(d / "square.png")
    return d


@pytest.mark.parametrize("level", ["LOUD", "verbose", ""])
def test_rejects_unknown_log_level(sprite_dir, capsys, level):
    with pytest.raises(SystemExit) as exc_info:
        main([str(sprite_dir), "--no-cache", "--log-level", level])
    assert exc_info.value.code == 2
    assert "--log-level" in capsys.readouterr().err


def test_log_level_case_insensitive(sprite_dir, tmp_path, restore_logging):
    rc = main([
        str(sprite_dir),
        "--cache-dir", str(tmp_path / "shape_cache"),
        "--log-level", "warning",
    ])
    assert rc == 0
    assert logging.getLogger().level == logging.WARNING


def test_writes_combined_outlines(sprite_dir, tmp_path, capsys, restore_logging):
    output = tmp_path / "out" / "outlines.yaml"
    rc = main([
        str(sprite_dir),
        "--no-cache",
        "--output", str(output),
        "--log-level", "error",
    ])

    assert rc == 0
    doc = fs.load_yaml(output)
    assert doc["schema"] == "shape_outlines.v1"
    assert doc["shapes"]["square"] == [[[2.0, 2.0], [6.0, 3.0], [5.0, 6.0], [2.0, 5.0], [2.0, 3.0]]]
    assert "square" in capsys.readouterr().out


def test_missing_input_dir(tmp_path, restore_logging):
    assert main([str(tmp_path / "nowhere"), "--no-cache", "--log-level", "critical"]) == 1
