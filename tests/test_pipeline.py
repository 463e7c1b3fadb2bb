"""Test the end-to-end vectorization pipeline and pixel buffers.

Tests for sprite_outline.vectorizer.pipeline and pixel_buffer:
    - Empty (transparent / uniform) images → empty outline, not an error
    - Single square → one polyline with 5 vertices around the perimeter
    - Two disjoint shapes → two polylines
    - Shape with a hole → outer and inner contours
    - Determinism (bit-identical repeated runs)
    - Thresholds from VectorizerV1 config
    - InvalidDimensions for bad buffers
    - decode_image via Pillow (in-memory and PNG file)

Run:
    pytest tests/test_pipeline.py -v
"""

import numpy as np
import pytest
from PIL import Image

from sprite_outline.utils import validators
from sprite_outline.vectorizer import (
    InvalidDimensions,
    PixelBuffer,
    VectorizationPipeline,
    decode_image,
    outline_from_lists,
    outline_to_lists,
    vectorize,
)


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)

SQUARE_OUTLINE = [[(2.0, 2.0), (6.0, 3.0), (5.0, 6.0), (2.0, 5.0), (2.0, 3.0)]]


# ============================================================================
# PIPELINE
# ============================================================================

def test_transparent_image_gives_empty_outline(make_sprite):
    assert vectorize(make_sprite(12, 9)) == []


def test_uniform_opaque_image_gives_empty_outline(make_sprite):
    assert vectorize(make_sprite(12, 9, background=RED)) == []


def test_single_square(square_sprite):
    outline = vectorize(square_sprite)
    assert outline == SQUARE_OUTLINE
    xs = [x for x, _ in outline[0]]
    ys = [y for _, y in outline[0]]
    assert (min(xs), max(xs), min(ys), max(ys)) == (2.0, 6.0, 2.0, 6.0)


def test_two_disjoint_shapes(make_sprite):
    sprite = make_sprite(20, 10, [(2, 2, 6, 6, RED), (11, 3, 16, 7, GREEN)])
    outline = vectorize(sprite)
    assert len(outline) == 2
    assert outline[0] == SQUARE_OUTLINE[0]
    assert outline[1][0] == (11.0, 3.0)
    assert all(len(polyline) >= 2 for polyline in outline)


def test_hole_is_separate_contour(make_rgba):
    img = make_rgba(12, 12, rects=[(2, 2, 9, 9, RED)])
    img[5:7, 5:7] = (0, 0, 0, 0)
    outline = vectorize(PixelBuffer.from_array(img))
    assert len(outline) == 2
    assert outline[0][0] == (2.0, 2.0)
    assert outline[1][0] == (4.0, 4.0)


def test_color_regions_on_opaque_background(make_sprite):
    sprite = make_sprite(10, 10, [(3, 3, 6, 6, RED)], background=GREEN)
    outline = vectorize(sprite)
    assert len(outline) >= 1
    for polyline in outline:
        for x, y in polyline:
            assert 1.0 <= x <= 8.0 and 1.0 <= y <= 8.0


def test_deterministic(blob_sprite):
    first = vectorize(blob_sprite)
    second = vectorize(blob_sprite)
    rebuilt = vectorize(PixelBuffer.from_array(blob_sprite.as_array().copy()))
    assert first
    assert first == second == rebuilt


def test_pipeline_from_config_thresholds(make_sprite):
    sprite = make_sprite(10, 10, [(3, 3, 6, 6, RED)], background=GREEN)
    cfg = validators.VectorizerV1(classification={"color_threshold": 442})
    # Red/green distance is ~360, below the raised threshold
    assert VectorizationPipeline.from_config(cfg).vectorize(sprite) == []
    assert VectorizationPipeline().vectorize(sprite) != []


def test_pipeline_parameters():
    pipeline = VectorizationPipeline(alpha_threshold=10, color_threshold=20, edge_angle_tolerance=1.5)
    assert pipeline.parameters() == {
        'alpha_threshold': 10,
        'color_threshold': 20,
        'edge_angle_tolerance': 1.5,
    }


def test_outline_nested_list_form(square_sprite):
    outline = vectorize(square_sprite)
    as_lists = outline_to_lists(outline)
    assert as_lists[0][0] == [2.0, 2.0]
    assert outline_from_lists(as_lists) == outline


def test_outline_from_lists_rejects_bad_points():
    with pytest.raises(ValueError):
        outline_from_lists([[[1.0, 2.0], [3.0]]])


# ============================================================================
# PIXEL BUFFER / ERRORS
# ============================================================================

@pytest.mark.parametrize("width, height", [(2, 5), (5, 2), (0, 0)])
def test_too_small_rejected(width, height):
    with pytest.raises(InvalidDimensions):
        PixelBuffer(width, height, bytes(4 * width * height))


def test_length_mismatch_rejected():
    with pytest.raises(InvalidDimensions):
        PixelBuffer(4, 4, bytes(4 * 4 * 4 - 1))


def test_invalid_dimensions_is_value_error():
    assert issubclass(InvalidDimensions, ValueError)


def test_vectorize_missing_buffer():
    with pytest.raises(InvalidDimensions):
        vectorize(None)


def test_from_array_validation():
    with pytest.raises(InvalidDimensions):
        PixelBuffer.from_array(np.zeros((5, 5, 3), dtype=np.uint8))
    with pytest.raises(InvalidDimensions):
        PixelBuffer.from_array(np.zeros((5, 5, 4), dtype=np.float32))
    with pytest.raises(InvalidDimensions):
        PixelBuffer.from_array(None)


def test_buffer_is_read_only(square_sprite):
    arr = square_sprite.as_array()
    assert arr.shape == (10, 10, 4)
    assert not arr.flags.writeable
    assert square_sprite.pixel(2, 2) == (220, 30, 30, 255)
    assert square_sprite.pixel(0, 0) == (0, 0, 0, 0)


def test_mutable_input_is_copied(make_rgba):
    raw = bytearray(make_rgba(5, 5, rects=[(1, 1, 3, 3, RED)]).tobytes())
    buffer = PixelBuffer(5, 5, raw)
    raw[:] = bytes(len(raw))

    assert isinstance(buffer.data, bytes)
    assert buffer.pixel(2, 2) == RED
    assert not buffer.as_array().flags.writeable


# ============================================================================
# DECODING
# ============================================================================

def test_decode_pil_image(make_rgba):
    img = make_rgba(8, 6, rects=[(2, 2, 5, 3, RED)])
    buffer = decode_image(Image.fromarray(img))
    assert (buffer.width, buffer.height) == (8, 6)
    np.testing.assert_array_equal(buffer.as_array(), img)


def test_decode_rgb_png_adds_opaque_alpha(tmp_path):
    path = tmp_path / "opaque.png"
    Image.new("RGB", (5, 4), (10, 20, 30)).save(path)
    buffer = decode_image(path)
    assert buffer.pixel(1, 1) == (10, 20, 30, 255)


def test_decode_and_vectorize_png(tmp_path, make_rgba):
    path = tmp_path / "square.png"
    Image.fromarray(make_rgba(10, 10, rects=[(2, 2, 6, 6, RED)])).save(path)
    assert vectorize(decode_image(path)) == SQUARE_OUTLINE


def test_decode_none_is_invalid():
    with pytest.raises(InvalidDimensions):
        decode_image(None)


def test_decode_tiny_image_is_invalid():
    with pytest.raises(InvalidDimensions):
        decode_image(Image.new("RGBA", (2, 2)))
