import numpy as np
import pytest

from scene_emulator.scenes.scene_bitmap import SceneBitmap
from scene_emulator.scenes.scene_generator import generate_scene, to_bitmap


@pytest.mark.parametrize("kind", ["blank", "slanted_edge", "barcode", "gradient", "siemens_star", "checker",
                                  "edge", "siemens", "checkerboard"])
def test_generated_geometry(kind):
    bmp = generate_scene(kind, width=32, height=24)
    assert isinstance(bmp, SceneBitmap)
    assert bmp.pixels.shape == (24, 32, 3)


def test_blank_is_zero():
    assert not generate_scene("blank", 16, 8).pixels.any()


def test_gradient_tint_and_range():
    bmp = generate_scene("gradient", width=16, height=4, tint=(1.0, 0.0, 0.0))
    px = bmp.pixels
    assert px[..., 0].max() == 0 and px[..., 1].max() == 0   # B, G
    assert px[0, 0, 2] == 0 and px[0, -1, 2] == 255           # R ramps 0 -> 255


def test_checker_tiles():
    bmp = generate_scene("checker", width=8, height=8, square_px=4)
    assert bmp.sample(0, 0) == (0, 0, 0)
    assert bmp.sample(4, 0) == (255, 255, 255)
    assert bmp.sample(4, 4) == (0, 0, 0)


def test_unknown_kind_falls_back_to_gradient():
    np.testing.assert_array_equal(generate_scene("nope", 16, 4).pixels,
                                  generate_scene("gradient", 16, 4).pixels)


def test_to_bitmap_clips():
    bmp = to_bitmap(np.array([[-1.0, 2.0]], dtype=np.float32))
    assert bmp.sample(0, 0) == (0, 0, 0)
    assert bmp.sample(1, 0) == (255, 255, 255)
