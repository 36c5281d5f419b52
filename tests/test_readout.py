import numpy as np

from scene_emulator.scenes.scene_bitmap import SceneBitmap
from scene_emulator.sensor.readout import PixelElectrons, ReadoutCursor


def _bitmap():
    px = np.zeros((2, 3, 3), dtype=np.uint8)
    px[0, 0] = (10, 20, 30)      # B, G, R
    px[1, 2] = (1, 2, 3)
    return SceneBitmap.from_pixels(px)


def test_channel_mapping():
    cursor = ReadoutCursor()
    px = cursor.get_pixel_electrons(_bitmap())
    assert px == PixelElectrons(r=30, gr=20, gb=0, b=10)


def test_cursor_positions_sample():
    bmp = _bitmap()
    cursor = ReadoutCursor()
    cursor.set_readout_pixel(2, 1)
    assert cursor.position == (2, 1)
    assert cursor.get_pixel_electrons(bmp) == (3, 2, 0, 1)
    cursor.reset()
    assert cursor.position == (0, 0)


def test_reads_are_independent():
    bmp = _bitmap()
    cursor = ReadoutCursor()
    first = cursor.get_pixel_electrons(bmp)
    cursor.set_readout_pixel(2, 1)
    second = cursor.get_pixel_electrons(bmp)
    assert first == (30, 20, 0, 10)
    assert second == (3, 2, 0, 1)
