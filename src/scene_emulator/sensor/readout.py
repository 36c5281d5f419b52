"""
readout.py - per-pixel readout cursor over the active scene bitmap

The external sensor pipeline positions the cursor, then reads one pixel's
channel values. Each read returns a fresh PixelElectrons tuple; nothing is
shared between successive reads.

Byte -> channel mapping (B, G, R storage):
    R  <- third byte
    Gr <- second byte
    B  <- first byte
    Gb is not populated by this path and reads as 0.
"""

from __future__ import annotations
from typing import NamedTuple

from scene_emulator.scenes.scene_bitmap import SceneBitmap


class PixelElectrons(NamedTuple):
    r: int
    gr: int
    gb: int
    b: int


class ReadoutCursor:
    """Mutable (x, y) sample position. No bounds checking; callers stay inside the bitmap."""

    def __init__(self) -> None:
        self.x = 0
        self.y = 0

    def set_readout_pixel(self, x: int, y: int) -> None:
        self.x = int(x)
        self.y = int(y)

    def reset(self) -> None:
        self.set_readout_pixel(0, 0)

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    def get_pixel_electrons(self, bitmap: SceneBitmap) -> PixelElectrons:
        b, g, r = bitmap.sample(self.x, self.y)
        return PixelElectrons(r=r, gr=g, gb=0, b=b)
