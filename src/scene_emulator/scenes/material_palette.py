"""
material_palette.py - fixed table of scene materials

Each material carries a CIE xyY descriptor and a lighting class:
  - DIRECT   : lit by direct ambient light (reflectance in Y, 1 = full)
  - SELF_LIT : emissive source; Y is an absolute illuminance in lux
  - SHADED   : lit by shade light
  - SKY      : lit like DIRECT (sky reflectance relative to the sun)

The palette is a process-wide immutable tuple; nothing mutates it at runtime.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
import math
from typing import Tuple

import numpy as np

from scene_emulator.illumination.illumination_model import (
    DAYLIGHT_SHADE_ILLUM,
    DIRECT_SUN_ILLUM,
    DIRECT_SUNLIGHT_XY,
    FULL_MOON_ILLUM,
    INCANDESCENT_XY,
    LIVING_ROOM_ILLUM,
    MOONLIGHT_XY,
    NOON_SKY_XY,
    xyY_to_XYZ,
)


class LightingClass(Enum):
    DIRECT = "direct"
    SELF_LIT = "self_lit"
    SHADED = "shaded"
    SKY = "sky"


class Material(IntEnum):
    """Palette indices."""
    GRASS = 0
    GRASS_SHADOW = 1
    HILL = 2
    WALL = 3
    ROOF = 4
    DOOR = 5
    CHIMNEY = 6
    WINDOW = 7
    SUN = 8
    SKY = 9
    MOON = 10


@dataclass(frozen=True)
class MaterialDescriptor:
    """
    One palette entry.

    x, y : chromaticity
    Y : reflectance (0..1) or, for SELF_LIT, illuminance in lux
    lighting : LightingClass
    """
    name: str
    x: float
    y: float
    Y: float
    lighting: LightingClass = LightingClass.DIRECT

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.x, self.y, self.Y)):
            raise ValueError(f"material {self.name!r}: xyY must be finite")
        if self.y == 0.0:
            raise ValueError(f"material {self.name!r}: chromaticity y must be non-zero")

    def to_XYZ(self) -> np.ndarray:
        return xyY_to_XYZ(self.x, self.y, self.Y)


PALETTE: Tuple[MaterialDescriptor, ...] = (
    MaterialDescriptor("grass", 0.3688, 0.4501, 0.1329, LightingClass.DIRECT),
    MaterialDescriptor("grass_shadow", 0.3688, 0.4501, 0.1329, LightingClass.SHADED),
    MaterialDescriptor("hill", 0.3986, 0.5002, 0.4440, LightingClass.SHADED),
    MaterialDescriptor("wall", 0.3262, 0.5040, 0.2297, LightingClass.SHADED),
    MaterialDescriptor("roof", 0.4336, 0.3787, 0.1029, LightingClass.SHADED),
    MaterialDescriptor("door", 0.3316, 0.2544, 0.0639, LightingClass.SHADED),
    MaterialDescriptor("chimney", 0.3425, 0.3577, 0.0887, LightingClass.SHADED),
    MaterialDescriptor("window", *INCANDESCENT_XY, LIVING_ROOM_ILLUM, LightingClass.SELF_LIT),
    MaterialDescriptor("sun", *DIRECT_SUNLIGHT_XY, DIRECT_SUN_ILLUM, LightingClass.SELF_LIT),
    MaterialDescriptor("sky", *NOON_SKY_XY, DAYLIGHT_SHADE_ILLUM / DIRECT_SUN_ILLUM, LightingClass.SKY),
    MaterialDescriptor("moon", *MOONLIGHT_XY, FULL_MOON_ILLUM, LightingClass.SELF_LIT),
)

NUM_MATERIALS = len(PALETTE)
