"""
color_projector.py - lit material XYZ -> RGGB sensor electrons

WHAT THIS MODULE DOES
---------------------
For every palette material:
  1) xyY -> XYZ (reflectance or, for self-lit sources, absolute lux)
  2) Multiply component-wise by the direct or shade illuminant XYZ
     (self-lit materials are left as they are)
  3) Project through four 3-element colour filters (R, Gr, Gb, B)
  4) Scale lux to electrons:
         electrons = lux * sensitivity * exposure_s / aperture^2

LEARNING NOTES
--------------
- The default filters are the XYZ -> linear sRGB matrix rows, i.e. an
  idealized sensor whose channels are the sRGB primaries. Negative lobes are
  kept, so saturated colours can produce negative channel values.
- The two greens (Gr on red rows, Gb on blue rows) share a filter by default,
  but can be set independently to emulate green imbalance.

REFERENCES (short list)
-----------------------
- IEC 61966-2-1:1999. sRGB colour space (XYZ -> RGB matrix).
- Janesick, J. R. (2007). Photon Transfer. SPIE Press.
  (Sensitivity, exposure and f-number in the signal chain)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import math
from typing import Sequence, Tuple

import numpy as np

from scene_emulator.illumination.illumination_model import IlluminationState
from scene_emulator.scenes.material_palette import PALETTE, LightingClass, MaterialDescriptor

logger = logging.getLogger(__name__)

APERTURE = 2.8   # f-number of the imaging lens

# Channel order of every electron tuple
R, GR, GB, B = 0, 1, 2, 3
NUM_CHANNELS = 4
CHANNEL_NAMES = ("R", "Gr", "Gb", "B")


def _srgb_r() -> Tuple[float, float, float]:
    return (3.2406, -1.5372, -0.4986)


def _srgb_g() -> Tuple[float, float, float]:
    return (-0.9689, 1.8758, 0.0415)


def _srgb_b() -> Tuple[float, float, float]:
    return (0.0557, -0.2040, 1.0570)


def _check_row(name: str, row: Sequence[float]) -> Tuple[float, float, float]:
    row = tuple(float(v) for v in row)
    if len(row) != 3 or not all(math.isfinite(v) for v in row):
        raise ValueError(f"filter {name} must be 3 finite floats, got {row!r}")
    return row


@dataclass(frozen=True)
class ColorFilterXYZ:
    """
    Per-channel spectral response expressed as XYZ weights.

    Each field is a (X, Y, Z) weight triple; defaults are sRGB primaries.
    """
    r: Tuple[float, float, float] = field(default_factory=_srgb_r)
    gr: Tuple[float, float, float] = field(default_factory=_srgb_g)
    gb: Tuple[float, float, float] = field(default_factory=_srgb_g)
    b: Tuple[float, float, float] = field(default_factory=_srgb_b)

    def __post_init__(self) -> None:
        for name in ("r", "gr", "gb", "b"):
            object.__setattr__(self, name, _check_row(name, getattr(self, name)))

    @classmethod
    def from_flat(cls, values: Sequence[float]) -> "ColorFilterXYZ":
        """Build from 12 floats: rX, rY, rZ, grX, ..., bZ."""
        values = list(values)
        if len(values) != 12:
            raise ValueError(f"expected 12 filter coefficients, got {len(values)}")
        return cls(r=values[0:3], gr=values[3:6], gb=values[6:9], b=values[9:12])

    def as_matrix(self) -> np.ndarray:
        """(4, 3) matrix, rows in R, Gr, Gb, B order."""
        return np.array([self.r, self.gr, self.gb, self.b], dtype=np.float64)


def lux_to_electrons(sensitivity: float, exposure_s: float, aperture: float = APERTURE) -> float:
    return float(sensitivity) * float(exposure_s) / (aperture * aperture)


def project_palette(
    illumination: IlluminationState,
    filters: ColorFilterXYZ,
    sensitivity: float,
    exposure_s: float,
    palette: Sequence[MaterialDescriptor] = PALETTE,
    aperture: float = APERTURE,
) -> np.ndarray:
    """
    Electron counts for every material under the current illumination.

    Parameters
    ----------
    illumination : IlluminationState
        This frame's ambient light.
    filters : ColorFilterXYZ
        Sensor channel responses.
    sensitivity : float
        Sensor sensitivity (electrons per lux-second at f/1).
    exposure_s : float
        Exposure duration in seconds.
    palette : sequence of MaterialDescriptor
    aperture : float
        Lens f-number.

    Returns
    -------
    table : (len(palette), 4) float64 array indexed [material, channel]
    """
    gain = lux_to_electrons(sensitivity, exposure_s, aperture)
    fmat = filters.as_matrix()
    table = np.empty((len(palette), NUM_CHANNELS), dtype=np.float64)

    for i, mat in enumerate(palette):
        mat_xyz = mat.to_XYZ()
        if mat.lighting in (LightingClass.DIRECT, LightingClass.SKY):
            mat_xyz = mat_xyz * illumination.direct_illum_xyz
        elif mat.lighting is LightingClass.SHADED:
            mat_xyz = mat_xyz * illumination.shade_illum_xyz
        # SELF_LIT: already absolute lux

        table[i] = (fmat @ mat_xyz) * gain
        logger.debug("Color %d (%s) RGGB: %.1f, %.1f, %.1f, %.1f", i, mat.name, *table[i])

    table.setflags(write=False)
    return table
