"""
illumination_model.py - sun / moon / starlight colorimetry over a 24 h cycle

WHAT THIS MODULE DOES
---------------------
Turns a simulated clock (hour of day + nanoseconds into the hour) into the
two ambient light sources every scene material is lit by:
  1) Sun and moon illuminance [lux] sampled from 2-hour step tables and
     linearly interpolated between the current bucket and the next one.
  2) Sun / shade chromaticity (x, y) interpolated the same way between
     sunset-coloured and daylight-coloured white points.
  3) xyY -> XYZ conversion of every source.
  4) Aggregation into
        direct_illum_xyz : sun + moon + clear-night sky, "standing in full light"
        shade_illum_xyz  : clear-night sky + sun and moon, each either direct
                           or shaded depending on whether it is past overhead.

LEARNING NOTES
--------------
- XYZ is linear in spectral power, so light sources simply add in XYZ.
- A material lit by a source is modelled per-component:
      XYZ_material = XYZ_reflectance * XYZ_source
  which is a (crude) von-Kries-style product rather than a spectral integral.
- Shade is modelled as the sun scaled by daylight-shade / direct-sun
  illuminance (20 000 / 100 000 lux), with a bluer sky-light white point.

REFERENCES (short list)
-----------------------
- Wyszecki, G. & Stiles, W. S. (2000). Color Science (2e). Wiley.
  (xyY/XYZ relations, CIE daylight loci)
- CIE 15:2004. Colorimetry. (Standard illuminant chromaticities)
- Schlyter, P. Radiometry and photometry in astronomy.
  (Typical sun / moon / night-sky illuminance levels)
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Time base
# -----------------------------------------------------------------------------
ONE_HOUR_NS = 60 * 60 * 1_000_000_000
TIME_STEP_H = 2                         # hours per interpolation bucket
NUM_BUCKETS = 24 // TIME_STEP_H


# -----------------------------------------------------------------------------
# Illuminance levels [lux]
# -----------------------------------------------------------------------------
DIRECT_SUN_ILLUM = 100000.0
SUNSET_ILLUM = 400.0
TWILIGHT_ILLUM = 4.0
FULL_MOON_ILLUM = 1.0
DAYLIGHT_SHADE_ILLUM = 20000.0
CLEAR_NIGHT_ILLUM = 2e-3
STAR_ILLUM = 2e-6
LIVING_ROOM_ILLUM = 50.0

# Hours at which the sun / moon pass overhead; after that the shaded
# variant of the source lights shadowed materials.
SUN_OVERHEAD_H = 12
MOON_OVERHEAD_H = 0


# -----------------------------------------------------------------------------
# White points (CIE 1931 xy)
# -----------------------------------------------------------------------------
INCANDESCENT_XY = (0.44757, 0.40745)
DIRECT_SUNLIGHT_XY = (0.34842, 0.35161)
DAYLIGHT_XY = (0.31271, 0.32902)
NOON_SKY_XY = (0.346, 0.359)
MOONLIGHT_XY = (0.34842, 0.35161)
SUNSET_XY = (0.527, 0.413)


# Sun illuminance per 2 h bucket, starting at 00:00
SUNLIGHT: Tuple[float, ...] = (
    0.0,                # 00:00
    0.0,
    0.0,
    TWILIGHT_ILLUM,     # 06:00
    DIRECT_SUN_ILLUM,
    DIRECT_SUN_ILLUM,
    DIRECT_SUN_ILLUM,   # 12:00
    DIRECT_SUN_ILLUM,
    DIRECT_SUN_ILLUM,
    SUNSET_ILLUM,       # 18:00
    TWILIGHT_ILLUM,
    0.0,
)

# Moon illuminance per 2 h bucket, starting at 00:00
MOONLIGHT: Tuple[float, ...] = (
    FULL_MOON_ILLUM,    # 00:00
    FULL_MOON_ILLUM,
    0.0,
    0.0,                # 06:00
    0.0,
    0.0,
    0.0,                # 12:00
    0.0,
    0.0,
    0.0,                # 18:00
    0.0,
    FULL_MOON_ILLUM,
)

SHADE_FRACTION = DAYLIGHT_SHADE_ILLUM / DIRECT_SUN_ILLUM


# -----------------------------------------------------------------------------
# xyY -> XYZ
# -----------------------------------------------------------------------------
def xyY_to_XYZ(x: float, y: float, Y: float) -> np.ndarray:
    """
    Convert a chromaticity + luminance triple to CIE XYZ.

        X = Y / y * x
        Y = Y
        Z = Y / y * (1 - x - y)

    ``y`` must be non-zero. Built-in tables guarantee this; values coming from
    callers are validated where they enter (see MaterialDescriptor).
    """
    return np.array([Y / y * x, Y, Y / y * (1.0 - x - y)], dtype=np.float64)


CLEAR_NIGHT_XYZ = xyY_to_XYZ(MOONLIGHT_XY[0], MOONLIGHT_XY[1], CLEAR_NIGHT_ILLUM)
CLEAR_NIGHT_XYZ.setflags(write=False)


# -----------------------------------------------------------------------------
# Per-frame state
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class IlluminationState:
    """
    Ambient lighting for one frame. Recomputed each frame, never cached.

    Interpolation
    -------------
    time_idx, next_time_idx : bucket indices being blended
    time_since_idx_ns : nanoseconds elapsed since the start of ``time_idx``
    time_frac : blend weight of ``next_time_idx`` (0 at bucket start)

    Levels & white points
    ---------------------
    sun_lux, moon_lux : interpolated illuminance [lux]
    sun_xy, shade_xy : interpolated chromaticities

    Sources (XYZ)
    -------------
    sun_xyz, sun_shade_xyz, moon_xyz, moon_shade_xyz, clear_night_xyz

    Aggregates (XYZ)
    ----------------
    direct_illum_xyz, shade_illum_xyz
    """
    hour: int
    time_idx: int
    next_time_idx: int
    time_since_idx_ns: int
    time_frac: float

    sun_lux: float
    moon_lux: float
    sun_xy: Tuple[float, float]
    shade_xy: Tuple[float, float]

    sun_xyz: np.ndarray
    sun_shade_xyz: np.ndarray
    moon_xyz: np.ndarray
    moon_shade_xyz: np.ndarray
    clear_night_xyz: np.ndarray

    direct_illum_xyz: np.ndarray
    shade_illum_xyz: np.ndarray


def interpolation_point(hour: int, time_ns: int) -> Tuple[int, int, int, float]:
    """
    Locate the simulated clock inside the 2 h bucket tables.

    Returns
    -------
    time_idx, next_time_idx, time_since_idx_ns, time_frac
    """
    time_idx = hour // TIME_STEP_H
    next_time_idx = (time_idx + 1) % NUM_BUCKETS
    time_since_idx = (hour - time_idx * TIME_STEP_H) * ONE_HOUR_NS + int(time_ns)
    time_frac = time_since_idx / float(ONE_HOUR_NS * TIME_STEP_H)
    return time_idx, next_time_idx, time_since_idx, time_frac


def _lerp(a: float, b: float, frac: float) -> float:
    return a * (1.0 - frac) + b * frac


def _bucket_white_points(level: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    # Low sun (sunset / twilight) is reddened for both sun and shade
    if level == SUNSET_ILLUM or level == TWILIGHT_ILLUM:
        return SUNSET_XY, SUNSET_XY
    return DIRECT_SUNLIGHT_XY, DAYLIGHT_XY


def compute_illumination(hour: int, time_ns: int = 0) -> IlluminationState:
    """
    Compute direct and shaded ambient light for a simulated time of day.

    Parameters
    ----------
    hour : int
        Simulated hour of day (0..23). Values outside are wrapped.
    time_ns : int
        Nanoseconds elapsed within the hour (monotonically increasing over
        the frames of that hour).

    Returns
    -------
    IlluminationState
    """
    hour = int(hour) % 24
    time_idx, next_time_idx, time_since_idx, time_frac = interpolation_point(hour, time_ns)

    # 1) Sunlight level
    sun_lux = _lerp(SUNLIGHT[time_idx], SUNLIGHT[next_time_idx], time_frac)
    sun_shade_lux = sun_lux * SHADE_FRACTION
    logger.debug("Sun lux: %f", sun_lux)

    # 2) Sun / shade chromaticity
    prev_sun_xy, prev_shade_xy = _bucket_white_points(SUNLIGHT[time_idx])
    next_sun_xy, next_shade_xy = _bucket_white_points(SUNLIGHT[next_time_idx])
    sun_xy = (_lerp(prev_sun_xy[0], next_sun_xy[0], time_frac),
              _lerp(prev_sun_xy[1], next_sun_xy[1], time_frac))
    shade_xy = (_lerp(prev_shade_xy[0], next_shade_xy[0], time_frac),
                _lerp(prev_shade_xy[1], next_shade_xy[1], time_frac))
    logger.debug("Sun XY: %f, %f, Shade XY: %f, %f", sun_xy[0], sun_xy[1], shade_xy[0], shade_xy[1])

    sun_xyz = xyY_to_XYZ(sun_xy[0], sun_xy[1], sun_lux)
    sun_shade_xyz = xyY_to_XYZ(shade_xy[0], shade_xy[1], sun_shade_lux)
    logger.debug("Sun XYZ: %s, Sun shade XYZ: %s", sun_xyz, sun_shade_xyz)

    # 3) Moonlight (fixed white point)
    moon_lux = _lerp(MOONLIGHT[time_idx], MOONLIGHT[next_time_idx], time_frac)
    moon_shade_lux = moon_lux * SHADE_FRACTION
    moon_xyz = xyY_to_XYZ(MOONLIGHT_XY[0], MOONLIGHT_XY[1], moon_lux)
    moon_shade_xyz = xyY_to_XYZ(MOONLIGHT_XY[0], MOONLIGHT_XY[1], moon_shade_lux)

    # 4) Aggregate
    direct_illum_xyz = sun_xyz + moon_xyz + CLEAR_NIGHT_XYZ

    shade_illum_xyz = CLEAR_NIGHT_XYZ.copy()
    shade_illum_xyz += sun_xyz if hour < SUN_OVERHEAD_H else sun_shade_xyz

    # Moon is up across midnight; shift by 12 h so the comparison does not wrap
    adj_hour = (hour + 12) % 24
    adj_moon_overhead = (MOON_OVERHEAD_H + 12) % 24
    shade_illum_xyz += moon_xyz if adj_hour < adj_moon_overhead else moon_shade_xyz

    logger.debug("Direct XYZ: %s, Shade XYZ: %s", direct_illum_xyz, shade_illum_xyz)

    return IlluminationState(
        hour=hour,
        time_idx=time_idx,
        next_time_idx=next_time_idx,
        time_since_idx_ns=time_since_idx,
        time_frac=time_frac,
        sun_lux=sun_lux,
        moon_lux=moon_lux,
        sun_xy=sun_xy,
        shade_xy=shade_xy,
        sun_xyz=sun_xyz,
        sun_shade_xyz=sun_shade_xyz,
        moon_xyz=moon_xyz,
        moon_shade_xyz=moon_shade_xyz,
        clear_night_xyz=CLEAR_NIGHT_XYZ,
        direct_illum_xyz=direct_illum_xyz,
        shade_illum_xyz=shade_illum_xyz,
    )
