"""
handshake.py - synthetic hand-tremor jitter

Horizontal and vertical offsets are each the sum of two sinusoids at roughly
human hand-shake frequencies, expressed as a fraction of a scene tile and
scaled by the scene-to-sensor map divisor:

    dx(t) = (M1 sin(wx1 t) + M2 sin(wx2 t)) * map_div * SHAKE_FRACTION
    dy(t) = (M1 sin(wy1 t) + M2 sin(wy2 t)) * map_div * SHAKE_FRACTION

A positive ``divider`` attenuates both offsets; zero or negative leaves them
as they are. Pure function of its inputs.
"""

from __future__ import annotations
import math
from typing import Tuple

# Angular frequencies in a nanosecond timebase
HORIZ_SHAKE_FREQ1 = 2 * math.pi * 2 / 1e9    # 2 Hz
HORIZ_SHAKE_FREQ2 = 2 * math.pi * 13 / 1e9   # 13 Hz
VERT_SHAKE_FREQ1 = 2 * math.pi * 3 / 1e9     # 3 Hz
VERT_SHAKE_FREQ2 = 2 * math.pi * 11 / 1e9    # 11 Hz
FREQ1_MAGNITUDE = 5.0
FREQ2_MAGNITUDE = 1.0
SHAKE_FRACTION = 0.03   # of a scene tile


def handshake_offset(time_since_idx_ns: float, map_div: int, divider: int = 0) -> Tuple[float, float]:
    """
    Jitter offset at a point in time.

    Parameters
    ----------
    time_since_idx_ns : float
        Nanoseconds since the start of the current interpolation bucket.
    map_div : int
        Scene-to-sensor mapping divisor (sensor pixels per scene tile).
    divider : int
        Attenuation; applied only when > 0.

    Returns
    -------
    (dx, dy) in sensor pixels
    """
    t = float(time_since_idx_ns)
    scale = map_div * SHAKE_FRACTION
    dx = (FREQ1_MAGNITUDE * math.sin(HORIZ_SHAKE_FREQ1 * t) +
          FREQ2_MAGNITUDE * math.sin(HORIZ_SHAKE_FREQ2 * t)) * scale
    dy = (FREQ1_MAGNITUDE * math.sin(VERT_SHAKE_FREQ1 * t) +
          FREQ2_MAGNITUDE * math.sin(VERT_SHAKE_FREQ2 * t)) * scale
    if divider > 0:
        dx /= divider
        dy /= divider
    return dx, dy
