"""
plots.py - diagnostics for the emulated scene

WHAT THIS MODULE PROVIDES
-------------------------
- daylight_curve(samples_per_hour)
    Sun / moon illuminance and direct / shade luminance sampled across 24 h.
- plot_daylight_curve(curve)
    Log-scale lux vs. hour; sunrise, sunset and the night floor are obvious.
- plot_color_table(table)
    Grouped bars of R, Gr, Gb, B electrons per palette material.
- show_bitmap(bitmap)
    Display a SceneBitmap (B, G, R storage) as an RGB image.

LEARNING NOTES
--------------
- Illuminance spans ~8 decades (2e-3 lux night sky .. 1e5 lux sun), so the
  daylight plot uses a log axis with a small floor.
"""

from __future__ import annotations
from typing import Dict, Sequence

import numpy as np
import matplotlib.pyplot as plt

from scene_emulator.illumination.illumination_model import ONE_HOUR_NS, compute_illumination
from scene_emulator.scenes.material_palette import PALETTE
from scene_emulator.scenes.scene_bitmap import SceneBitmap
from scene_emulator.sensor.color_projector import CHANNEL_NAMES


# -----------------------------------------------------------------------------
# Day sweep
# -----------------------------------------------------------------------------
def daylight_curve(samples_per_hour: int = 4) -> Dict[str, np.ndarray]:
    """
    Sample the illumination model over a full day.

    Returns
    -------
    dict with float64 arrays:
        'hour'      fractional hour of day
        'sun_lux'   interpolated sun illuminance
        'moon_lux'  interpolated moon illuminance
        'direct_Y'  luminance of the direct illuminant
        'shade_Y'   luminance of the shade illuminant
    """
    n = max(int(samples_per_hour), 1)
    rows = []
    for hour in range(24):
        for s in range(n):
            t = ONE_HOUR_NS * s // n
            st = compute_illumination(hour, t)
            rows.append((hour + s / n, st.sun_lux, st.moon_lux,
                         st.direct_illum_xyz[1], st.shade_illum_xyz[1]))
    arr = np.array(rows, dtype=np.float64)
    keys = ("hour", "sun_lux", "moon_lux", "direct_Y", "shade_Y")
    return {k: arr[:, i] for i, k in enumerate(keys)}


def plot_daylight_curve(curve: Dict[str, np.ndarray], title: str = "Illumination over the day", floor: float = 1e-4):
    fig, ax = plt.subplots(figsize=(8, 4))
    for key, label in (("sun_lux", "Sun"), ("moon_lux", "Moon"),
                       ("direct_Y", "Direct Y"), ("shade_Y", "Shade Y")):
        ax.semilogy(curve["hour"], np.maximum(curve[key], floor), label=label)
    ax.set_xlabel("Hour of day")
    ax.set_ylabel("Illuminance [lux]")
    ax.set_xlim(0, 24)
    ax.set_title(title)
    ax.grid(True, which="both", alpha=0.3)
    ax.legend()
    fig.tight_layout()
    return fig


# -----------------------------------------------------------------------------
# Colour table
# -----------------------------------------------------------------------------
def plot_color_table(table: np.ndarray, names: Sequence[str] | None = None, title: str = "Material electrons"):
    """
    Grouped bar chart of a (materials, 4) electron table.

    Uses a symlog axis: self-lit sources outshine reflective materials by
    orders of magnitude and filter lobes can go negative.
    """
    table = np.asarray(table, dtype=np.float64)
    names = list(names) if names is not None else [m.name for m in PALETTE][:table.shape[0]]
    x = np.arange(table.shape[0])
    width = 0.2
    colors = ("tab:red", "tab:green", "tab:olive", "tab:blue")

    fig, ax = plt.subplots(figsize=(10, 4))
    for c, (cname, color) in enumerate(zip(CHANNEL_NAMES, colors)):
        ax.bar(x + (c - 1.5) * width, table[:, c], width, label=cname, color=color)
    ax.set_yscale("symlog", linthresh=1.0)
    ax.set_xticks(x)
    ax.set_xticklabels(names, rotation=30, ha="right")
    ax.set_ylabel("Electrons")
    ax.set_title(title)
    ax.legend()
    fig.tight_layout()
    return fig


def show_bitmap(bitmap: SceneBitmap, title: str = "Scene"):
    fig, ax = plt.subplots()
    ax.imshow(bitmap.pixels[..., ::-1])
    ax.set_title(title)
    ax.axis("off")
    fig.tight_layout()
    return fig
