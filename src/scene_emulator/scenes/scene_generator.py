"""
scene_generator.py - synthetic canonical scene bitmaps

WHAT THIS MODULE PROVIDES
-------------------------
Generators for the 0 degree scene the emulated camera starts from, so the
readout has structure to show before any live source delivers a frame:
  - Blank             - zero-filled buffer (power-on state of the frame store)
  - Slanted edge      - orientation is obvious after rotation
  - 1-D barcode strip - alternating vertical bars
  - Grayscale gradient
  - Siemens star      - radial frequency sweep
  - Checkerboard

RETURNS
-------
Every generator builds a float32 pattern in [0, 1] on a width x height grid
and quantizes it to 8-bit B, G, R inside a SceneBitmap. A per-channel
``tint`` (R, G, B gains) colours the pattern.
"""

from __future__ import annotations
from typing import Tuple

import numpy as np

from scene_emulator.scenes.scene_bitmap import SceneBitmap

DEFAULT_SCENE_WIDTH = 640
DEFAULT_SCENE_HEIGHT = 480


# -----------------------------------------------------------------------------
# Utilities
# -----------------------------------------------------------------------------
def _normalize(img: np.ndarray) -> np.ndarray:
    img = img.astype(np.float32, copy=False)
    return np.clip(img, 0.0, 1.0)


def to_bitmap(img: np.ndarray, tint: Tuple[float, float, float] = (1.0, 1.0, 1.0)) -> SceneBitmap:
    """
    Quantize a [0, 1] grayscale pattern into a B, G, R SceneBitmap.

    Parameters
    ----------
    img : (H, W) float array in [0, 1]
    tint : (r, g, b) gains in [0, 1] applied before quantization
    """
    img = _normalize(img)
    r, g, b = (float(np.clip(t, 0.0, 1.0)) for t in tint)
    bgr = np.stack([img * b, img * g, img * r], axis=-1)
    return SceneBitmap.from_pixels(np.round(bgr * 255.0).astype(np.uint8))


# -----------------------------------------------------------------------------
# Patterns
# -----------------------------------------------------------------------------
def generate_slanted_edge(width: int, height: int, angle_deg: float = 5.0) -> np.ndarray:
    """Slanted binary edge through the frame centre (0 deg = vertical edge)."""
    xv, yv = np.meshgrid(np.arange(int(width)), np.arange(int(height)))
    theta = np.deg2rad(angle_deg)
    ramp = (xv - width / 2.0) * np.cos(theta) + (yv - height / 2.0) * np.sin(theta)
    return _normalize((ramp > 0).astype(np.float32))


def generate_barcode(width: int, height: int, stripe_width: int = 8) -> np.ndarray:
    x = np.arange(int(width))
    bars = ((x // max(int(stripe_width), 1)) % 2).astype(np.float32)
    return _normalize(np.tile(bars, (int(height), 1)))


def generate_gradient(width: int, height: int, horizontal: bool = True) -> np.ndarray:
    """Unit ramp along +x (or +y)."""
    if horizontal:
        grad = np.tile(np.linspace(0, 1, int(width), dtype=np.float32), (int(height), 1))
    else:
        grad = np.tile(np.linspace(0, 1, int(height), dtype=np.float32)[:, None], (1, int(width)))
    return _normalize(grad)


def generate_siemens_star(width: int, height: int, spokes: int = 36) -> np.ndarray:
    """
    Alternating wedges radiating from the centre.

    Sign of cos(spokes * theta) selects black or white.
    """
    y, x = np.indices((int(height), int(width)))
    cx, cy = (width - 1) / 2.0, (height - 1) / 2.0
    theta = np.arctan2(y - cy, x - cx)
    star = 0.5 * (1.0 + np.sign(np.cos(float(spokes) * theta)))
    return _normalize(star)


def generate_checker(width: int, height: int, square_px: int = 16, invert: bool = False) -> np.ndarray:
    y, x = np.indices((int(height), int(width)))
    s = max(int(square_px), 1)
    tiles = ((x // s) + (y // s)) % 2
    img = 1 - tiles if invert else tiles
    return _normalize(img.astype(np.float32))


# -----------------------------------------------------------------------------
# Dispatcher (public API)
# -----------------------------------------------------------------------------
def generate_scene(
    kind: str = "blank",
    width: int = DEFAULT_SCENE_WIDTH,
    height: int = DEFAULT_SCENE_HEIGHT,
    tint: Tuple[float, float, float] = (1.0, 1.0, 1.0),
    **kwargs,
) -> SceneBitmap:
    """
    Build a canonical scene bitmap by name.

    Parameters
    ----------
    kind : str
        'blank' | 'slanted_edge' | 'barcode' | 'gradient' | 'siemens_star' | 'checker'
        Aliases: 'edge', 'siemens', 'checkerboard'.
    width, height : int
        Scene geometry (pixels).
    tint : (r, g, b)
        Channel gains.

    Returns
    -------
    SceneBitmap
    """
    k = (kind or "").lower().strip()

    if k == "blank":
        return SceneBitmap.from_pixels(np.zeros((int(height), int(width), 3), dtype=np.uint8))
    if k in ("slanted_edge", "edge"):
        img = generate_slanted_edge(width, height, angle_deg=float(kwargs.get("angle_deg", 5.0)))
    elif k == "barcode":
        img = generate_barcode(width, height, stripe_width=int(kwargs.get("stripe_width", 8)))
    elif k == "gradient":
        img = generate_gradient(width, height, horizontal=bool(kwargs.get("horizontal", True)))
    elif k in ("siemens_star", "siemens"):
        img = generate_siemens_star(width, height, spokes=int(kwargs.get("spokes", 36)))
    elif k in ("checker", "checkerboard"):
        img = generate_checker(width, height,
                               square_px=int(kwargs.get("square_px", 16)),
                               invert=bool(kwargs.get("invert", False)))
    else:
        # Fallback: gradient (safe for unknown names)
        img = generate_gradient(width, height)
    return to_bitmap(img, tint=tint)
