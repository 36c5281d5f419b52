"""
scene_emulator - virtual camera scene model
================================================
Produces per-pixel sensor electron values for an emulated camera, organized as:
    illumination -> scenes (palette, bitmap rotations) -> sensor (colour
    projection, readout) + motion (hand-shake) + live (network scene source)
tied together by scene_model.EmulatedScene once per simulated frame.
"""

from scene_emulator.config import SceneConfig
from scene_emulator.scene_model import EmulatedScene

__all__ = ["EmulatedScene", "SceneConfig"]
__version__ = "0.1.0"
