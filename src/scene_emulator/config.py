"""
config.py - grouped configuration for the emulated scene

SceneConfig holds the long-lived state every frame reads. It is only a
starting point: EmulatedScene copies it and exposes explicit setters for the
values that change at runtime (hour, screen rotation, exposure, filters,
test pattern).
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os
from typing import Optional, Tuple

from scene_emulator.live.scene_source import DEFAULT_URL_ENV
from scene_emulator.scenes.scene_generator import DEFAULT_SCENE_HEIGHT, DEFAULT_SCENE_WIDTH

URL_ENV_OVERRIDE = "SCENE_EMULATOR_URL_ENV"
FETCH_TIMEOUT_ENV = "SCENE_EMULATOR_FETCH_TIMEOUT"


@dataclass
class SceneConfig:
    """
    Scene configuration.

    Sensor
    ------
    sensor_width_px, sensor_height_px : active array size (pixels)
    sensor_sensitivity : electrons per lux-second at f/1
    sensor_orientation : mounting angle, one of 0 / 90 / 180 / 270 degrees
    is_front_facing : mirrored optics (negates the orientation, rotates
                      counter-clockwise)

    Simulated world
    ---------------
    hour : simulated hour of day (wraps at 24)
    screen_rotation : device screen rotation (degrees)
    exposure_duration_s : exposure time (seconds)
    fast_scene_cycle : derive the hour from frame time, a full day in 14.4 s

    Scene buffer
    ------------
    scene_width, scene_height : canonical bitmap geometry (pixels)

    Live source
    -----------
    live_url : fixed URL; when None the URL is read from ``live_url_env``
    live_url_env : environment variable holding the URL
    fetch_timeout_s : request timeout; None blocks

    Test pattern
    ------------
    test_pattern_enabled : flag handed to the sensor pipeline
    test_pattern_data : 4 x 32-bit payload
    """
    # Sensor
    sensor_width_px: int = 640
    sensor_height_px: int = 480
    sensor_sensitivity: float = 100.0
    sensor_orientation: int = 0
    is_front_facing: bool = False

    # Simulated world
    hour: int = 12
    screen_rotation: int = 0
    exposure_duration_s: float = 0.033
    fast_scene_cycle: bool = False

    # Scene buffer
    scene_width: int = DEFAULT_SCENE_WIDTH
    scene_height: int = DEFAULT_SCENE_HEIGHT

    # Live source
    live_url: Optional[str] = None
    live_url_env: str = DEFAULT_URL_ENV
    fetch_timeout_s: Optional[float] = None

    # Test pattern
    test_pattern_enabled: bool = False
    test_pattern_data: Tuple[int, int, int, int] = field(default=(0, 0, 0, 0))

    @classmethod
    def from_env(cls, **overrides) -> "SceneConfig":
        """
        Defaults + environment + explicit overrides (highest priority).

        SCENE_EMULATOR_URL_ENV       name of the variable holding the live URL
        SCENE_EMULATOR_FETCH_TIMEOUT fetch timeout in seconds
        """
        k = {}
        url_env = os.environ.get(URL_ENV_OVERRIDE)
        if url_env:
            k["live_url_env"] = url_env
        timeout = os.environ.get(FETCH_TIMEOUT_ENV)
        if timeout:
            k["fetch_timeout_s"] = float(timeout)
        k.update(overrides)
        return cls(**k)
