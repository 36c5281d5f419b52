"""
scene_model.py - the emulated scene: frame orchestration and readout

WHAT THIS MODULE DOES
---------------------
EmulatedScene ties the stages together once per simulated frame:

    live source configured?
      yes -> fetch bytes -> overwrite canonical bitmap -> reset cursor
      no  -> illumination(hour, t)
             -> colour projection (palette x filters -> RGGB electrons)
             -> handshake jitter
             -> rotation selection (screen + sensor orientation)
             -> reset cursor

after which the external sensor pipeline polls pixels through
``set_readout_pixel`` / ``get_pixel_electrons``.

Live frames are raw passthrough: readout samples the canonical bitmap and no
rotation is applied; the rotation tables keep the scene they were built from.

The model is single-threaded. One ``calculate_scene`` call completes before
readout starts; concurrent frame computation and readout needs external
locking.
"""

from __future__ import annotations
import copy
import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from scene_emulator.config import SceneConfig
from scene_emulator.illumination.illumination_model import (
    ONE_HOUR_NS,
    IlluminationState,
    compute_illumination,
)
from scene_emulator.live.scene_source import LiveSceneSource, SceneProvider
from scene_emulator.motion.handshake import handshake_offset
from scene_emulator.scenes.material_palette import NUM_MATERIALS, PALETTE
from scene_emulator.scenes.scene_bitmap import (
    SceneBitmap,
    SceneRotationTable,
    scene_rotation_degrees,
)
from scene_emulator.sensor.color_projector import NUM_CHANNELS, ColorFilterXYZ, project_palette
from scene_emulator.sensor.readout import PixelElectrons, ReadoutCursor

logger = logging.getLogger(__name__)


class EmulatedScene:
    """
    Virtual camera scene model.

    Parameters
    ----------
    config : SceneConfig | None
        Initial configuration (copied). Defaults to ``SceneConfig()``.
    scene : SceneBitmap | None
        Canonical 0 degree bitmap, copied (the caller's buffer is never
        written). A blank one of the configured size is allocated when omitted.
    provider : SceneProvider | None
        Live scene provider. A LiveSceneSource built from the config is used
        when omitted; it is owned and closed by this object.
    """

    def __init__(
        self,
        config: Optional[SceneConfig] = None,
        scene: Optional[SceneBitmap] = None,
        provider: Optional[SceneProvider] = None,
    ) -> None:
        self.config = copy.deepcopy(config) if config is not None else SceneConfig()
        cfg = self.config
        cfg.hour = int(cfg.hour) % 24

        self.filters = ColorFilterXYZ()

        # Private writeable copy; live frames overwrite it in place
        self.canonical = scene.copy() if scene is not None else SceneBitmap.blank(cfg.scene_width, cfg.scene_height)
        self.scene_width = self.canonical.width
        self.scene_height = self.canonical.height
        self.rotations = SceneRotationTable(self.canonical, clockwise=not cfg.is_front_facing)
        self._current_scene = self.rotations[0]
        self._scene_rotation = 0
        self._live_frame = False

        self.map_div = 1
        self.offset_x = 0
        self.offset_y = 0
        self.initialize(cfg.sensor_width_px, cfg.sensor_height_px, cfg.sensor_sensitivity)

        self._owns_provider = provider is None
        self.provider: SceneProvider = provider if provider is not None else LiveSceneSource(
            url=cfg.live_url, env_key=cfg.live_url_env, timeout=cfg.fetch_timeout_s)

        self.cursor = ReadoutCursor()
        self._color_table = np.zeros((NUM_MATERIALS, NUM_CHANNELS), dtype=np.float64)
        self._color_table.setflags(write=False)
        self._handshake: Tuple[float, float] = (0.0, 0.0)
        self._illumination: Optional[IlluminationState] = None

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------
    def initialize(self, sensor_width_px: int, sensor_height_px: int, sensor_sensitivity: float) -> None:
        """Set sensor geometry and sensitivity; map the scene onto sensor pixels."""
        cfg = self.config
        cfg.sensor_width_px = int(sensor_width_px)
        cfg.sensor_height_px = int(sensor_height_px)
        cfg.sensor_sensitivity = float(sensor_sensitivity)

        if cfg.sensor_width_px > cfg.sensor_height_px:
            self.map_div = cfg.sensor_width_px // (self.scene_width + 1) + 1
        else:
            self.map_div = cfg.sensor_height_px // (self.scene_height + 1) + 1
        self.offset_x = (self.scene_width * self.map_div - cfg.sensor_width_px) // 2
        self.offset_y = (self.scene_height * self.map_div - cfg.sensor_height_px) // 2

    def set_color_filter_xyz(self, *coefficients: float) -> None:
        """
        Replace the four channel filters.

        Accepts 12 floats (rX, rY, rZ, grX, grY, grZ, gbX, gbY, gbZ, bX, bY, bZ)
        or a single ColorFilterXYZ.
        """
        if len(coefficients) == 1 and isinstance(coefficients[0], ColorFilterXYZ):
            self.filters = coefficients[0]
        else:
            self.filters = ColorFilterXYZ.from_flat(coefficients)
        logger.info("Color filters set: %s", self.filters)

    def set_hour(self, hour: int) -> None:
        logger.debug("Hour set to: %d", hour)
        self.config.hour = int(hour) % 24

    def get_hour(self) -> int:
        return self.config.hour

    def set_screen_rotation(self, screen_rotation: int) -> None:
        self.config.screen_rotation = int(screen_rotation)

    def set_exposure_duration(self, seconds: float) -> None:
        self.config.exposure_duration_s = float(seconds)

    def set_test_pattern(self, enabled: bool) -> None:
        self.config.test_pattern_enabled = bool(enabled)

    def set_test_pattern_data(self, data: Sequence[int]) -> None:
        words = tuple(int(v) & 0xFFFFFFFF for v in data)
        if len(words) != 4:
            raise ValueError(f"test pattern payload must hold 4 words, got {len(words)}")
        self.config.test_pattern_data = words

    # -------------------------------------------------------------------------
    # Per-frame
    # -------------------------------------------------------------------------
    def calculate_scene(self, time_ns: int, handshake_divider: int = 0) -> None:
        """
        Compute one frame.

        Parameters
        ----------
        time_ns : int
            Nanoseconds elapsed within the current simulated hour.
        handshake_divider : int
            Jitter attenuation; values <= 0 mean no attenuation.
        """
        if self.provider.is_configured():
            self._take_live_frame()
            return
        self._live_frame = False

        cfg = self.config
        if cfg.fast_scene_cycle:
            cfg.hour = int(time_ns) * 6000 // ONE_HOUR_NS % 24

        illum = compute_illumination(cfg.hour, time_ns)
        self._illumination = illum
        self._color_table = project_palette(
            illum, self.filters, cfg.sensor_sensitivity, cfg.exposure_duration_s, PALETTE)

        self._handshake = handshake_offset(illum.time_since_idx_ns, self.map_div, handshake_divider)

        self._scene_rotation = scene_rotation_degrees(
            cfg.screen_rotation, cfg.sensor_orientation, cfg.is_front_facing)
        self._current_scene = self.rotations.select(self._scene_rotation)

        self.set_readout_pixel(0, 0)

    compute_frame = calculate_scene

    def _take_live_frame(self) -> None:
        raw = self.provider.fetch()
        if raw:
            written = self.canonical.overwrite(raw)
            logger.info("Live scene updated: %d of %d bytes", written, self.canonical.nbytes)
        self._live_frame = True
        self.set_readout_pixel(0, 0)

    # -------------------------------------------------------------------------
    # Readout
    # -------------------------------------------------------------------------
    def set_readout_pixel(self, x: int, y: int) -> None:
        self.cursor.set_readout_pixel(x, y)

    def get_pixel_electrons(self) -> PixelElectrons:
        return self.cursor.get_pixel_electrons(self.active_scene)

    def get_pixel_electrons_column(self) -> PixelElectrons:
        return self.get_pixel_electrons()

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------
    @property
    def color_table(self) -> np.ndarray:
        """(materials, 4) electrons of the last computed frame (read-only)."""
        return self._color_table

    @property
    def current_scene(self) -> SceneBitmap:
        """Rotation selected by the last procedural frame."""
        return self._current_scene

    @property
    def active_scene(self) -> SceneBitmap:
        """Bitmap the readout samples: canonical for live frames, else the selected rotation."""
        return self.canonical if self._live_frame else self._current_scene

    @property
    def scene_rotation(self) -> int:
        return self._scene_rotation

    @property
    def handshake(self) -> Tuple[float, float]:
        return self._handshake

    @property
    def illumination(self) -> Optional[IlluminationState]:
        return self._illumination

    @property
    def is_live_frame(self) -> bool:
        return self._live_frame

    # -------------------------------------------------------------------------
    # Lifetime
    # -------------------------------------------------------------------------
    def close(self) -> None:
        if self._owns_provider and isinstance(self.provider, LiveSceneSource):
            self.provider.close()

    def __enter__(self) -> "EmulatedScene":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
