import matplotlib

matplotlib.use("Agg")

import pytest

from scene_emulator.config import SceneConfig
from scene_emulator.scene_model import EmulatedScene
from scene_emulator.scenes.scene_generator import generate_scene


@pytest.fixture(autouse=True)
def _no_live_url(monkeypatch):
    monkeypatch.delenv("VENDOR_QEMU_CAMERA_URL", raising=False)
    monkeypatch.delenv("SCENE_EMULATOR_URL_ENV", raising=False)
    monkeypatch.delenv("SCENE_EMULATOR_FETCH_TIMEOUT", raising=False)


@pytest.fixture
def small_scene():
    return generate_scene("gradient", width=8, height=6, tint=(1.0, 0.5, 0.25))


@pytest.fixture
def emulated(small_scene):
    scene = EmulatedScene(SceneConfig(sensor_width_px=640, sensor_height_px=480), scene=small_scene)
    yield scene
    scene.close()
