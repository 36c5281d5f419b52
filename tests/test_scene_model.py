import numpy as np
import pytest

from scene_emulator.config import SceneConfig
from scene_emulator.illumination.illumination_model import DIRECT_SUN_ILLUM, ONE_HOUR_NS
from scene_emulator.live.scene_source import DEFAULT_URL_ENV, LiveSceneSource
from scene_emulator.scene_model import EmulatedScene
from scene_emulator.scenes.material_palette import Material
from scene_emulator.scenes.scene_bitmap import SceneBitmap, SceneRotationTable
from scene_emulator.sensor.color_projector import B, GB, GR, R


class FakeProvider:
    """Stands in for the network scene source."""

    def __init__(self, payload=b"", configured=True):
        self.payload = payload
        self.configured = configured
        self.calls = 0

    def is_configured(self):
        return self.configured

    def fetch(self):
        self.calls += 1
        return self.payload


def test_defaults(emulated):
    assert emulated.get_hour() == 12
    assert emulated.config.exposure_duration_s == pytest.approx(0.033)
    assert emulated.illumination is None
    assert not emulated.color_table.any()


def test_map_divisor_and_offsets():
    with EmulatedScene(SceneConfig(sensor_width_px=640, sensor_height_px=480)) as scene:
        assert (scene.scene_width, scene.scene_height) == (640, 480)
        assert scene.map_div == 1
        assert (scene.offset_x, scene.offset_y) == (0, 0)
        scene.initialize(1920, 1080, 200.0)
        assert scene.map_div == 1920 // 641 + 1
        assert scene.offset_x == (640 * scene.map_div - 1920) // 2
        assert scene.config.sensor_sensitivity == 200.0
        scene.initialize(480, 640, 100.0)
        assert scene.map_div == 640 // 481 + 1


def test_noon_frame(emulated):
    emulated.calculate_scene(0, 0)
    st = emulated.illumination
    assert st.direct_illum_xyz[1] == pytest.approx(DIRECT_SUN_ILLUM, rel=1e-6)
    grass = emulated.color_table[Material.GRASS]
    assert np.all(grass > 0)
    assert grass[GR] == grass[GB] > grass[R] > grass[B]


def test_frames_are_deterministic(emulated):
    emulated.set_screen_rotation(90)
    emulated.calculate_scene(5_000_000, 3)
    table, rotation, shake = emulated.color_table.copy(), emulated.scene_rotation, emulated.handshake
    emulated.calculate_scene(5_000_000, 3)
    np.testing.assert_array_equal(emulated.color_table, table)
    assert emulated.scene_rotation == rotation == 90
    assert emulated.handshake == shake


def test_handshake_divider(emulated):
    emulated.calculate_scene(250_000_000, 0)
    full = emulated.handshake
    emulated.calculate_scene(250_000_000, -1)
    assert emulated.handshake == full
    emulated.calculate_scene(250_000_000, 5)
    assert emulated.handshake[0] == pytest.approx(full[0] / 5)
    assert emulated.handshake[1] == pytest.approx(full[1] / 5)


def test_hour_setter_wraps_and_changes_colors(emulated):
    emulated.calculate_scene(0)
    noon = emulated.color_table.copy()
    emulated.set_hour(25)
    assert emulated.get_hour() == 1
    emulated.calculate_scene(0)
    assert emulated.color_table[Material.GRASS][GR] < noon[Material.GRASS][GR]
    np.testing.assert_array_equal(emulated.color_table[Material.SUN], noon[Material.SUN])


def test_exposure_setter(emulated):
    emulated.calculate_scene(0)
    base = emulated.color_table.copy()
    emulated.set_exposure_duration(0.066)
    emulated.calculate_scene(0)
    np.testing.assert_allclose(emulated.color_table, 2 * base)


def test_color_filter_setter(emulated):
    emulated.set_color_filter_xyz(1, 0, 0, 0, 1, 0, 0, 1, 0, 0, 0, 1)
    emulated.calculate_scene(0)
    window = emulated.color_table[Material.WINDOW]
    assert window[GR] == pytest.approx(50.0 * 100.0 * 0.033 / 2.8 ** 2)
    with pytest.raises(ValueError):
        emulated.set_color_filter_xyz(1.0, 2.0)


@pytest.mark.parametrize("screen, orientation, front, expected", [
    (0, 90, False, 90),
    (0, 90, True, 270),
    (180, 0, False, 180),
    (45, 0, False, 45),
])
def test_rotation_selection(small_scene, screen, orientation, front, expected):
    cfg = SceneConfig(screen_rotation=screen, sensor_orientation=orientation, is_front_facing=front)
    with EmulatedScene(cfg, scene=small_scene) as scene:
        scene.calculate_scene(0)
        assert scene.scene_rotation == expected
        assert scene.current_scene is scene.rotations.select(expected)
        if expected == 45:
            assert scene.current_scene is scene.rotations[0]


def test_readout_follows_selected_rotation(emulated, small_scene):
    emulated.set_screen_rotation(180)
    emulated.set_readout_pixel(3, 2)
    emulated.calculate_scene(0)
    assert emulated.cursor.position == (0, 0)
    W, H = small_scene.width, small_scene.height
    b, g, r = small_scene.sample(W - 1, H - 1)
    assert emulated.get_pixel_electrons() == (r, g, 0, b)
    emulated.set_readout_pixel(W - 1, H - 1)
    b, g, r = small_scene.sample(0, 0)
    assert emulated.get_pixel_electrons_column() == (r, g, 0, b)


def test_fast_scene_cycle(small_scene):
    with EmulatedScene(SceneConfig(fast_scene_cycle=True), scene=small_scene) as scene:
        scene.calculate_scene(5 * ONE_HOUR_NS // 6000)
        assert scene.get_hour() == 5
        scene.calculate_scene(30 * ONE_HOUR_NS // 6000)
        assert scene.get_hour() == 6


def test_test_pattern_settings(emulated):
    emulated.set_test_pattern(True)
    emulated.set_test_pattern_data([1, 2, 3, 2 ** 32 + 4])
    assert emulated.config.test_pattern_enabled
    assert emulated.config.test_pattern_data == (1, 2, 3, 4)
    with pytest.raises(ValueError):
        emulated.set_test_pattern_data([1, 2])


def test_config_is_copied(small_scene):
    cfg = SceneConfig(hour=30)
    with EmulatedScene(cfg, scene=small_scene) as scene:
        scene.set_hour(3)
        assert scene.get_hour() == 3
    assert cfg.hour == 30


# -----------------------------------------------------------------------------
# Live source
# -----------------------------------------------------------------------------
def test_live_partial_payload_overwrites_prefix_only(small_scene):
    before = small_scene.to_bytes()
    provider = FakeProvider(payload=b"\xaa" * 60)
    with EmulatedScene(scene=small_scene, provider=provider) as scene:
        scene.set_screen_rotation(90)
        scene.set_readout_pixel(2, 2)
        scene.calculate_scene(0)

        after = scene.canonical.to_bytes()
        assert after[:60] == b"\xaa" * 60
        assert after[60:] == before[60:]
        assert len(after) == len(before)
        assert provider.calls == 1
        assert scene.is_live_frame
        assert scene.cursor.position == (0, 0)
        # raw passthrough: the canonical buffer is read, no rotation applied
        assert scene.active_scene is scene.canonical
        assert scene.get_pixel_electrons() == (0xAA, 0xAA, 0, 0xAA)
        assert scene.illumination is None
        assert not scene.color_table.any()


def test_live_rotations_not_regenerated(small_scene):
    with EmulatedScene(scene=small_scene, provider=FakeProvider(b"\x01" * small_scene.nbytes)) as scene:
        rot0 = scene.rotations[0].to_bytes()
        scene.calculate_scene(0)
        assert scene.canonical.to_bytes() == b"\x01" * small_scene.nbytes
        assert scene.rotations[0].to_bytes() == rot0


def test_live_empty_payload_leaves_scene(small_scene):
    before = small_scene.to_bytes()
    with EmulatedScene(scene=small_scene, provider=FakeProvider(b"")) as scene:
        scene.calculate_scene(0)
        assert scene.canonical.to_bytes() == before
        assert scene.is_live_frame


def test_live_source_off_returns_to_procedural(small_scene):
    provider = FakeProvider(b"\x05" * 10)
    with EmulatedScene(scene=small_scene, provider=provider) as scene:
        scene.calculate_scene(0)
        provider.configured = False
        scene.calculate_scene(0)
        assert not scene.is_live_frame
        assert scene.active_scene is scene.current_scene
        assert scene.illumination is not None


class _Response:
    content = b"\x07" * 8

    def raise_for_status(self):
        pass


class _Session:
    def get(self, url, timeout=None):
        self.url = url
        return _Response()

    def close(self):
        pass


def test_env_configured_live_source(monkeypatch, small_scene):
    monkeypatch.setenv(DEFAULT_URL_ENV, "http://cam.local/frame")
    session = _Session()
    with EmulatedScene(scene=small_scene, provider=LiveSceneSource(session=session)) as scene:
        scene.calculate_scene(0)
        assert session.url == "http://cam.local/frame"
        assert scene.canonical.to_bytes()[:8] == b"\x07" * 8


def test_owned_source_closed_on_exit(small_scene):
    with EmulatedScene(scene=small_scene) as scene:
        assert isinstance(scene.provider, LiveSceneSource)
    assert scene.provider.session is None


def test_live_frame_over_bytes_backed_scene():
    raw = bytes(range(54 + 4 * 3 * 3))
    frozen = SceneBitmap(4, 3, np.frombuffer(raw, dtype=np.uint8))
    assert not frozen.writeable
    with EmulatedScene(scene=frozen, provider=FakeProvider(b"\x11" * 16)) as scene:
        scene.calculate_scene(0)
        assert scene.canonical.to_bytes()[:16] == b"\x11" * 16
        assert scene.canonical.to_bytes()[16:] == raw[16:]
    assert frozen.to_bytes() == raw


def test_live_frame_leaves_callers_bitmap_untouched():
    blank = SceneBitmap.blank(4, 3)
    with EmulatedScene(scene=blank, provider=FakeProvider(b"\x11" * 16)) as scene:
        scene.calculate_scene(0)
        assert scene.canonical is not blank
    assert not blank.data.any()


def test_rotation_entry_usable_as_scene(small_scene):
    rotated = SceneRotationTable(small_scene)[90]
    with EmulatedScene(scene=rotated, provider=FakeProvider(b"\x22" * 8)) as scene:
        scene.calculate_scene(0)
        assert scene.canonical.to_bytes()[:8] == b"\x22" * 8
