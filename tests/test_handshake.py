import pytest

from scene_emulator.motion.handshake import (
    FREQ1_MAGNITUDE,
    FREQ2_MAGNITUDE,
    SHAKE_FRACTION,
    handshake_offset,
)

T = 123_456_789   # ns


def test_still_at_bucket_start():
    assert handshake_offset(0, 4) == (0.0, 0.0)


def test_divider_attenuates():
    dx, dy = handshake_offset(T, 4)
    hx, hy = handshake_offset(T, 4, divider=2)
    assert hx == pytest.approx(dx / 2)
    assert hy == pytest.approx(dy / 2)
    qx, _ = handshake_offset(T, 4, divider=4)
    assert qx == pytest.approx(dx / 4)


@pytest.mark.parametrize("divider", [0, -1, -10])
def test_non_positive_divider_is_ignored(divider):
    assert handshake_offset(T, 4, divider) == handshake_offset(T, 4)


def test_scales_with_map_div():
    dx1, dy1 = handshake_offset(T, 1)
    dx3, dy3 = handshake_offset(T, 3)
    assert dx3 == pytest.approx(3 * dx1)
    assert dy3 == pytest.approx(3 * dy1)


def test_bounded_amplitude():
    bound = (FREQ1_MAGNITUDE + FREQ2_MAGNITUDE) * 2 * SHAKE_FRACTION
    for t in range(0, 2_000_000_000, 37_000_000):
        dx, dy = handshake_offset(t, 2)
        assert abs(dx) <= bound + 1e-12
        assert abs(dy) <= bound + 1e-12
