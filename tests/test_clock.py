import pytest

from arcade_loop.clock import FrameClock, NOMINAL_FRAME_MS, MAX_FRAME_DELAY_MS


def test_first_tick_is_nominal():
    clock = FrameClock()
    assert clock.tick(123456.0) == 1.0


def test_nominal_frame_maps_to_one():
    clock = FrameClock(nominal_ms=16.0)
    clock.tick(0.0)
    assert clock.tick(16.0) == 1.0
    assert clock.tick(24.0) == 0.5


def test_stall_is_clamped():
    clock = FrameClock()
    clock.tick(0.0)
    dt = clock.tick(5000.0)
    assert dt == pytest.approx(MAX_FRAME_DELAY_MS / NOMINAL_FRAME_MS)
    assert dt < 2.0


def test_reset_suppresses_spike():
    clock = FrameClock(nominal_ms=16.0)
    clock.tick(0.0)
    clock.reset()
    assert clock.tick(10_000.0) == 1.0


def test_repeated_or_backwards_timestamp_is_nominal():
    clock = FrameClock(nominal_ms=16.0)
    clock.tick(100.0)
    assert clock.tick(100.0) == 1.0
    assert clock.tick(50.0) == 1.0


def test_time_scale():
    clock = FrameClock(nominal_ms=16.0)
    clock.tick(0.0)
    assert clock.tick(16.0, time_scale=0.5) == 0.5
    assert clock.last_dt == 0.5


def test_rejects_bad_durations():
    with pytest.raises(ValueError):
        FrameClock(nominal_ms=0)
    with pytest.raises(ValueError):
        FrameClock(max_delay_ms=-1)
