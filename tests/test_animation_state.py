import pytest

from aemkit.animation_state import AnimationState


def test_defaults_select_bind_pose():
    state = AnimationState()
    assert state.current_index == -1
    assert state.speed == 100
    assert state.loop is True
    assert state.playing is False


def test_activate_valid_index_resets_time():
    state = AnimationState(animation_count=3, time=1.5)
    state.activate(2)
    assert state.current_index == 2
    assert state.time == 0.0


def test_activate_out_of_range_is_ignored():
    state = AnimationState(animation_count=2, current_index=1, time=0.7)
    state.activate(2)
    assert state.current_index == 1
    assert state.time == 0.7


def test_activate_negative_stops_playback():
    state = AnimationState(animation_count=2, current_index=1, playing=True, time=0.4)
    state.activate(-5)
    assert state.current_index == -1
    assert state.playing is False
    assert state.time == 0.0


def test_update_does_nothing_when_paused():
    state = AnimationState(time=0.3)
    state.update(1.0, 10.0)
    assert state.time == 0.3


def test_update_at_full_speed_advances_by_delta():
    state = AnimationState(playing=True, current_index=0)
    state.update(0.5, 10.0)
    assert state.time == pytest.approx(0.5)


def test_update_speed_scales_time():
    fast = AnimationState(playing=True, speed=200)
    slow = AnimationState(playing=True, speed=100)
    fast.update(0.25, 10.0)
    slow.update(0.25, 10.0)
    assert fast.time == pytest.approx(2 * slow.time)


def test_update_loops_to_start():
    state = AnimationState(playing=True, loop=True, time=0.9)
    state.update(0.5, 1.0)
    assert state.time == 0.0
    assert state.playing is True


def test_update_without_loop_stops_at_end():
    state = AnimationState(playing=True, loop=False, time=0.9)
    state.update(0.5, 1.0)
    assert state.time == 1.0
    assert state.playing is False