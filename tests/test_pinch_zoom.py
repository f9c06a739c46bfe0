import pytest

from gestures.config import PinchConfig
from gestures.pinch_zoom import PinchZoomController
from gestures.types import Point2D


def pinch(distance, cx=0.5, cy=0.5):
    """Thumb and index tips `distance` apart, centered on (cx, cy)."""
    return Point2D(cx - distance / 2, cy), Point2D(cx + distance / 2, cy)


@pytest.fixture
def scales():
    return []


@pytest.fixture
def controller(clock, scales):
    return PinchZoomController(PinchConfig(), on_scale_change=scales.append, clock=clock)


def test_first_frame_only_anchors(controller, scales):
    assert controller.on_pinch_frame(*pinch(0.2)) is None
    assert controller.is_pinching
    assert controller.base_distance == pytest.approx(0.2)
    assert scales == []


def test_spread_increases_scale(controller, clock, scales):
    controller.on_pinch_frame(*pinch(0.2))
    clock.advance(0.05)
    new_scale = controller.on_pinch_frame(*pinch(0.25))
    assert new_scale is not None and new_scale > 1.0
    assert scales == [new_scale]
    # Reference drifts toward the current distance
    assert controller.base_distance == pytest.approx(0.7 * 0.25 + 0.3 * 0.2)


def test_debounce_drops_fast_frames(controller, clock, scales):
    controller.on_pinch_frame(*pinch(0.2))
    clock.advance(0.01)
    assert controller.on_pinch_frame(*pinch(0.3)) is None
    assert scales == []


def test_tremor_is_ignored(controller, clock, scales):
    controller.on_pinch_frame(*pinch(0.2))
    clock.advance(0.05)
    assert controller.on_pinch_frame(*pinch(0.203)) is None
    assert controller.get_current_scale() == 1.0
    assert scales == []


def test_scale_is_clamped(controller, clock):
    controller.on_pinch_frame(*pinch(0.02))
    clock.advance(0.05)
    assert controller.on_pinch_frame(*pinch(0.6)) == pytest.approx(4.0)

    controller.on_hand_lost()
    controller.on_pinch_frame(*pinch(0.6))
    clock.advance(0.05)
    assert controller.on_pinch_frame(*pinch(0.01)) == pytest.approx(0.25)


def test_no_acceleration_uses_raw_ratio(clock):
    c = PinchZoomController(PinchConfig(acceleration=False), clock=clock)
    c.on_pinch_frame(*pinch(0.2))
    clock.advance(2.0)
    assert c.on_pinch_frame(*pinch(0.18)) == pytest.approx(0.9)


def test_held_pinch_scales_faster_than_brief_one(clock):
    held = PinchZoomController(PinchConfig(), clock=clock)
    held.on_pinch_frame(*pinch(0.2))
    for _ in range(40):
        clock.advance(0.05)
        held.on_pinch_frame(*pinch(0.2))
    assert held.base_distance == pytest.approx(0.2)
    clock.advance(0.05)
    held_scale = held.on_pinch_frame(*pinch(0.18))

    clock.set(100.0)
    brief = PinchZoomController(PinchConfig(), clock=clock)
    brief.on_pinch_frame(*pinch(0.2))
    clock.advance(0.05)
    brief_scale = brief.on_pinch_frame(*pinch(0.18))

    # Same 10% distance change, larger effect after a long hold
    assert held_scale < brief_scale < 0.9
    assert held_scale == pytest.approx(0.831, abs=0.005)


def test_deeper_pinch_shrinks_more(clock):
    def shrink_to(target):
        c = PinchZoomController(PinchConfig(), clock=clock)
        clock.set(0.0)
        c.on_pinch_frame(*pinch(0.2))
        for k in range(1, 11):
            clock.set(0.05 * k)
            c.on_pinch_frame(*pinch(0.2 - (0.2 - target) * k / 10))
        return c.get_current_scale()

    deep = shrink_to(0.05)
    shallow = shrink_to(0.10)
    assert deep == pytest.approx(0.25)
    assert deep < shallow < 1.0


def test_hand_lost_keeps_scale(controller, clock):
    controller.on_pinch_frame(*pinch(0.2))
    clock.advance(0.05)
    s = controller.on_pinch_frame(*pinch(0.3))
    controller.on_hand_lost()
    assert not controller.is_pinching
    assert controller.base_distance is None
    assert controller.get_current_scale() == pytest.approx(s)

    # New episode starts from the kept scale
    clock.advance(0.05)
    assert controller.on_pinch_frame(*pinch(0.1)) is None
    assert controller.get_current_scale() == pytest.approx(s)


def test_zero_base_distance_reanchors(controller, clock, scales):
    controller.on_pinch_frame(*pinch(0.0))
    clock.advance(0.05)
    assert controller.on_pinch_frame(*pinch(0.1)) is None
    assert controller.base_distance == pytest.approx(0.1)
    assert scales == []


def test_set_current_scale_clamps_without_callback(controller, scales):
    controller.set_current_scale(10.0)
    assert controller.get_current_scale() == 4.0
    controller.set_current_scale(0.01)
    assert controller.get_current_scale() == 0.25
    assert scales == []


def test_reset_returns_to_unity(controller, clock):
    controller.on_pinch_frame(*pinch(0.2))
    clock.advance(0.05)
    controller.on_pinch_frame(*pinch(0.3))
    controller.reset()
    assert controller.get_current_scale() == 1.0
    assert not controller.is_pinching


def test_distance_change_is_reported_on_debounced_frames(controller, clock):
    controller.on_pinch_frame(*pinch(0.2))
    assert not controller.is_distance_changing

    clock.advance(0.016)
    assert controller.on_pinch_frame(*pinch(0.22)) is None
    assert controller.is_distance_changing

    # Next processed frame still measures against 0.2
    clock.advance(0.05)
    assert controller.on_pinch_frame(*pinch(0.22)) is not None
    assert controller.is_distance_changing

    clock.advance(0.05)
    assert controller.on_pinch_frame(*pinch(0.22)) is None
    assert not controller.is_distance_changing

    controller.on_hand_lost()
    assert not controller.is_distance_changing
