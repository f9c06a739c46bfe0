import pytest

from gestures.smoothing import PointSmoother, smooth_trail
from gestures.types import Point2D


def test_first_point_passes_through():
    s = PointSmoother(alpha=0.3)
    assert s.smooth(Point2D(0.2, 0.8)) == Point2D(0.2, 0.8)


def test_smoother_lags_then_converges():
    s = PointSmoother(alpha=0.3)
    s(Point2D(0.0, 0.0))

    first = s(Point2D(1.0, 1.0))
    assert first.x == pytest.approx(0.3)

    prev = first.x
    for _ in range(30):
        cur = s(Point2D(1.0, 1.0)).x
        assert prev < cur <= 1.0
        prev = cur
    assert prev == pytest.approx(1.0, abs=1e-3)


def test_reset_forgets_state():
    s = PointSmoother(alpha=0.5)
    s(Point2D(0.0, 0.0))
    s.reset()
    assert s.value is None
    assert s(Point2D(0.9, 0.1)) == Point2D(0.9, 0.1)


@pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
def test_invalid_alpha(alpha):
    with pytest.raises(ValueError):
        PointSmoother(alpha)


def test_smooth_trail_keeps_length_and_straight_lines():
    line = tuple(Point2D(i * 0.1, 0.5) for i in range(8))
    out = smooth_trail(line)
    assert len(out) == len(line)
    for p, q in zip(line, out):
        assert q.y == pytest.approx(0.5)
    # Interior points of a uniform line are unchanged
    for p, q in zip(line[2:-2], out[2:-2]):
        assert q.x == pytest.approx(p.x)


def test_smooth_trail_renormalizes_at_ends():
    pts = (Point2D(0.0, 0.0), Point2D(1.0, 0.0), Point2D(2.0, 0.0))
    out = smooth_trail(pts, (0.1, 0.2, 0.4, 0.2, 0.1))
    # First point: weights 0.4, 0.2, 0.1 over x = 0, 1, 2
    assert out[0].x == pytest.approx((0.2 * 1 + 0.1 * 2) / 0.7)
    assert out[1].x == pytest.approx(1.0)


def test_smooth_trail_dampens_spike():
    pts = [Point2D(i * 0.1, 0.5) for i in range(9)]
    pts[4] = Point2D(0.4, 0.9)
    out = smooth_trail(pts)
    assert out[4].y < 0.9
    assert out[4].y == pytest.approx(0.5 + 0.4 * 0.4)


def test_smooth_trail_short_inputs():
    assert smooth_trail(()) == ()
    single = smooth_trail([Point2D(0.3, 0.7)])
    assert len(single) == 1
    assert single[0].x == pytest.approx(0.3)
    assert single[0].y == pytest.approx(0.7)


@pytest.mark.parametrize("weights", [(), (0.5, 0.5), (0.2, -0.1, 0.2)])
def test_smooth_trail_rejects_bad_weights(weights):
    with pytest.raises(ValueError):
        smooth_trail([Point2D(0.0, 0.0)], weights)
