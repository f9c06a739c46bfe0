import math

import pytest

from gestures.types import HandFrame, Point2D


class Landmark:
    """Stand-in for a MediaPipe NormalizedLandmark."""

    def __init__(self, x, y, z=0.0):
        self.x = x
        self.y = y
        self.z = z


def test_tuple_landmarks():
    frame = HandFrame(landmarks=[(0.1 * i / 2, 0.5, 0.0) for i in range(21)])
    assert frame.index_tip.x == pytest.approx(0.4)
    assert frame.index_tip.y == 0.5
    assert frame.thumb_tip.x == pytest.approx(0.2)


def test_point_landmarks():
    frame = HandFrame(landmarks=[Point2D(0.5, 0.25)] * 21)
    assert frame.index_tip == Point2D(0.5, 0.25)
    assert frame.thumb_tip == Point2D(0.5, 0.25)


def test_attribute_landmarks():
    landmarks = [Landmark(0.0, 0.0)] * 21
    landmarks[HandFrame.INDEX_TIP] = Landmark(0.7, 0.3, -0.1)
    frame = HandFrame(landmarks=landmarks)
    assert frame.index_tip == Point2D(0.7, 0.3)


@pytest.mark.parametrize("bad", [None, (0.5,), ("x", 0.5), Landmark(math.nan, 0.5), Landmark("x", 0.5), 7])
def test_unusable_landmark_is_none(bad):
    landmarks = [(0.5, 0.5)] * 21
    landmarks[HandFrame.INDEX_TIP] = bad
    frame = HandFrame(landmarks=landmarks)
    assert frame.index_tip is None
    assert frame.thumb_tip == Point2D(0.5, 0.5)


def test_out_of_range_index():
    frame = HandFrame(landmarks=[(0.5, 0.5)] * 5)
    assert frame.thumb_tip == Point2D(0.5, 0.5)
    assert frame.index_tip is None
    assert frame.point(-1) is None


def test_point_helpers():
    a, b = Point2D(0.0, 0.0), Point2D(0.3, 0.4)
    assert a.distance_to(b) == pytest.approx(0.5)
    assert a.midpoint(b) == Point2D(0.15, 0.2)
