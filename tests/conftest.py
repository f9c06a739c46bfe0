import math

import pytest

from gestures.config import Config, HeartConfig, InteractionConfig, SmoothingConfig, TrailConfig
from gestures.types import HandFrame, Point2D


class FakeClock:
    """Manually advanced replacement for time.perf_counter."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now

    def set(self, value):
        self.now = value


def heart_points(n=60, cx=0.5, top=0.45, scale=0.4 / 32):
    """Parametric heart in image coordinates (y grows downward)."""
    points = []
    for i in range(n):
        t = 2 * math.pi * i / n
        x = 16 * math.sin(t) ** 3
        y = 13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t)
        points.append(Point2D(cx + x * scale, top - y * scale))
    return tuple(points)


def circle_points(n=60, cx=0.5, cy=0.5, r=0.3):
    return tuple(
        Point2D(cx + r * math.cos(2 * math.pi * i / n), cy + r * math.sin(2 * math.pi * i / n))
        for i in range(n)
    )


def make_frame(index=None, thumb=None):
    """HandFrame with only the thumb and index tips filled in."""
    landmarks = [None] * 21
    if thumb is not None:
        landmarks[HandFrame.THUMB_TIP] = (thumb[0], thumb[1], 0.0)
    if index is not None:
        landmarks[HandFrame.INDEX_TIP] = (index[0], index[1], 0.0)
    return HandFrame(landmarks=landmarks, handedness="Right")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def heart():
    return heart_points()


@pytest.fixture
def circle():
    return circle_points()


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def raw_config():
    """Config that stores fingertip positions unfiltered, for exact shape tests."""
    return Config(
        smoothing=SmoothingConfig(alpha=1.0),
        trail=TrailConfig(min_movement=0.0),
        heart=HeartConfig(),
        interaction=InteractionConfig(detection_interval=0.1),
    )
