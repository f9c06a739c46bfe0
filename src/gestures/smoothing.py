"""
Noise reduction for fingertip positions.

PointSmoother filters the live sample stream; smooth_trail() is a batch
pass over a finished (or in-progress) trail.
"""
from typing import Optional, Sequence, Tuple

import numpy as np

from .types import Point2D

DEFAULT_TRAIL_WEIGHTS = (0.1, 0.2, 0.4, 0.2, 0.1)


class PointSmoother:
    def __init__(self, alpha: float = 0.3):
        """
        Initialize the exponential smoother.

        Args:
            alpha: Weight of the newest sample in (0, 1]. Higher = more responsive
                   but more jitter, lower = smoother but laggier.
        """
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self._smoothed: Optional[Point2D] = None

    def smooth(self, raw: Point2D) -> Point2D:
        """
        Filter one sample.

        The first sample after construction or reset() passes through unchanged.
        """
        if self._smoothed is None:
            self._smoothed = raw
            return raw

        a = self.alpha
        prev = self._smoothed
        self._smoothed = Point2D(
            a * raw.x + (1 - a) * prev.x,
            a * raw.y + (1 - a) * prev.y,
        )
        return self._smoothed

    __call__ = smooth

    @property
    def value(self) -> Optional[Point2D]:
        return self._smoothed

    def reset(self) -> None:
        self._smoothed = None


def smooth_trail(
    points: Sequence[Point2D],
    weights: Sequence[float] = DEFAULT_TRAIL_WEIGHTS,
) -> Tuple[Point2D, ...]:
    """
    Weighted moving average over a whole trail.

    The window is centered on each point. Near the ends it is truncated and the
    remaining weights are renormalized, so endpoints stay where they were drawn
    instead of being pulled toward zero.

    Args:
        points: Trail in temporal order.
        weights: Odd-length positive kernel, center weight in the middle.

    Returns:
        Smoothed trail with the same length as the input.
    """
    kernel = np.asarray(weights, dtype=float)
    if kernel.ndim != 1 or kernel.size % 2 == 0 or np.any(kernel <= 0):
        raise ValueError("weights must be a non-empty odd-length sequence of positive values")

    n = len(points)
    if n == 0:
        return ()

    half = kernel.size // 2
    xs = np.fromiter((p.x for p in points), dtype=float, count=n)
    ys = np.fromiter((p.y for p in points), dtype=float, count=n)

    # Full convolution, then keep the samples centered on each input point
    flipped = kernel[::-1]
    window = slice(half, half + n)
    norm = np.convolve(np.ones(n), flipped, mode="full")[window]
    sx = np.convolve(xs, flipped, mode="full")[window] / norm
    sy = np.convolve(ys, flipped, mode="full")[window] / norm

    return tuple(Point2D(float(x), float(y)) for x, y in zip(sx, sy))
