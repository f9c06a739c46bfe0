"""
Bounded buffer of drawn fingertip points.
"""
from collections import deque
from enum import Enum, auto
from typing import Callable, Deque, Optional
import logging
import threading
import time

from .config import TrailConfig
from .types import Point2D, Trail

logger = logging.getLogger(__name__)


class PushResult(Enum):
    """Outcome of TrailBuffer.push()."""
    ACCEPTED = auto()
    REJECTED = auto()   # Too close to the previous point
    RESET = auto()      # Idle too long, buffer cleared


class TrailBuffer:
    """
    Ordered, capped sequence of trail points.

    - Points closer than min_movement to the last stored point are dropped.
    - If the finger idles longer than idle_timeout with more than
      idle_min_points stored, the drawing is treated as abandoned and cleared.
    - Past max_points the oldest points are evicted.

    A lock guards appends and snapshots so another thread can read
    points() while frames are still being pushed.
    """

    def __init__(self, config: TrailConfig, clock: Callable[[], float] = time.perf_counter):
        self._config = config
        self._clock = clock
        self._points: Deque[Point2D] = deque(maxlen=config.max_points)
        self._last_accept_time: Optional[float] = None
        self._lock = threading.Lock()

    def push(self, point: Point2D) -> PushResult:
        """Offer a smoothed point to the trail."""
        now = self._clock()
        with self._lock:
            if not self._points:
                self._points.append(point)
                self._last_accept_time = now
                return PushResult.ACCEPTED

            idle = now - self._last_accept_time
            if idle > self._config.idle_timeout and len(self._points) > self._config.idle_min_points:
                logger.info("Trail idle for %.2fs with %d points, resetting", idle, len(self._points))
                self._clear_locked()
                return PushResult.RESET

            if point.distance_to(self._points[-1]) < self._config.min_movement:
                return PushResult.REJECTED

            self._points.append(point)
            self._last_accept_time = now
            return PushResult.ACCEPTED

    def clear(self) -> None:
        with self._lock:
            self._clear_locked()

    def _clear_locked(self) -> None:
        self._points.clear()
        self._last_accept_time = None

    def points(self) -> Trail:
        """Immutable snapshot of the current trail, oldest first."""
        with self._lock:
            return tuple(self._points)

    snapshot = points

    @property
    def last_point(self) -> Optional[Point2D]:
        with self._lock:
            return self._points[-1] if self._points else None

    @property
    def capacity(self) -> int:
        return self._config.max_points

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)
