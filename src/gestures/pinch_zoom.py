"""
Pinch-to-zoom: thumb/index distance over time to a model scale factor.
"""
from typing import Callable, Optional
import logging
import math
import time

from .config import PinchConfig
from .types import Point2D

logger = logging.getLogger(__name__)


class PinchZoomController:
    """
    Converts the thumb-index distance into a clamped scale.

    One pinch episode runs from the first frame with both fingertips visible
    until the hand is lost. Within an episode:
    - Updates are debounced and tremor-sized distance changes are ignored.
    - The scale follows distance / base_distance, amplified the longer the
      pinch is held (ease-out acceleration).
    - base_distance drifts toward the current distance after every update
      so the ratio never refers to a stale reference.

    The scale carries over between episodes; it only returns to 1.0 through
    set_current_scale().
    """

    def __init__(
        self,
        config: PinchConfig,
        on_scale_change: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._config = config
        self._on_scale_change = on_scale_change
        self._clock = clock

        self._current_scale = 1.0

        # Episode state
        self._is_pinching = False
        self._base_distance: Optional[float] = None
        self._last_distance: Optional[float] = None
        self._episode_start: Optional[float] = None
        self._last_update_time: Optional[float] = None
        self._distance_changing = False

    def on_pinch_frame(self, thumb: Point2D, index: Point2D) -> Optional[float]:
        """
        Feed one frame with both fingertips visible.

        Returns:
            The new scale if this frame changed it, None otherwise.
        """
        cfg = self._config
        now = self._clock()
        distance = thumb.distance_to(index)

        if not self._is_pinching:
            self._is_pinching = True
            self._base_distance = distance
            self._last_distance = distance
            self._episode_start = now
            self._distance_changing = False
            self._last_update_time = now
            logger.debug("Pinch episode started at distance %.3f", distance)
            return None

        # Checked before debouncing, against the last processed distance
        self._distance_changing = abs(distance - self._last_distance) >= cfg.noise_threshold

        if now - self._last_update_time < cfg.debounce_interval:
            return None
        self._last_update_time = now

        delta = distance - self._last_distance
        self._last_distance = distance
        if abs(delta) < cfg.noise_threshold:
            return None

        if self._base_distance <= 0.0:
            # Fingertips started on top of each other; nothing to compare against
            self._base_distance = distance
            return None

        ratio = distance / self._base_distance
        if cfg.acceleration:
            ratio = self._accelerate(ratio, now - self._episode_start)

        new_scale = self._clamp(self._current_scale * ratio)
        self._current_scale = new_scale
        if self._on_scale_change:
            self._on_scale_change(new_scale)

        # Re-anchor toward the current distance
        w = cfg.anchor_weight
        self._base_distance = w * distance + (1 - w) * self._base_distance
        return new_scale

    def _accelerate(self, ratio: float, duration: float) -> float:
        """
        Amplify the ratio for sustained pinches.

        Speed eases out from base_speed to max_speed with time constant
        accel_constant, so quick taps stay fine-grained and held pinches
        scale fast.
        """
        cfg = self._config
        speed = cfg.base_speed + (cfg.max_speed - cfg.base_speed) * (
            1 - math.exp(-duration / cfg.accel_constant)
        )
        return 1 + (ratio - 1) * (1 + (speed - cfg.base_speed) * cfg.accel_gain)

    def _clamp(self, scale: float) -> float:
        return max(self._config.min_scale, min(self._config.max_scale, scale))

    def on_hand_lost(self) -> None:
        """End the current episode. The scale is kept."""
        if self._is_pinching:
            logger.debug("Pinch episode ended at scale %.3f", self._current_scale)
        self._is_pinching = False
        self._base_distance = None
        self._last_distance = None
        self._episode_start = None
        self._last_update_time = None
        self._distance_changing = False

    def reset(self) -> None:
        """End the episode and return the scale to 1.0."""
        self.on_hand_lost()
        self.set_current_scale(1.0)

    @property
    def is_pinching(self) -> bool:
        return self._is_pinching

    @property
    def base_distance(self) -> Optional[float]:
        return self._base_distance

    @property
    def is_distance_changing(self) -> bool:
        """True if the last frame moved the fingertips apart or together beyond the tremor threshold."""
        return self._distance_changing

    def get_current_scale(self) -> float:
        return self._current_scale

    def set_current_scale(self, scale: float) -> None:
        """Force the scale, clamped to the configured bounds. No callback is fired."""
        self._current_scale = self._clamp(scale)
