"""
Heart shape detection for drawn trails.
Decides whether a fingertip trail looks like a heart using a few loose
geometric features instead of template matching.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence
import logging
import math
import time

from .config import HeartConfig
from .types import Point2D

logger = logging.getLogger(__name__)


class RejectReason(Enum):
    """First check a trail failed."""
    TOO_FEW_POINTS = "too_few_points"
    TOO_MANY_POINTS = "too_many_points"
    TOO_SMALL = "too_small"
    TOO_LARGE = "too_large"
    ASPECT_RATIO = "aspect_ratio"
    MISSING_LOBES = "missing_lobes"
    NO_TIP = "no_tip"
    TIP_TOO_WIDE = "tip_too_wide"
    NOT_CLOSED = "not_closed"


@dataclass
class HeartAnalysis:
    """Features measured on a trail and the verdict."""
    is_heart: bool
    reason: Optional[RejectReason] = None
    width: float = 0.0
    height: float = 0.0
    aspect_ratio: float = 0.0
    left_lobe_points: int = 0
    right_lobe_points: int = 0
    tip_points: int = 0
    tip_width_ratio: float = 0.0
    closure_ratio: float = 0.0


@dataclass
class DetectionCooldown:
    """Suppresses re-triggering for a fixed time after a detection."""
    active: bool = False
    expires_at: float = 0.0

    def start(self, now: float, duration: float) -> None:
        self.active = True
        self.expires_at = now + duration

    def is_active(self, now: float) -> bool:
        if self.active and now >= self.expires_at:
            self.active = False
        return self.active

    def clear(self) -> None:
        self.active = False
        self.expires_at = 0.0


class HeartShapeClassifier:
    """
    Loose heart detector. Accepts:
    - imperfect closure
    - slightly asymmetric lobes
    - hearts of any reasonable size

    Core idea:
    1. Trail is not flat (height/width within a band)
    2. Upper part has points on both the left and the right (two lobes)
    3. Lower part narrows (pointed bottom)
    4. Start and end are close (roughly closed)
    """

    def __init__(self, config: HeartConfig, clock: Callable[[], float] = time.perf_counter):
        self._config = config
        self._clock = clock
        self._cooldown = DetectionCooldown()

    @property
    def in_cooldown(self) -> bool:
        return self._cooldown.is_active(self._clock())

    def detect(self, trail: Sequence[Point2D]) -> bool:
        """
        Test a trail for a heart shape.

        A positive result starts the cooldown; while it runs every call
        returns False regardless of the trail.
        """
        cfg = self._config
        n = len(trail)
        if n < cfg.min_points or n > cfg.max_points:
            return False

        now = self._clock()
        if self._cooldown.is_active(now):
            return False

        analysis = self.analyze(trail)
        if not analysis.is_heart:
            logger.debug("Trail of %d points rejected: %s", n, analysis.reason.value)
            return False

        self._cooldown.start(now, cfg.cooldown_time)
        logger.info(
            "Heart detected (%d points, %.3fx%.3f, aspect %.2f)",
            n, analysis.width, analysis.height, analysis.aspect_ratio,
        )
        return True

    def analyze(self, trail: Sequence[Point2D]) -> HeartAnalysis:
        """Measure shape features without touching the cooldown."""
        cfg = self._config
        n = len(trail)
        if n < cfg.min_points:
            return HeartAnalysis(False, RejectReason.TOO_FEW_POINTS)
        if n > cfg.max_points:
            return HeartAnalysis(False, RejectReason.TOO_MANY_POINTS)

        # 1. Bounding box
        min_x = min(p.x for p in trail)
        max_x = max(p.x for p in trail)
        min_y = min(p.y for p in trail)
        max_y = max(p.y for p in trail)

        width = max_x - min_x
        height = max_y - min_y
        center_x = (min_x + max_x) / 2
        center_y = (min_y + max_y) / 2

        result = HeartAnalysis(False, width=width, height=height)

        # 2. Size
        if width <= 0.0 or width < cfg.min_width or height < cfg.min_height:
            result.reason = RejectReason.TOO_SMALL
            return result
        if width > cfg.max_width or height > cfg.max_height:
            result.reason = RejectReason.TOO_LARGE
            return result

        # 3. Aspect ratio (hearts are roughly upright)
        result.aspect_ratio = height / width
        if not cfg.min_aspect <= result.aspect_ratio <= cfg.max_aspect:
            result.reason = RejectReason.ASPECT_RATIO
            return result

        # 4. Two lobes: both halves of the upper region must be populated
        upper_limit = center_y - height * cfg.band
        for p in trail:
            if p.y < upper_limit:
                if p.x < center_x:
                    result.left_lobe_points += 1
                else:
                    result.right_lobe_points += 1

        if (result.left_lobe_points < cfg.min_lobe_points
                or result.right_lobe_points < cfg.min_lobe_points):
            result.reason = RejectReason.MISSING_LOBES
            return result

        # 5. Tapering bottom
        lower_limit = center_y + height * cfg.band
        lower = [p.x for p in trail if p.y > lower_limit]
        result.tip_points = len(lower)
        if result.tip_points < cfg.min_tip_points:
            result.reason = RejectReason.NO_TIP
            return result

        result.tip_width_ratio = (max(lower) - min(lower)) / width
        if result.tip_width_ratio > cfg.max_tip_width_ratio:
            result.reason = RejectReason.TIP_TOO_WIDE
            return result

        # 6. Roughly closed
        start, end = trail[0], trail[-1]
        result.closure_ratio = math.hypot(end.x - start.x, end.y - start.y) / width
        if result.closure_ratio > cfg.max_closure_ratio:
            result.reason = RejectReason.NOT_CLOSED
            return result

        result.is_heart = True
        return result

    def reset(self) -> None:
        """Clear the cooldown so the next heart can be detected immediately."""
        self._cooldown.clear()
