"""
Two-finger move to model rotation.
"""
from typing import Callable, Optional, Tuple

from .config import RotationConfig
from .types import Point2D


class RotationController:
    """
    Tracks the thumb/index midpoint and turns its displacement into
    incremental rotation angles (radians).

    Horizontal hand motion maps to an inverse yaw, matching the mirrored
    camera view. Pitch is clamped so the model never flips past vertical.
    Movement inside the dead zone is ignored and does not move the reference.
    """

    def __init__(
        self,
        config: RotationConfig,
        on_rotation_change: Optional[Callable[[float, float], None]] = None,
    ):
        self._config = config
        self._on_rotation_change = on_rotation_change
        self._last_center: Optional[Point2D] = None
        self._rotation_x = 0.0
        self._rotation_y = 0.0

    def on_move_frame(self, thumb: Point2D, index: Point2D) -> Optional[Tuple[float, float]]:
        """
        Feed one frame with both fingertips visible.

        Returns:
            (rotation_x, rotation_y) if this frame changed the rotation, None otherwise.
        """
        center = thumb.midpoint(index)
        if self._last_center is None:
            self._last_center = center
            return None

        cfg = self._config
        dx = center.x - self._last_center.x
        dy = center.y - self._last_center.y
        if abs(dx) < cfg.dead_zone and abs(dy) < cfg.dead_zone:
            return None

        self._rotation_y -= dx * cfg.sensitivity
        self._rotation_x += dy * cfg.sensitivity
        self._rotation_x = max(-cfg.max_pitch, min(cfg.max_pitch, self._rotation_x))
        self._last_center = center

        if self._on_rotation_change:
            self._on_rotation_change(self._rotation_x, self._rotation_y)
        return self._rotation_x, self._rotation_y

    def skip_frame(self, thumb: Point2D, index: Point2D) -> None:
        """Move the reference without rotating (frame consumed by another gesture)."""
        if self._last_center is not None:
            self._last_center = thumb.midpoint(index)

    def on_hand_lost(self) -> None:
        """Forget the reference center. The accumulated rotation is kept."""
        self._last_center = None

    def reset_rotation(self) -> None:
        self._last_center = None
        self._rotation_x = 0.0
        self._rotation_y = 0.0

    @property
    def rotation(self) -> Tuple[float, float]:
        return self._rotation_x, self._rotation_y

    @property
    def rotation_x(self) -> float:
        return self._rotation_x

    @property
    def rotation_y(self) -> float:
        return self._rotation_y
