"""
Renderer-side easing of the emitted scale/rotation targets.
"""
from typing import Tuple

from .config import TransformConfig


class TransformEaser:
    """
    Moves the displayed transform a fixed fraction of the way toward the
    latest target on every step(), so jumps from the controllers render as
    smooth motion.
    """

    def __init__(self, config: TransformConfig):
        self._config = config
        self.target_scale = 1.0
        self.target_rotation = (0.0, 0.0)
        self.scale = 1.0
        self.rotation = (0.0, 0.0)

    def set_target_scale(self, scale: float) -> None:
        cfg = self._config
        self.target_scale = max(cfg.min_scale, min(cfg.max_scale, scale))

    def set_target_rotation(self, rot_x: float, rot_y: float) -> None:
        self.target_rotation = (rot_x, rot_y)

    def step(self) -> Tuple[float, float, float]:
        """Advance one render frame. Returns (scale, rot_x, rot_y)."""
        cfg = self._config
        self.scale += (self.target_scale - self.scale) * cfg.scale_easing

        rx, ry = self.rotation
        tx, ty = self.target_rotation
        k = cfg.rotation_easing
        self.rotation = (rx + (tx - rx) * k, ry + (ty - ry) * k)
        return self.scale, self.rotation[0], self.rotation[1]

    def snap(self) -> None:
        self.scale = self.target_scale
        self.rotation = self.target_rotation

    def reset(self) -> None:
        self.target_scale = 1.0
        self.target_rotation = (0.0, 0.0)
        self.snap()
