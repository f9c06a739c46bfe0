"""
Value types shared by the gesture pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Sequence, Tuple
import math


@dataclass(frozen=True)
class Point2D:
    """Normalized image point (0-1, origin top-left, mirrored horizontally)."""
    x: float
    y: float

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def midpoint(self, other: "Point2D") -> "Point2D":
        return Point2D((self.x + other.x) / 2, (self.y + other.y) / 2)


Trail = Tuple[Point2D, ...]


class Mode(Enum):
    """Interaction modes, exactly one active at a time."""
    DRAWING = auto()
    DETECTED = auto()
    MANIPULATING = auto()


@dataclass
class HandFrame:
    """
    Landmarks of one tracked hand for one video frame.

    Attributes:
        landmarks: Up to 21 (x, y) or (x, y, z) tuples, or objects with
                   x and y attributes, normalized 0-1.
                   Entries may be None when the tracker dropped a point.
        handedness: 'Left', 'Right' or 'Unknown'
        confidence: Detection confidence 0-1
    """
    landmarks: Sequence[Any]
    handedness: str = "Unknown"
    confidence: float = 1.0
    timestamp: Optional[float] = field(default=None, compare=False)

    # Standard hand-skeleton indices
    WRIST = 0
    THUMB_TIP = 4
    INDEX_TIP = 8
    MIDDLE_TIP = 12
    RING_TIP = 16
    PINKY_TIP = 20

    def point(self, index: int) -> Optional[Point2D]:
        """
        Landmark as a Point2D, or None if it is missing or malformed.
        """
        if self.landmarks is None or index < 0 or index >= len(self.landmarks):
            return None
        raw = self.landmarks[index]
        try:
            if raw is None:
                return None
            if hasattr(raw, "x") and hasattr(raw, "y"):
                # Point2D or a MediaPipe NormalizedLandmark
                x, y = float(raw.x), float(raw.y)
            elif len(raw) < 2:
                return None
            else:
                x, y = float(raw[0]), float(raw[1])
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return Point2D(x, y)

    @property
    def thumb_tip(self) -> Optional[Point2D]:
        return self.point(self.THUMB_TIP)

    @property
    def index_tip(self) -> Optional[Point2D]:
        return self.point(self.INDEX_TIP)
