"""
Top-level interaction state machine.

Drawing:       index fingertip -> PointSmoother -> TrailBuffer, polled by
               HeartShapeClassifier.
Detected:      momentary; the drawn trail is handed to the renderer.
Manipulating:  thumb + index -> PinchZoomController / RotationController.

reset() returns to Drawing from anywhere.
"""
from typing import Callable, Optional, Tuple
import logging
import threading
import time

from .config import Config
from .heart_detector import HeartShapeClassifier
from .pinch_zoom import PinchZoomController
from .rotation import RotationController
from .smoothing import PointSmoother, smooth_trail
from .trail import PushResult, TrailBuffer
from .types import HandFrame, Mode, Trail

logger = logging.getLogger(__name__)


class InteractionModeMachine:
    """
    Owns every gesture component and routes each HandFrame to exactly one
    consumer based on the current mode.

    All public methods hold one re-entrant lock, so frames can be fed from a
    capture thread while another thread polls detection or requests a reset.
    Callbacks run while the lock is held and may call back into the machine.
    """

    def __init__(
        self,
        config: Config,
        on_scale_change: Optional[Callable[[float], None]] = None,
        on_rotation_change: Optional[Callable[[float, float], None]] = None,
        on_heart_detected: Optional[Callable[[Trail], None]] = None,
        on_mode_change: Optional[Callable[[Mode], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._config = config
        self._on_heart_detected = on_heart_detected
        self._on_mode_change = on_mode_change

        self._smoother = PointSmoother(config.smoothing.alpha)
        self._trail = TrailBuffer(config.trail, clock=clock)
        self._classifier = HeartShapeClassifier(config.heart, clock=clock)
        self._pinch = PinchZoomController(config.pinch, on_scale_change, clock=clock)
        self._rotation = RotationController(config.rotation, on_rotation_change)

        self._mode = Mode.DRAWING
        self._heart_trail: Optional[Trail] = None
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Frame routing
    # ------------------------------------------------------------------
    def on_frame(self, frame: Optional[HandFrame]) -> None:
        """
        Consume one tracker result. None means no hand this frame.
        """
        with self._lock:
            if self._mode is Mode.DRAWING:
                self._handle_drawing(frame)
                if self._config.interaction.detection_interval == 0:
                    self._detect_locked()
            elif self._mode is Mode.MANIPULATING:
                self._handle_manipulation(frame)

    def _handle_drawing(self, frame: Optional[HandFrame]) -> Optional[PushResult]:
        tip = frame.index_tip if frame is not None else None
        if tip is None:
            # Fingertip gone: the drawing attempt is over
            if len(self._trail) or self._smoother.value is not None:
                logger.debug("Index finger lost, clearing %d trail points", len(self._trail))
            self._trail.clear()
            self._smoother.reset()
            return None

        result = self._trail.push(self._smoother.smooth(tip))
        if result is PushResult.RESET:
            self._smoother.reset()
        return result

    def _handle_manipulation(self, frame: Optional[HandFrame]) -> None:
        thumb = frame.thumb_tip if frame is not None else None
        index = frame.index_tip if frame is not None else None
        if thumb is None or index is None:
            self._pinch.on_hand_lost()
            self._rotation.on_hand_lost()
            return

        self._pinch.on_pinch_frame(thumb, index)
        if self._config.interaction.exclusive_gestures and self._pinch.is_distance_changing:
            self._rotation.skip_frame(thumb, index)
        else:
            self._rotation.on_move_frame(thumb, index)

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------
    def poll_detection(self) -> bool:
        """
        Run the heart check on a snapshot of the current trail.

        Returns:
            True if a heart was detected. The machine is then in Manipulating,
            unless a callback reset it to Drawing.
        """
        with self._lock:
            return self._detect_locked()

    def _detect_locked(self) -> bool:
        if self._mode is not Mode.DRAWING:
            return False

        snapshot = self._trail.points()
        if len(snapshot) < self._config.interaction.detection_min_points:
            return False

        candidate = snapshot
        if self._config.interaction.smooth_before_detection:
            candidate = smooth_trail(snapshot, self._config.smoothing.trail_weights)

        if not self._classifier.detect(candidate):
            return False

        self._heart_trail = candidate
        self._trail.clear()
        self._smoother.reset()
        self._pinch.on_hand_lost()
        self._rotation.on_hand_lost()

        # Callbacks may reset the machine; stop advancing if they did
        self._enter(Mode.DETECTED)
        if self._mode is not Mode.DETECTED:
            return True
        if self._on_heart_detected:
            self._on_heart_detected(candidate)
        if self._mode is Mode.DETECTED:
            self._enter(Mode.MANIPULATING)
        return True

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Return to Drawing with fresh trail, cooldown, scale and rotation."""
        with self._lock:
            previous = self._mode
            self._trail.clear()
            self._smoother.reset()
            self._classifier.reset()
            self._pinch.reset()
            self._rotation.reset_rotation()
            self._heart_trail = None
            if previous is not Mode.DRAWING:
                self._enter(Mode.DRAWING)

    def _enter(self, mode: Mode) -> None:
        logger.info("Mode %s -> %s", self._mode.name, mode.name)
        self._mode = mode
        if self._on_mode_change:
            self._on_mode_change(mode)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def trail(self) -> Trail:
        return self._trail.points()

    @property
    def heart_trail(self) -> Optional[Trail]:
        """Trail that triggered the last detection, until the next reset."""
        return self._heart_trail

    @property
    def scale(self) -> float:
        return self._pinch.get_current_scale()

    @property
    def rotation(self) -> Tuple[float, float]:
        return self._rotation.rotation

    @property
    def classifier(self) -> HeartShapeClassifier:
        return self._classifier

    @property
    def pinch(self) -> PinchZoomController:
        return self._pinch

    @property
    def rotation_controller(self) -> RotationController:
        return self._rotation
