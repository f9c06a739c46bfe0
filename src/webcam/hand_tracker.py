"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Handles camera capture and converts detections into HandFrame values.
"""
from pathlib import Path
from typing import Optional, Sequence
import logging
import time

import cv2
import numpy as np
import mediapipe as mp

from gestures.config import Config, CameraConfig, MediaPipeConfig
from gestures.smoothing import smooth_trail
from gestures.types import HandFrame, Point2D

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]

TRAIL_COLOR = (120, 120, 255)      # BGR, light red
LANDMARK_COLOR = (0, 255, 0)
PINCH_COLOR = (255, 200, 0)


class HandTracker:
    """
    Camera + MediaPipe HandLandmarker in VIDEO mode.

    Frames are mirrored horizontally before detection, so landmark x grows
    to the user's right as seen on screen.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: AirHeart configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        if model_path is None and self._mp_config.model_path:
            model_path = Path(self._mp_config.model_path)
        self._model_path = model_path or self.DEFAULT_MODEL_PATH

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        # State
        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            logger.error("Model file not found: %s (download from %s)", self._model_path, MODEL_URL)
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            logger.error("Could not open camera %d", self._camera_config.device_id)
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        self._landmarker = HandLandmarker.create_from_options(options)
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        logger.info("Hand tracking started on camera %d", self._camera_config.device_id)
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def get_hand_frame(self) -> Optional[HandFrame]:
        """
        Capture one camera frame and detect the first hand.

        Returns:
            HandFrame for the first detected hand, or None if no hand
            (or no camera frame) is available.
        """
        if not self._is_running or self._cap is None or self._landmarker is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None

        self._frame_count += 1

        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)
        self._last_frame = frame

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # VIDEO mode needs strictly monotonic timestamps
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        if not result.hand_landmarks:
            return None

        hand_landmarks = result.hand_landmarks[0]
        handedness = result.handedness[0][0] if result.handedness else None

        return HandFrame(
            landmarks=[(lm.x, lm.y, lm.z) for lm in hand_landmarks],
            handedness=handedness.category_name if handedness else "Unknown",
            confidence=handedness.score if handedness else 0.0,
            timestamp=timestamp_ms / 1000.0,
        )

    def get_frame_with_overlay(
        self,
        hand: Optional[HandFrame] = None,
        trail: Sequence[Point2D] = (),
        trail_weights: Sequence[float] = (0.1, 0.2, 0.4, 0.2, 0.1),
        black_background: bool = False,
    ) -> Optional[np.ndarray]:
        """
        Get last frame with the hand skeleton and drawn trail for debugging.

        Args:
            hand: If provided, draw its landmarks and the thumb-index segment.
            trail: Trail points to draw, smoothed before drawing.
            black_background: If True, draw on black instead of camera image.

        Returns:
            Frame with overlay, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        if black_background:
            frame = np.zeros_like(self._last_frame)
        else:
            frame = self._last_frame.copy()

        h, w = frame.shape[:2]

        if len(trail) >= 2:
            pts = np.array(
                [(int(p.x * w), int(p.y * h)) for p in smooth_trail(trail, trail_weights)],
                dtype=np.int32,
            )
            cv2.polylines(frame, [pts], False, TRAIL_COLOR, 5, cv2.LINE_AA)
            last = trail[-1]
            cv2.circle(frame, (int(last.x * w), int(last.y * h)), 8, TRAIL_COLOR, -1)

        if hand is not None:
            for start_idx, end_idx in HAND_CONNECTIONS:
                start, end = hand.point(start_idx), hand.point(end_idx)
                if start is None or end is None:
                    continue
                cv2.line(
                    frame,
                    (int(start.x * w), int(start.y * h)),
                    (int(end.x * w), int(end.y * h)),
                    LANDMARK_COLOR, 2,
                )
            thumb, index = hand.thumb_tip, hand.index_tip
            if thumb is not None and index is not None:
                cv2.line(
                    frame,
                    (int(thumb.x * w), int(thumb.y * h)),
                    (int(index.x * w), int(index.y * h)),
                    PINCH_COLOR, 3,
                )

        return frame

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count
