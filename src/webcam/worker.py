"""
Background worker for MediaPipe hand tracking and the interaction state machine.
Runs in a separate QThread to avoid blocking the UI.
"""
import logging
import time
import threading
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal, pyqtSlot

from gestures.config import Config
from gestures.mode_machine import InteractionModeMachine
from gestures.types import HandFrame, Mode
from .hand_tracker import HandTracker

logger = logging.getLogger(__name__)


class InteractionWorker(QObject):
    """
    Worker class that feeds tracker frames into the InteractionModeMachine.
    Machine callbacks are re-emitted as Qt signals.
    """
    # Signals
    scale_changed = pyqtSignal(float)
    rotation_changed = pyqtSignal(float, float)  # rot_x, rot_y (radians)
    heart_detected = pyqtSignal(object)  # Emits the heart trail (tuple of Point2D)
    mode_changed = pyqtSignal(object)  # Emits Mode
    hand_lost = pyqtSignal()
    frame_ready = pyqtSignal(object)  # Emits numpy array (BGR frame with overlay)
    error = pyqtSignal(str)

    def __init__(self, config: Config, parent=None):
        super().__init__(parent)
        self._config = config
        self._tracker: Optional[HandTracker] = None
        self._machine = InteractionModeMachine(
            config,
            on_scale_change=self.scale_changed.emit,
            on_rotation_change=self.rotation_changed.emit,
            on_heart_detected=self.heart_detected.emit,
            on_mode_change=self.mode_changed.emit,
        )
        self._is_running = False

        # Latest frame handoff from the capture thread
        self._latest_frame: Optional[HandFrame] = None
        self._has_new_frame = False
        self._frame_lock = threading.Lock()
        self._capture_thread: Optional[threading.Thread] = None

    def _capture_loop(self):
        """Background thread to pull camera frames as fast as possible."""
        while self._is_running:
            try:
                hand = self._tracker.get_hand_frame()
                with self._frame_lock:
                    self._latest_frame = hand
                    self._has_new_frame = True
            except Exception:
                logger.exception("Capture thread error")
                time.sleep(0.1)  # Cool down on error

    def start_process(self):
        """Main processing loop. Runs in worker thread."""
        self._tracker = HandTracker(self._config)

        if not self._tracker.start():
            self.error.emit("Could not start hand tracking (camera or model unavailable)")
            return

        self._is_running = True

        # Start the background capture thread
        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._capture_thread.start()

        interval = self._config.interaction.detection_interval
        last_detection = time.perf_counter()
        last_preview = 0.0
        preview_interval = 1.0 / 15
        hand_visible = False

        try:
            while self._is_running:
                with self._frame_lock:
                    fresh = self._has_new_frame
                    hand = self._latest_frame
                    self._has_new_frame = False

                if fresh:
                    self._machine.on_frame(hand)
                    if hand is None and hand_visible:
                        self.hand_lost.emit()
                    hand_visible = hand is not None
                else:
                    time.sleep(0.002)

                now = time.perf_counter()
                if interval > 0 and now - last_detection >= interval:
                    self._machine.poll_detection()
                    last_detection = now

                if self._config.ui.debug_overlay and fresh and now - last_preview >= preview_interval:
                    trail = self._machine.trail
                    if self._machine.mode is not Mode.DRAWING:
                        trail = self._machine.heart_trail or ()
                    frame = self._tracker.get_frame_with_overlay(
                        hand, trail, self._config.smoothing.trail_weights
                    )
                    if frame is not None:
                        self.frame_ready.emit(frame)
                    last_preview = now

        except Exception as e:
            logger.exception("Worker loop failed")
            self.error.emit(f"Worker Exception: {e}")
        finally:
            self._is_running = False
            if self._capture_thread:
                self._capture_thread.join(timeout=1.0)
            if self._tracker:
                self._tracker.stop()

    @pyqtSlot()
    def request_reset(self):
        """Return the machine to Drawing. Safe to call from any thread."""
        self._machine.reset()

    def stop_process(self):
        """Signal the loop to stop and release resources in worker thread."""
        self._is_running = False

    @property
    def machine(self) -> InteractionModeMachine:
        return self._machine
