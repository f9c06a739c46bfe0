"""
AirHeart - Draw a heart in the air, then pinch and rotate it.

Entry point for the application.
"""
import argparse
import logging
import math
import sys
import time
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="AirHeart - Hand-drawn heart gestures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device index (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with camera preview and trail overlay",
    )

    parser.add_argument(
        "--no-accel",
        action="store_true",
        help="Disable pinch acceleration",
    )

    return parser.parse_args()


def run_debug(config):
    """
    Run the state machine in the main thread with an OpenCV preview.
    Shows the drawn trail, current mode and the eased transform.
    """
    import cv2
    from gestures import InteractionModeMachine, Mode, TransformEaser
    from webcam import HandTracker

    tracker = HandTracker(config)
    easer = TransformEaser(config.transform)

    def on_heart(trail):
        print(f"Action: Heart detected ({len(trail)} points)")

    machine = InteractionModeMachine(
        config,
        on_scale_change=easer.set_target_scale,
        on_rotation_change=easer.set_target_rotation,
        on_heart_detected=on_heart,
    )

    print("Starting debug mode...")
    print("Draw a heart with your index finger.")
    print("Press 'r' to reset, 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not start hand tracking")
        return 1

    interval = config.interaction.detection_interval
    last_detection = time.perf_counter()

    try:
        while True:
            hand = tracker.get_hand_frame()
            machine.on_frame(hand)
            now = time.perf_counter()
            if interval > 0 and now - last_detection >= interval:
                machine.poll_detection()
                last_detection = now
            scale, rot_x, rot_y = easer.step()

            if machine.mode is Mode.DRAWING:
                trail = machine.trail
            else:
                trail = machine.heart_trail or ()

            frame = tracker.get_frame_with_overlay(hand, trail, config.smoothing.trail_weights)

            if frame is not None:
                cv2.putText(
                    frame, f"Mode: {machine.mode.name}", (10, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2
                )

                info_lines = [
                    f"Trail: {len(machine.trail)} pts",
                    f"Scale: {scale:.2f}",
                    f"Rotation: ({math.degrees(rot_x):.0f}, {math.degrees(rot_y):.0f}) deg",
                ]
                if machine.classifier.in_cooldown:
                    info_lines.append("Cooldown")
                for i, line in enumerate(info_lines):
                    cv2.putText(
                        frame, line, (10, 60 + i * 25),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                    )

                cv2.imshow(config.ui.window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('r'):
                machine.reset()
                easer.reset()
                print("Action: Reset to drawing")

    finally:
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_worker_mode(config):
    """Run the tracker and state machine on a background QThread, printing events."""
    import signal
    import atexit
    from PyQt5.QtCore import QCoreApplication, QThread, Qt
    from webcam import InteractionWorker

    app = QCoreApplication(sys.argv)

    # Setup background worker and thread
    thread = QThread()
    worker = InteractionWorker(config)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    # Register cleanup for various exit scenarios
    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if hasattr(signal, "SIGUSR1"):
        def reset_handler(signum, frame):
            """SIGUSR1 returns to drawing mode."""
            print("Action: Reset to drawing")
            worker.request_reset()

        signal.signal(signal.SIGUSR1, reset_handler)

    def handle_error(msg):
        print(f"WORKER ERROR: {msg}")
        app.quit()

    # Connect signals (Use QueuedConnection so handlers run in main thread)
    thread.started.connect(worker.start_process)
    worker.heart_detected.connect(
        lambda trail: print(f"Action: Heart detected ({len(trail)} points)"), Qt.QueuedConnection
    )
    worker.mode_changed.connect(lambda mode: print(f"Mode: {mode.name}"), Qt.QueuedConnection)
    worker.scale_changed.connect(lambda s: print(f"Scale: {s:.2f}"), Qt.QueuedConnection)
    worker.rotation_changed.connect(
        lambda rx, ry: print(f"Rotation: ({rx:.2f}, {ry:.2f})"), Qt.QueuedConnection
    )
    worker.hand_lost.connect(lambda: print("Hand lost"), Qt.QueuedConnection)
    worker.error.connect(handle_error, Qt.QueuedConnection)

    # Start thread
    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load config
    from gestures import load_config
    config = load_config(args.config)

    # Apply CLI overrides
    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.no_accel:
        config.pinch.acceleration = False
    if args.debug:
        config.ui.debug_overlay = True

    print("AirHeart starting...")
    print(f"  Camera: {config.camera.device_id}")
    print(f"  Pinch acceleration: {config.pinch.acceleration}")
    print(f"  Debug: {args.debug}")
    print()

    if args.debug:
        return run_debug(config)
    return run_worker_mode(config)


if __name__ == "__main__":
    sys.exit(main())
