"""
Hand Seal Feature Demo - Main Application
==========================================

Per-frame loop: capture -> detect -> draw -> extract.
The extracted ratios are only logged and shown; no seal is classified.
"""

import cv2
import logging
import argparse
import signal
import sys
from typing import Optional

import numpy as np

from .capture.camera import Camera, Frame
from .detection.hand_detector import HandDetector
from .recognition.latest_result import LatestResultSlot
from .recognition.seal_features import NORMALIZATION_MODES, ExtractionResult, SealFeatureExtractor
from .utils.config import AppConfig, load_config
from .utils.logger import FeatureLogger, log_timing, setup_logging
from .utils.performance import PerformanceMonitor
from .utils.visualization import Visualizer

logger = logging.getLogger(__name__)

WINDOW_NAME = "Hand Seal Detection"


class SealDemoApp:
    """
    Owns the camera, detector, extractor and overlays, and runs the loop.

    Keys:
        q / ESC - quit
        space   - enable / disable predictions
        p       - print performance report
    """

    def __init__(self, config: AppConfig,
                 camera: Optional[Camera] = None,
                 detector: Optional[HandDetector] = None):
        self.config = config

        self.camera = camera or Camera(config.camera)
        self.detector = detector or HandDetector(config.mediapipe)
        self.extractor = SealFeatureExtractor(config.features)
        self.slot = LatestResultSlot()
        self.visualizer = Visualizer(config.visualization)
        self.performance = PerformanceMonitor(
            window_size=config.performance_window,
            target_fps=config.target_fps,
        )
        self.feature_logger = FeatureLogger(every_n=config.log_every_n_frames)

        self._running = False
        self._predicting = True
        self.last_extraction: Optional[ExtractionResult] = None

    @property
    def predicting(self) -> bool:
        return self._predicting

    @log_timing
    def start(self) -> bool:
        """Load the model, then open the camera."""
        logger.info("Starting hand seal demo...")

        if not self.detector.start():
            logger.error("Failed to load hand landmarker")
            return False

        if not self.camera.start():
            logger.error("Failed to start camera")
            self.detector.stop()
            return False

        self.performance.start()
        self._running = True
        logger.info("Hand seal demo started")
        return True

    def stop(self) -> None:
        logger.info("Stopping hand seal demo...")
        self._running = False
        self.camera.stop()
        self.detector.stop()
        self.performance.stop()
        self.slot.clear()
        cv2.destroyAllWindows()

    def toggle_predictions(self) -> bool:
        """Flip predictions on or off. Returns the new state."""
        self._predicting = not self._predicting
        if not self._predicting:
            self.slot.clear()
            self.last_extraction = None
        logger.info("Predictions %s", "enabled" if self._predicting else "disabled")
        return self._predicting

    def run(self) -> int:
        """Run until quit. Returns a process exit code."""
        if not self.start():
            return 1

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        try:
            self._main_loop()
        finally:
            self.stop()
            print(self.performance.get_report())
        return 0

    def _main_loop(self) -> None:
        while self._running:
            self.performance.frame_start()

            with self.performance.measure("capture"):
                frame = self.camera.read()

            if frame is None:
                # Threaded capture has not produced a frame yet
                self._handle_key(cv2.waitKey(1) & 0xFF)
                continue

            display = self.process_frame(frame)
            cv2.imshow(WINDOW_NAME, display)
            self.performance.frame_complete()

            self._handle_key(cv2.waitKey(1) & 0xFF)

    def _detect(self, frame: Frame) -> None:
        with self.performance.measure("detection"):
            try:
                # The detector stamps frames from its own monotonic clock
                result = self.detector.detect(frame.rgb, timestamp_ms=None, frame_number=frame.frame_number)
            except Exception:
                logger.exception("Detection failed on frame %d, skipping", frame.frame_number)
                return
        self.slot.put(result)

    def process_frame(self, frame: Frame) -> np.ndarray:
        """Run one tick on ``frame`` and return the annotated image."""
        display = frame.image.copy()

        if not self._predicting:
            self.visualizer.draw_status(display, "Predictions disabled (space to enable)", ok=False)
            return display

        # Only detect when the camera delivered a new frame
        if self.slot.is_stale(frame.frame_number):
            self._detect(frame)
        else:
            self.performance.detection_skipped()

        result = self.slot.get()
        hand_count = result.hand_count if result is not None else 0

        with self.performance.measure("render"):
            if result is not None and result.has_hands:
                self.visualizer.draw_hands(display, result.hands)
            self.visualizer.draw_status(display, f"Hands detected: {hand_count}", ok=hand_count >= 2)
            self.visualizer.draw_performance(display, fps=self.performance.fps)

        if result is not None and result.has_hands:
            with self.performance.measure("extraction"):
                extraction = self.extractor.extract(result.hands)
            self.feature_logger.log_result(extraction, result.frame_number)
            self.visualizer.draw_ratios(display, extraction)
            self.last_extraction = extraction

        return display

    def _handle_key(self, key: int) -> None:
        if key == ord('q') or key == 27:
            self._running = False
        elif key == ord(' '):
            self.toggle_predictions()
        elif key == ord('p'):
            print(self.performance.get_report())

    def _signal_handler(self, signum, frame) -> None:
        logger.info(f"Received signal {signum}, shutting down...")
        self._running = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hand seal feature demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keyboard Controls:
  q/ESC     - Quit
  space     - Enable/disable predictions
  p         - Print performance report

Examples:
  handseal
  handseal --camera 1 --normalization reference_hand
  handseal --config my_config.yaml --debug
        """
    )
    parser.add_argument("--config", "-c", default=None, help="Path to YAML configuration file")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--camera", type=int, default=None, help="Camera device id")
    parser.add_argument("--normalization", choices=NORMALIZATION_MODES, default=None,
                        help="Palm size used to normalize each hand")
    parser.add_argument("--log-file", default=None, help="Also log to this rotating file")
    return parser


def apply_overrides(config_dict: dict, args: argparse.Namespace) -> dict:
    """Apply command-line overrides onto a loaded config dict."""
    if args.camera is not None:
        config_dict["camera"]["device_id"] = args.camera
    if args.normalization is not None:
        config_dict["features"]["normalization"] = args.normalization
    if args.log_file is not None:
        config_dict["logging"]["file"] = args.log_file
    if args.debug:
        config_dict["logging"]["level"] = "DEBUG"
    return config_dict


def main(argv=None) -> int:
    """Console entry point."""
    args = build_parser().parse_args(argv)

    # Console logging first so config loading messages are visible
    setup_logging(level="DEBUG" if args.debug else "INFO")
    config_dict = apply_overrides(load_config(args.config), args)
    app_config = AppConfig.from_dict(config_dict)
    setup_logging(
        level=app_config.log_level,
        log_file=app_config.log_file,
        max_size_mb=app_config.log_max_size_mb,
        backup_count=app_config.log_backup_count,
    )

    app = SealDemoApp(app_config)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
