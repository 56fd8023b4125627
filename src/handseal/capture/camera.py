"""
Webcam capture for the seal demo.

``Camera.read()`` hands out frames numbered from 1. With ``threaded`` set,
a background thread keeps overwriting one latest-frame slot, so repeated
reads can return the same frame; the app compares frame numbers to decide
whether to run detection again.
"""

import cv2
import time
import threading
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    threaded: bool = True
    flip_horizontal: bool = True  # mirror view
    warmup_frames: int = 5

    @classmethod
    def from_dict(cls, config: dict) -> "CameraConfig":
        defaults = cls()
        return cls(**{
            name: config.get(name, getattr(defaults, name))
            for name in ("device_id", "width", "height", "fps",
                         "threaded", "flip_horizontal", "warmup_frames")
        })


@dataclass
class Frame:
    """A captured BGR image, its capture time (monotonic seconds) and its number."""
    image: np.ndarray
    timestamp: float
    frame_number: int

    @property
    def rgb(self) -> np.ndarray:
        # MediaPipe wants RGB, OpenCV delivers BGR
        return cv2.cvtColor(self.image, cv2.COLOR_BGR2RGB)

    @property
    def timestamp_ms(self) -> int:
        return int(self.timestamp * 1000)


class Camera:
    """
    OpenCV ``VideoCapture`` wrapper.

    Example:
        >>> with Camera(CameraConfig(device_id=1)) as camera:
        ...     frame = camera.read()
    """

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()
        self._cap: Optional[cv2.VideoCapture] = None
        self._frame_number = 0
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._latest: Optional[Frame] = None

    def start(self) -> bool:
        """Open the device. A missing, busy or permission-denied camera returns False."""
        cfg = self.config
        logger.info("Opening camera %d (%dx%d@%dfps)", cfg.device_id, cfg.width, cfg.height, cfg.fps)

        cap = cv2.VideoCapture(cfg.device_id)
        if not cap.isOpened():
            logger.error("Camera %d unavailable (missing or permission denied)", cfg.device_id)
            cap.release()
            return False

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, cfg.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, cfg.height)
        cap.set(cv2.CAP_PROP_FPS, cfg.fps)

        # First frames after opening are often dark or blank
        for _ in range(cfg.warmup_frames):
            cap.read()

        self._cap = cap
        self._frame_number = 0
        self._running = True

        if cfg.threaded:
            self._thread = threading.Thread(target=self._capture_loop, name="camera", daemon=True)
            self._thread.start()
        logger.info("Camera %d started (%s)", cfg.device_id, "threaded" if cfg.threaded else "synchronous")
        return True

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        with self._lock:
            self._latest = None
        logger.info("Camera stopped")

    def read(self) -> Optional[Frame]:
        """
        Latest frame in threaded mode (None until the first one arrives),
        otherwise a freshly grabbed frame. None once stopped.
        """
        if not self._running:
            return None
        if self.config.threaded:
            with self._lock:
                return self._latest
        return self._grab()

    def _grab(self) -> Optional[Frame]:
        cap = self._cap
        if cap is None:
            return None
        ok, image = cap.read()
        if not ok or image is None:
            logger.warning("Camera %d returned no frame", self.config.device_id)
            return None
        if self.config.flip_horizontal:
            image = cv2.flip(image, 1)
        self._frame_number += 1
        return Frame(image=image, timestamp=time.monotonic(), frame_number=self._frame_number)

    def _capture_loop(self) -> None:
        while self._running:
            frame = self._grab()
            if frame is None:
                time.sleep(0.005)
                continue
            with self._lock:
                self._latest = frame

    @property
    def is_running(self) -> bool:
        return self._running

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
