"""
Hand Detection Module - MediaPipe Tasks API
============================================

Wraps the pretrained MediaPipe HandLandmarker as the demo's landmark
source. Each call turns one RGB frame into a FrameResult holding up to
two hands of 21 normalized landmarks.
"""

import logging
import time
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from .landmarks import FrameResult, Hand, Landmark

logger = logging.getLogger(__name__)

HAND_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/latest/hand_landmarker.task"
)
DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent.parent / "models" / "hand_landmarker.task"


@dataclass
class HandDetectorConfig:
    """Configuration for hand detector."""
    model_path: str = ""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    running_mode: str = "VIDEO"  # IMAGE or VIDEO
    delegate: str = "CPU"        # CPU or GPU

    @classmethod
    def from_dict(cls, d: dict) -> "HandDetectorConfig":
        """Create config from dictionary."""
        return cls(
            model_path=d.get("model_path", ""),
            max_num_hands=d.get("max_num_hands", 2),
            min_detection_confidence=d.get("min_detection_confidence", 0.5),
            min_tracking_confidence=d.get("min_tracking_confidence", 0.5),
            min_presence_confidence=d.get("min_presence_confidence", 0.5),
            running_mode=d.get("running_mode", "VIDEO"),
            delegate=d.get("delegate", "CPU"),
        )


def download_model(url: str, save_path: Path) -> bool:
    """Download the hand landmarker model if not present."""
    if save_path.exists():
        logger.info(f"Model already exists at {save_path}")
        return True

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Downloading hand landmarker model to {save_path}...")
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete")
        return True
    except OSError as e:
        logger.error(f"Failed to download model: {e}")
        return False


def convert_result(result, frame_number: int = 0, timestamp_ms: int = 0) -> FrameResult:
    """
    Convert a MediaPipe HandLandmarkerResult into a FrameResult.

    Hands keep the model's list order; handedness falls back to
    "Unknown" when the model omits it.
    """
    hands = []
    for i, hand_landmarks in enumerate(result.hand_landmarks):
        handedness = "Unknown"
        score = 0.0
        if result.handedness and len(result.handedness) > i and result.handedness[i]:
            handedness = result.handedness[i][0].category_name
            score = result.handedness[i][0].score

        hands.append(Hand(
            landmarks=[Landmark(x=lm.x, y=lm.y, z=lm.z) for lm in hand_landmarks],
            handedness=handedness,
            score=score,
        ))

    return FrameResult(hands=hands, frame_number=frame_number, timestamp_ms=timestamp_ms)


class HandDetector:
    """
    Landmark source backed by MediaPipe HandLandmarker.

    Example:
        >>> detector = HandDetector(HandDetectorConfig())
        >>> detector.start()
        >>> result = detector.detect(rgb_image)  # RGB format!
        >>> detector.stop()
    """

    def __init__(self, config: Optional[HandDetectorConfig] = None):
        self.config = config or HandDetectorConfig()
        self._landmarker: Optional[vision.HandLandmarker] = None
        self._last_timestamp_ms = -1

    @property
    def is_ready(self) -> bool:
        return self._landmarker is not None

    def start(self) -> bool:
        """Load the model and create the landmarker."""
        model_path = self.config.model_path or str(DEFAULT_MODEL_PATH)

        if not Path(model_path).exists():
            if not download_model(HAND_LANDMARKER_MODEL_URL, Path(model_path)):
                logger.error("Could not download hand landmarker model")
                return False

        if self.config.running_mode == "IMAGE":
            running_mode = vision.RunningMode.IMAGE
        else:
            running_mode = vision.RunningMode.VIDEO

        if self.config.delegate.upper() == "GPU":
            delegate = python.BaseOptions.Delegate.GPU
        else:
            delegate = python.BaseOptions.Delegate.CPU

        options = vision.HandLandmarkerOptions(
            base_options=python.BaseOptions(model_asset_path=model_path, delegate=delegate),
            running_mode=running_mode,
            num_hands=self.config.max_num_hands,
            min_hand_detection_confidence=self.config.min_detection_confidence,
            min_hand_presence_confidence=self.config.min_presence_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence,
        )

        try:
            self._landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            logger.error(f"Failed to initialize HandLandmarker: {e}")
            return False

        logger.info(f"HandLandmarker initialized with model: {model_path}")
        logger.info(f"Running mode: {self.config.running_mode}, Max hands: {self.config.max_num_hands}")
        return True

    def stop(self) -> None:
        """Release resources."""
        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None
        logger.info("HandLandmarker stopped")

    def _next_timestamp(self, timestamp_ms: Optional[int]) -> int:
        # VIDEO mode rejects timestamps that do not increase
        if timestamp_ms is None:
            timestamp_ms = int(time.monotonic() * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def detect(self, image: np.ndarray, timestamp_ms: Optional[int] = None,
               frame_number: int = 0) -> FrameResult:
        """
        Detect hands in the given image.

        Args:
            image: RGB image as numpy array (H, W, 3)
            timestamp_ms: Frame timestamp in milliseconds (VIDEO mode);
                defaults to a monotonic clock reading
            frame_number: Capture frame number carried into the result

        Returns:
            FrameResult with zero or more hands
        """
        if self._landmarker is None:
            logger.warning("HandLandmarker not initialized. Call start() first.")
            return FrameResult.empty(frame_number=frame_number)

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image)

        if self.config.running_mode == "IMAGE":
            timestamp_ms = timestamp_ms or 0
            result = self._landmarker.detect(mp_image)
        else:
            timestamp_ms = self._next_timestamp(timestamp_ms)
            result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        return convert_result(result, frame_number=frame_number, timestamp_ms=timestamp_ms)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
