"""
Tests for the MediaPipe Hand Detector Wrapper
==============================================
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from handseal.detection import hand_detector
from handseal.detection.hand_detector import (
    HandDetector,
    HandDetectorConfig,
    convert_result,
    download_model,
)


def fake_result(hand_count, with_handedness=True):
    """Build an object shaped like a MediaPipe HandLandmarkerResult."""
    hand_landmarks = [
        [SimpleNamespace(x=0.1 * h + 0.01 * i, y=0.5, z=-0.01 * i) for i in range(21)]
        for h in range(hand_count)
    ]
    handedness = []
    if with_handedness:
        names = ["Left", "Right"]
        handedness = [[SimpleNamespace(category_name=names[h % 2], score=0.9)] for h in range(hand_count)]
    return SimpleNamespace(hand_landmarks=hand_landmarks, handedness=handedness)


class TestHandDetectorConfig:
    """Test suite for HandDetectorConfig."""

    def test_defaults_detect_two_hands(self):
        config = HandDetectorConfig()

        assert config.max_num_hands == 2
        assert config.running_mode == "VIDEO"

    def test_from_dict(self):
        config = HandDetectorConfig.from_dict({"max_num_hands": 1, "delegate": "GPU"})

        assert config.max_num_hands == 1
        assert config.delegate == "GPU"
        assert config.min_detection_confidence == 0.5


class TestConvertResult:
    """Test suite for MediaPipe result conversion."""

    def test_two_hands(self):
        result = convert_result(fake_result(2), frame_number=12, timestamp_ms=400)

        assert result.hand_count == 2
        assert result.frame_number == 12
        assert result.timestamp_ms == 400
        assert result.hands[0].handedness == "Left"
        assert result.hands[1].handedness == "Right"
        assert result.hands[1].score == pytest.approx(0.9)
        assert result.hands[0][3].z == pytest.approx(-0.03)

    def test_no_hands(self):
        result = convert_result(fake_result(0))

        assert not result.has_hands

    def test_missing_handedness(self):
        result = convert_result(fake_result(1, with_handedness=False))

        assert result.hands[0].handedness == "Unknown"
        assert result.hands[0].score == 0.0


class TestHandDetector:
    """Test suite for HandDetector with the landmarker mocked out."""

    @pytest.fixture
    def detector(self):
        det = HandDetector(HandDetectorConfig())
        det._landmarker = MagicMock()
        det._landmarker.detect_for_video.return_value = fake_result(2)
        with patch.object(hand_detector, "mp"):
            yield det

    def test_detect_before_start(self):
        result = HandDetector().detect(np.zeros((4, 4, 3), dtype=np.uint8), frame_number=3)

        assert result.hand_count == 0
        assert result.frame_number == 3

    def test_detect_returns_hands(self, detector):
        result = detector.detect(np.zeros((4, 4, 3), dtype=np.uint8), timestamp_ms=100, frame_number=1)

        assert result.hand_count == 2
        assert result.timestamp_ms == 100
        detector._landmarker.detect_for_video.assert_called_once()

    def test_timestamps_strictly_increase(self, detector):
        """VIDEO mode timestamps never repeat or go backwards."""
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        first = detector.detect(image, timestamp_ms=100)
        second = detector.detect(image, timestamp_ms=100)
        third = detector.detect(image, timestamp_ms=50)

        assert first.timestamp_ms == 100
        assert second.timestamp_ms == 101
        assert third.timestamp_ms == 102

    def test_unstamped_frames_use_monotonic_clock(self, detector):
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        with patch.object(hand_detector, "time") as mock_time:
            mock_time.monotonic.return_value = 5.0
            first = detector.detect(image)
            second = detector.detect(image)

        assert first.timestamp_ms == 5000
        assert second.timestamp_ms == 5001
        assert detector._landmarker.detect_for_video.call_args.args[1] == 5001

    def test_image_mode_uses_detect(self, detector):
        detector.config.running_mode = "IMAGE"
        detector._landmarker.detect.return_value = fake_result(1)

        result = detector.detect(np.zeros((4, 4, 3), dtype=np.uint8))

        assert result.hand_count == 1
        detector._landmarker.detect.assert_called_once()

    def test_stop_closes_landmarker(self, detector):
        landmarker = detector._landmarker
        detector.stop()

        landmarker.close.assert_called_once()
        assert not detector.is_ready

    def test_start_fails_without_model(self, tmp_path):
        config = HandDetectorConfig(model_path=str(tmp_path / "missing.task"))
        with patch.object(hand_detector, "download_model", return_value=False):
            assert HandDetector(config).start() is False


class TestDownloadModel:
    """Test suite for download_model."""

    def test_existing_file_skips_download(self, tmp_path):
        path = tmp_path / "hand_landmarker.task"
        path.write_bytes(b"model")

        with patch.object(hand_detector.urllib.request, "urlretrieve") as retrieve:
            assert download_model("http://example.invalid/model.task", path) is True
        retrieve.assert_not_called()

    def test_network_failure(self, tmp_path):
        with patch.object(hand_detector.urllib.request, "urlretrieve", side_effect=OSError("offline")):
            assert download_model("http://example.invalid/model.task", tmp_path / "m.task") is False
