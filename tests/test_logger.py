"""
Tests for Logging Utilities
============================
"""

import logging
import logging.handlers

from handseal.recognition.seal_features import ExtractionResult, SealFeatureExtractor
from handseal.utils.logger import FeatureLogger, log_timing, setup_logging


class TestFeatureLogger:
    """Test suite for the ratio diagnostic record."""

    def test_ok_result_logs_both_hands(self, caplog, left_hand, right_hand):
        result = SealFeatureExtractor().extract([left_hand, right_hand])
        feature_logger = FeatureLogger()

        with caplog.at_level(logging.INFO, logger="seal_features"):
            feature_logger.log_result(result, frame_number=3)

        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Hand 1 Ratios:") for m in messages)
        assert any(m.startswith("Hand 2 Ratios:") for m in messages)
        assert feature_logger.total_ok == 1

    def test_history_entries(self, left_hand):
        feature_logger = FeatureLogger()
        feature_logger.log_result(ExtractionResult.insufficient(), frame_number=1)
        feature_logger.log_result(SealFeatureExtractor().extract([left_hand, left_hand]), frame_number=2)

        history = feature_logger.get_history()
        assert [e["status"] for e in history] == ["insufficient_hands", "ok"]
        assert len(history[1]["values"]) == 8
        assert feature_logger.get_history(last_n=1)[0]["frame"] == 2

    def test_every_n_throttles_info(self, caplog, left_hand):
        result = SealFeatureExtractor().extract([left_hand, left_hand])
        feature_logger = FeatureLogger(every_n=3)

        with caplog.at_level(logging.INFO, logger="seal_features"):
            for frame in range(6):
                feature_logger.log_result(result, frame_number=frame)

        hand1_lines = [r for r in caplog.records if r.getMessage().startswith("Hand 1")]
        assert len(hand1_lines) == 2

    def test_skip_logged_once_per_transition(self, caplog):
        feature_logger = FeatureLogger()

        with caplog.at_level(logging.DEBUG, logger="seal_features"):
            for frame in range(4):
                feature_logger.log_result(ExtractionResult.insufficient(), frame_number=frame)

        assert len(caplog.records) == 1
        assert "Both hands must be detected." in caplog.records[0].getMessage()


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_file_handler(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        log_file = tmp_path / "logs" / "handseal.log"
        try:
            setup_logging(level="DEBUG", log_file=str(log_file))
            assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
            assert log_file.parent.exists()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


def test_log_timing_preserves_result(caplog):
    @log_timing
    def add(a, b):
        return a + b

    with caplog.at_level(logging.DEBUG):
        assert add(2, 3) == 5
    assert add.__name__ == "add"
