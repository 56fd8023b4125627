"""
Tests for Landmark Types
=========================
"""

import numpy as np
import pytest

from conftest import make_hand
from handseal.detection.landmarks import FrameResult, Hand, Landmark, LandmarkIndex


class TestLandmark:
    """Test suite for Landmark class."""

    def test_to_pixel(self):
        lm = Landmark(x=0.5, y=0.5, z=0.0)

        assert lm.to_pixel(640, 480) == (320, 240)

    def test_z_defaults_to_zero(self):
        assert Landmark(0.1, 0.2).z == 0.0

    def test_coordinates_not_clamped(self):
        """Points just outside the frame keep their values."""
        lm = Landmark(x=-0.1, y=1.2)

        assert lm.x == pytest.approx(-0.1)
        assert lm.to_pixel(100, 100) == (-10, 120)


class TestHand:
    """Test suite for Hand helpers."""

    def test_requires_21_landmarks(self):
        with pytest.raises(ValueError):
            Hand(landmarks=[Landmark(0.0, 0.0)] * 20)

    def test_from_points(self):
        hand = Hand.from_points([(0.1 * (i % 10), 0.5) for i in range(21)], handedness="Left")

        assert len(hand) == 21
        assert hand.handedness == "Left"
        assert hand[LandmarkIndex.WRIST] == Landmark(0.0, 0.5, 0.0)

    def test_palm_center(self, left_hand):
        palm_x, palm_y = left_hand.palm_center

        assert 0.2 < palm_x < 0.4
        assert 0.5 < palm_y < 0.7

    def test_scaled_about_origin(self):
        hand = make_hand({0: (1.0, 1.0)})
        scaled = hand.scaled(2.0, origin=(1.0, 1.0))

        assert scaled[0] == Landmark(1.0, 1.0, 0.0)
        assert scaled[1].x == pytest.approx(0.0)
        assert scaled.handedness == hand.handedness

    def test_to_numpy(self, right_hand):
        arr = right_hand.to_numpy()

        assert isinstance(arr, np.ndarray)
        assert arr.shape == (21, 3)


class TestFrameResult:
    """Test suite for FrameResult."""

    def test_empty(self):
        result = FrameResult.empty(frame_number=7)

        assert result.hand_count == 0
        assert not result.has_hands
        assert result.frame_number == 7

    def test_hand_count(self, left_hand, right_hand):
        result = FrameResult(hands=[left_hand, right_hand], frame_number=1, timestamp_ms=33)

        assert result.hand_count == 2
        assert result.has_hands
