"""Shared fixtures for the hand seal tests."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from handseal.detection.landmarks import Hand, Landmark, NUM_LANDMARKS


def make_hand(overrides=None, fill=(0.5, 0.5), handedness="Right", score=0.9) -> Hand:
    """
    Build a 21-landmark hand with every point at ``fill`` except ``overrides``.

    Args:
        overrides: Dict of landmark index -> (x, y) or (x, y, z)
    """
    overrides = overrides or {}
    landmarks = [Landmark(*overrides.get(i, fill)) for i in range(NUM_LANDMARKS)]
    return Hand(landmarks=landmarks, handedness=handedness, score=score)


def open_hand(base_x=0.3, base_y=0.7, handedness="Right") -> Hand:
    """A plausible open hand, wrist at (base_x, base_y), fingers pointing up."""
    points = {0: (base_x, base_y)}
    # Thumb 1-4
    for i, (dx, dy) in enumerate([(-0.03, -0.02), (-0.06, -0.05), (-0.08, -0.08), (-0.10, -0.11)], start=1):
        points[i] = (base_x + dx, base_y + dy)
    # Index 5-8, middle 9-12, ring 13-16, pinky 17-20
    for finger, x_off in enumerate([-0.04, -0.01, 0.02, 0.05]):
        mcp = 5 + finger * 4
        for joint, y_off in enumerate([0.10, 0.16, 0.20, 0.24]):
            points[mcp + joint] = (base_x + x_off, base_y - y_off + (0.02 if finger == 3 else 0.0))
    return make_hand(points, handedness=handedness)


@pytest.fixture
def left_hand():
    return open_hand(0.3, 0.7, handedness="Left")


@pytest.fixture
def right_hand():
    return open_hand(0.6, 0.7, handedness="Right")
