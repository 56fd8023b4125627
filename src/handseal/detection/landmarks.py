"""
Hand Landmark Types
====================

Plain containers for the 21-point MediaPipe hand skeleton.
Kept free of MediaPipe imports so the feature code can be used and
tested without the model runtime.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, NamedTuple, Sequence, Tuple

import numpy as np

NUM_LANDMARKS = 21


class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


FINGERTIPS = (
    LandmarkIndex.THUMB_TIP,
    LandmarkIndex.INDEX_TIP,
    LandmarkIndex.MIDDLE_TIP,
    LandmarkIndex.RING_TIP,
    LandmarkIndex.PINKY_TIP,
)

# Skeleton edges, same pairs as mediapipe HandLandmarksConnections.HAND_CONNECTIONS
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),         # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),         # Index
    (5, 9), (9, 10), (10, 11), (11, 12),    # Middle
    (9, 13), (13, 14), (14, 15), (15, 16),  # Ring
    (13, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (0, 17),                                # Palm base
]


class Landmark(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float  # normalized by image width, not clamped
    y: float  # normalized by image height, not clamped
    z: float = 0.0  # depth relative to wrist

    def to_pixel(self, width: int, height: int) -> Tuple[int, int]:
        """Convert normalized coordinates to pixel coordinates."""
        return (int(self.x * width), int(self.y * height))


@dataclass
class Hand:
    """One detected hand: 21 ordered landmarks plus the model's handedness guess."""
    landmarks: List[Landmark]
    handedness: str = "Unknown"  # "Left" or "Right" as reported by the model
    score: float = 0.0

    def __post_init__(self):
        if len(self.landmarks) != NUM_LANDMARKS:
            raise ValueError(
                f"Hand requires {NUM_LANDMARKS} landmarks, got {len(self.landmarks)}"
            )

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]], handedness: str = "Unknown",
                    score: float = 0.0) -> "Hand":
        """Build a hand from (x, y) or (x, y, z) tuples."""
        return cls(
            landmarks=[Landmark(*p) for p in points],
            handedness=handedness,
            score=score,
        )

    def __getitem__(self, index: int) -> Landmark:
        return self.landmarks[index]

    def __len__(self) -> int:
        return len(self.landmarks)

    def get_pixel(self, index: int, width: int, height: int) -> Tuple[int, int]:
        """Get landmark as pixel coordinates."""
        return self.landmarks[index].to_pixel(width, height)

    @property
    def palm_center(self) -> Tuple[float, float]:
        """Mean of the wrist and the four finger MCP joints."""
        indices = (
            LandmarkIndex.WRIST,
            LandmarkIndex.INDEX_MCP,
            LandmarkIndex.MIDDLE_MCP,
            LandmarkIndex.RING_MCP,
            LandmarkIndex.PINKY_MCP,
        )
        xs = [self.landmarks[i].x for i in indices]
        ys = [self.landmarks[i].y for i in indices]
        return (sum(xs) / len(xs), sum(ys) / len(ys))

    def scaled(self, factor: float, origin: Tuple[float, float] = (0.0, 0.0)) -> "Hand":
        """Return a copy scaled about ``origin`` in the image plane."""
        ox, oy = origin
        return Hand(
            landmarks=[
                Landmark(ox + (lm.x - ox) * factor, oy + (lm.y - oy) * factor, lm.z * factor)
                for lm in self.landmarks
            ],
            handedness=self.handedness,
            score=self.score,
        )

    def to_numpy(self) -> np.ndarray:
        """Convert landmarks to numpy array of shape (21, 3)."""
        return np.array([[lm.x, lm.y, lm.z] for lm in self.landmarks])


@dataclass
class FrameResult:
    """Detector output for a single video frame. No identity across frames."""
    hands: List[Hand] = field(default_factory=list)
    frame_number: int = 0
    timestamp_ms: int = 0

    @property
    def hand_count(self) -> int:
        return len(self.hands)

    @property
    def has_hands(self) -> bool:
        return bool(self.hands)

    @classmethod
    def empty(cls, frame_number: int = 0, timestamp_ms: int = 0) -> "FrameResult":
        return cls(hands=[], frame_number=frame_number, timestamp_ms=timestamp_ms)
