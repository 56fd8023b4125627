"""
Seal Feature Extraction
========================

Palm-size-normalized wrist-to-fingertip distances for a pair of hands.
These four ratios per hand are the raw features a hand-seal classifier
would consume; nothing here makes a classification decision.

Palm size is the distance between the index MCP (5) and pinky MCP (17).
Dividing by it makes the ratios independent of how far the hand is from
the camera.

Normalization modes:
    per_hand        - each hand divided by its own palm size (default)
    reference_hand  - both hands divided by hand 1's palm size
"""

import math
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..detection.landmarks import Hand, Landmark, LandmarkIndex

logger = logging.getLogger(__name__)

PER_HAND = "per_hand"
REFERENCE_HAND = "reference_hand"
NORMALIZATION_MODES = (PER_HAND, REFERENCE_HAND)

# Wrist to each of these fingertips, in output order
RATIO_TIPS = (
    LandmarkIndex.THUMB_TIP,
    LandmarkIndex.INDEX_TIP,
    LandmarkIndex.MIDDLE_TIP,
    LandmarkIndex.PINKY_TIP,
)


def distance(p1: Landmark, p2: Landmark) -> float:
    """Euclidean distance in the image plane; z is ignored."""
    return math.hypot(p1.x - p2.x, p1.y - p2.y)


def palm_size(hand: Hand) -> float:
    return distance(hand[LandmarkIndex.INDEX_MCP], hand[LandmarkIndex.PINKY_MCP])


def normalized_distance(p1: Landmark, p2: Landmark, palm: float) -> float:
    """Distance between two landmarks in palm-size units. ``palm`` must be > 0."""
    return distance(p1, p2) / palm


@dataclass(frozen=True)
class HandRatios:
    """Wrist-to-fingertip distances of one hand, in palm-size units."""
    thumb: float
    index: float
    middle: float
    pinky: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.thumb, self.index, self.middle, self.pinky)

    def format(self, precision: int = 3) -> str:
        return " ".join(f"{v:.{precision}f}" for v in self.as_tuple())


def hand_ratios(hand: Hand, palm: float) -> HandRatios:
    """Compute the four wrist-to-tip ratios of ``hand`` against ``palm``."""
    wrist = hand[LandmarkIndex.WRIST]
    values = [normalized_distance(wrist, hand[tip], palm) for tip in RATIO_TIPS]
    return HandRatios(*values)


class ExtractionStatus(Enum):
    OK = "ok"
    INSUFFICIENT_HANDS = "insufficient_hands"
    DEGENERATE_PALM = "degenerate_palm"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one extraction. Ratios are only set when status is OK."""
    status: ExtractionStatus
    hand1: Optional[HandRatios] = None
    hand2: Optional[HandRatios] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ExtractionStatus.OK

    @property
    def values(self) -> Tuple[float, ...]:
        """All eight ratios, hand 1 first. Empty unless OK."""
        if not self.ok:
            return ()
        return self.hand1.as_tuple() + self.hand2.as_tuple()

    @classmethod
    def insufficient(cls) -> "ExtractionResult":
        return cls(ExtractionStatus.INSUFFICIENT_HANDS, reason="Both hands must be detected.")

    @classmethod
    def degenerate(cls, which: str, size: float) -> "ExtractionResult":
        return cls(
            ExtractionStatus.DEGENERATE_PALM,
            reason=f"Palm size of {which} is degenerate ({size:.3g})",
        )


@dataclass
class SealFeatureConfig:
    """Feature extraction settings."""
    normalization: str = PER_HAND
    min_palm_size: float = 1e-6  # palm sizes at or below this skip the frame

    @classmethod
    def from_dict(cls, config: dict) -> "SealFeatureConfig":
        return cls(
            normalization=config.get("normalization", PER_HAND),
            min_palm_size=float(config.get("min_palm_size", 1e-6)),
        )


class SealFeatureExtractor:
    """
    Stateless per-frame feature extractor for two-hand seals.

    Example:
        >>> extractor = SealFeatureExtractor()
        >>> result = extractor.extract(frame_result.hands)
        >>> if result.ok:
        ...     print(result.values)
    """

    def __init__(self, config: Optional[SealFeatureConfig] = None):
        self.config = config or SealFeatureConfig()
        if self.config.normalization not in NORMALIZATION_MODES:
            raise ValueError(
                f"Unknown normalization '{self.config.normalization}', "
                f"expected one of {NORMALIZATION_MODES}"
            )
        if not math.isfinite(self.config.min_palm_size) or self.config.min_palm_size < 0:
            raise ValueError(
                f"min_palm_size must be a non-negative number, got {self.config.min_palm_size}"
            )

    def _is_degenerate(self, palm: float) -> bool:
        # NaN compares False against any threshold, so check finiteness first
        return not math.isfinite(palm) or palm <= self.config.min_palm_size

    def extract(self, hands: Sequence[Hand]) -> ExtractionResult:
        """Extract features from the first two hands of a frame."""
        hand1 = hands[0] if len(hands) > 0 else None
        hand2 = hands[1] if len(hands) > 1 else None
        return self.extract_pair(hand1, hand2)

    def extract_pair(self, hand1: Optional[Hand], hand2: Optional[Hand]) -> ExtractionResult:
        if hand1 is None or hand2 is None:
            return ExtractionResult.insufficient()

        palm1 = palm_size(hand1)
        if self._is_degenerate(palm1):
            return ExtractionResult.degenerate("hand 1", palm1)

        if self.config.normalization == REFERENCE_HAND:
            palm2 = palm1
        else:
            palm2 = palm_size(hand2)
            if self._is_degenerate(palm2):
                return ExtractionResult.degenerate("hand 2", palm2)

        return ExtractionResult(
            ExtractionStatus.OK,
            hand1=hand_ratios(hand1, palm1),
            hand2=hand_ratios(hand2, palm2),
        )
