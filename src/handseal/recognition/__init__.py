"""Two-hand seal feature extraction."""
from .latest_result import LatestResultSlot
from .seal_features import (
    ExtractionResult,
    ExtractionStatus,
    HandRatios,
    SealFeatureConfig,
    SealFeatureExtractor,
)

__all__ = [
    "ExtractionResult",
    "ExtractionStatus",
    "HandRatios",
    "LatestResultSlot",
    "SealFeatureConfig",
    "SealFeatureExtractor",
]
