"""Hand landmark types and the MediaPipe landmark source."""
from .landmarks import FrameResult, Hand, Landmark, LandmarkIndex

__all__ = ["FrameResult", "Hand", "Landmark", "LandmarkIndex"]
