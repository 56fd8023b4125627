"""
Visualization Module
=====================

OpenCV overlays: hand skeletons, the per-hand ratio readout and a
status line.
"""

import cv2
import numpy as np
from typing import Optional, Tuple, List, Dict
from dataclasses import dataclass

from ..detection.landmarks import FINGERTIPS, HAND_CONNECTIONS, Hand
from ..recognition.seal_features import ExtractionResult


@dataclass
class VisualizerConfig:
    """Visualization settings."""
    show_landmarks: bool = True
    show_connections: bool = True
    show_handedness: bool = True
    show_ratios: bool = True
    show_fps: bool = True

    # Colors (BGR format)
    landmark_color: Tuple[int, int, int] = (0, 0, 255)       # Red
    connection_color: Tuple[int, int, int] = (0, 255, 0)     # Green
    fingertip_color: Tuple[int, int, int] = (255, 0, 255)    # Magenta
    text_color: Tuple[int, int, int] = (0, 255, 255)         # Yellow
    warning_color: Tuple[int, int, int] = (0, 128, 255)      # Orange

    connection_thickness: int = 5
    landmark_radius: int = 4
    font_scale: float = 0.6
    font_thickness: int = 2

    @classmethod
    def from_dict(cls, config: dict) -> "VisualizerConfig":
        """Create config from dictionary."""
        colors = config.get("colors", {})
        return cls(
            show_landmarks=config.get("show_landmarks", True),
            show_connections=config.get("show_connections", True),
            show_handedness=config.get("show_handedness", True),
            show_ratios=config.get("show_ratios", True),
            show_fps=config.get("show_fps", True),
            landmark_color=tuple(colors.get("landmarks", [0, 0, 255])),
            connection_color=tuple(colors.get("connections", [0, 255, 0])),
            fingertip_color=tuple(colors.get("fingertips", [255, 0, 255])),
            text_color=tuple(colors.get("text", [0, 255, 255])),
            warning_color=tuple(colors.get("warning", [0, 128, 255])),
            connection_thickness=config.get("connection_thickness", 5),
            landmark_radius=config.get("landmark_radius", 4),
            font_scale=config.get("font_scale", 0.6),
            font_thickness=config.get("font_thickness", 2),
        )


class Visualizer:
    """
    Draws detection and feature overlays on BGR frames in place.

    Example:
        >>> viz = Visualizer()
        >>> viz.draw_hands(frame.image, result.hands)
        >>> viz.draw_ratios(frame.image, extraction)
    """

    def __init__(self, config: Optional[VisualizerConfig] = None):
        self.config = config or VisualizerConfig()
        self._font = cv2.FONT_HERSHEY_SIMPLEX

    def draw_hands(self, image: np.ndarray, hands: List[Hand]) -> np.ndarray:
        for number, hand in enumerate(hands, start=1):
            self.draw_hand(image, hand, label=f"Hand {number}")
        return image

    def draw_hand(self, image: np.ndarray, hand: Hand, label: str = "") -> np.ndarray:
        """Draw one hand's skeleton and joints."""
        height, width = image.shape[:2]

        if self.config.show_connections:
            for start_idx, end_idx in HAND_CONNECTIONS:
                start = hand.get_pixel(start_idx, width, height)
                end = hand.get_pixel(end_idx, width, height)
                cv2.line(image, start, end, self.config.connection_color,
                         self.config.connection_thickness)

        if self.config.show_landmarks:
            for i, lm in enumerate(hand.landmarks):
                color = self.config.fingertip_color if i in FINGERTIPS else self.config.landmark_color
                cv2.circle(image, lm.to_pixel(width, height), self.config.landmark_radius, color, -1)

        if self.config.show_handedness and label:
            cx, cy = hand.palm_center
            text = f"{label}: {hand.handedness} ({hand.score:.2f})"
            cv2.putText(image, text, (int(cx * width) - 60, int(cy * height) + 40),
                        self._font, 0.5, self.config.text_color, 1)

        return image

    def draw_ratios(self, image: np.ndarray, result: ExtractionResult,
                    position: Optional[Tuple[int, int]] = None) -> np.ndarray:
        """Draw the eight ratios, or the reason there are none."""
        if not self.config.show_ratios:
            return image

        height, _ = image.shape[:2]
        x, y = position if position is not None else (10, height - 60)

        if not result.ok:
            cv2.putText(image, result.reason, (x, y), self._font, self.config.font_scale,
                        self.config.warning_color, self.config.font_thickness)
            return image

        lines = [
            "Ratios (thumb index middle pinky)",
            f"Hand 1: {result.hand1.format(2)}",
            f"Hand 2: {result.hand2.format(2)}",
        ]
        for i, line in enumerate(lines):
            cv2.putText(image, line, (x, y + i * 22), self._font, 0.5,
                        self.config.text_color, 1)
        return image

    def draw_status(self, image: np.ndarray, text: str, ok: bool = True) -> np.ndarray:
        """Draw a one-line status banner at the top of the frame."""
        _, width = image.shape[:2]
        cv2.rectangle(image, (0, 0), (width, 28), (20, 20, 20), -1)
        color = self.config.text_color if ok else self.config.warning_color
        cv2.putText(image, text, (10, 20), self._font, 0.55, color, 1)
        return image

    def draw_performance(self, image: np.ndarray, fps: float = 0.0,
                         extra_info: Optional[Dict[str, str]] = None) -> np.ndarray:
        if not self.config.show_fps:
            return image

        _, width = image.shape[:2]
        x, y = width - 150, 50
        cv2.putText(image, f"FPS: {fps:.1f}", (x, y), self._font, 0.5, self.config.text_color, 1)
        if extra_info:
            for key, value in extra_info.items():
                y += 20
                cv2.putText(image, f"{key}: {value}", (x, y), self._font, 0.5,
                            self.config.text_color, 1)
        return image
