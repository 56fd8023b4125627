"""
Performance Monitoring
=======================

Rolling FPS and per-stage timings for the capture -> detect -> extract loop.
"""

import time
import logging
from dataclasses import dataclass
from typing import Optional, Dict
from collections import deque
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@dataclass
class PerformanceMetrics:
    """Snapshot of loop timings."""
    fps: float = 0.0
    frame_time_ms: float = 0.0
    capture_time_ms: float = 0.0
    detection_time_ms: float = 0.0
    extraction_time_ms: float = 0.0
    render_time_ms: float = 0.0
    total_frames: int = 0
    slow_frames: int = 0
    skipped_detections: int = 0


class PerformanceMonitor:
    """
    Rolling-window timings of the frame loop.

    Example:
        >>> monitor = PerformanceMonitor()
        >>> monitor.start()
        >>> monitor.frame_start()
        >>> with monitor.measure("detection"):
        ...     result = detector.detect(rgb)
        >>> monitor.frame_complete()
    """

    def __init__(self, window_size: int = 30, target_fps: float = 25.0):
        self.window_size = window_size
        self.target_fps = target_fps
        self._frame_times: deque = deque(maxlen=window_size)
        self._stage_times: Dict[str, deque] = {}
        self._frame_start: Optional[float] = None
        self._total_frames = 0
        self._slow_frames = 0
        self._skipped_detections = 0

    def start(self) -> None:
        self._total_frames = 0
        self._slow_frames = 0
        self._skipped_detections = 0
        self._frame_times.clear()
        self._stage_times.clear()
        logger.info("Performance monitor started")

    def stop(self) -> None:
        logger.info("Performance monitor stopped. Total frames: %d, slow: %d, skipped detections: %d",
                    self._total_frames, self._slow_frames, self._skipped_detections)

    def frame_start(self) -> None:
        self._frame_start = time.perf_counter()

    def frame_complete(self) -> None:
        if self._frame_start is None:
            return

        frame_time = time.perf_counter() - self._frame_start
        self._frame_times.append(frame_time)
        self._total_frames += 1
        if frame_time > (1.0 / self.target_fps):
            self._slow_frames += 1
        self._frame_start = None

    def detection_skipped(self) -> None:
        """Record a tick that reused the previous detection."""
        self._skipped_detections += 1

    @contextmanager
    def measure(self, stage: str):
        """Time the enclosed block under ``stage``."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            if stage not in self._stage_times:
                self._stage_times[stage] = deque(maxlen=self.window_size)
            self._stage_times[stage].append(elapsed)

    @property
    def fps(self) -> float:
        if not self._frame_times:
            return 0.0
        avg_frame_time = sum(self._frame_times) / len(self._frame_times)
        return 1.0 / avg_frame_time if avg_frame_time > 0 else 0.0

    @property
    def frame_time_ms(self) -> float:
        if not self._frame_times:
            return 0.0
        return (sum(self._frame_times) / len(self._frame_times)) * 1000

    def stage_time_ms(self, stage: str) -> float:
        times = self._stage_times.get(stage)
        if not times:
            return 0.0
        return (sum(times) / len(times)) * 1000

    def get_metrics(self) -> PerformanceMetrics:
        return PerformanceMetrics(
            fps=self.fps,
            frame_time_ms=self.frame_time_ms,
            capture_time_ms=self.stage_time_ms("capture"),
            detection_time_ms=self.stage_time_ms("detection"),
            extraction_time_ms=self.stage_time_ms("extraction"),
            render_time_ms=self.stage_time_ms("render"),
            total_frames=self._total_frames,
            slow_frames=self._slow_frames,
            skipped_detections=self._skipped_detections,
        )

    def get_report(self) -> str:
        m = self.get_metrics()
        slow_pct = 100 * m.slow_frames / max(1, m.total_frames)
        return (
            f"Performance Report\n"
            f"{'=' * 40}\n"
            f"FPS: {m.fps:.1f} (target: >={self.target_fps})\n"
            f"Frame time: {m.frame_time_ms:.1f}ms\n"
            f"\nPer-Stage Breakdown:\n"
            f"  Capture: {m.capture_time_ms:.2f}ms\n"
            f"  Detection: {m.detection_time_ms:.2f}ms\n"
            f"  Extraction: {m.extraction_time_ms:.2f}ms\n"
            f"  Render: {m.render_time_ms:.2f}ms\n"
            f"\nFrame Stats:\n"
            f"  Total: {m.total_frames}\n"
            f"  Slow: {m.slow_frames} ({slow_pct:.1f}%)\n"
            f"  Reused detections: {m.skipped_detections}\n"
        )
