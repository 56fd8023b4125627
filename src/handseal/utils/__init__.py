"""Utility modules for configuration, logging, performance and visualization."""
from .performance import PerformanceMonitor
from .visualization import Visualizer, VisualizerConfig

__all__ = ["PerformanceMonitor", "Visualizer", "VisualizerConfig"]
