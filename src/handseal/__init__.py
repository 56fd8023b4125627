"""
Hand Seal Feature Demo
=======================

Webcam demo that detects two hands with MediaPipe, draws their skeletons
and computes palm-normalized wrist-to-fingertip ratios as features for
hand-seal recognition.

Modules:
    - capture: Camera frame acquisition
    - detection: Landmark types and the MediaPipe hand landmarker
    - recognition: Seal feature extraction and the latest-result slot
    - utils: Configuration, logging, performance and visualization
"""

__version__ = "0.1.0"
