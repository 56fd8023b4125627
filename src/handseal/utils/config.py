"""
Configuration loading.

Reads a YAML file, merges it over the built-in defaults and checks the
known fields against a type schema. Problems are logged as warnings;
only values a component cannot work with raise, when that component is
built.
"""

import os
import copy
import logging
from dataclasses import dataclass
from typing import List, Optional

import yaml

from ..capture.camera import CameraConfig
from ..detection.hand_detector import HandDetectorConfig
from ..recognition.seal_features import SealFeatureConfig
from .visualization import VisualizerConfig

logger = logging.getLogger(__name__)

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
DEFAULT_CONFIG_PATH = os.path.join(_BASE_DIR, "config", "config.yaml")

DEFAULTS = {
    "camera": {
        "device_id": 0,
        "width": 640,
        "height": 480,
        "fps": 30,
        "threaded": True,
        "flip_horizontal": True,
        "warmup_frames": 5,
    },
    "mediapipe": {
        "model_path": "",
        "max_num_hands": 2,
        "min_detection_confidence": 0.5,
        "min_tracking_confidence": 0.5,
        "min_presence_confidence": 0.5,
        "running_mode": "VIDEO",
        "delegate": "CPU",
    },
    "features": {
        "normalization": "per_hand",
        "min_palm_size": 1e-6,
        "log_every_n_frames": 1,
    },
    "visualization": {},
    "logging": {
        "level": "INFO",
        "file": None,
        "max_size_mb": 10,
        "backup_count": 3,
    },
    "performance": {
        "target_fps": 25.0,
        "window_size": 30,
    },
}

_CONFIG_SCHEMA = {
    "camera": {
        "device_id": int,
        "width": int,
        "height": int,
        "fps": int,
        "threaded": bool,
        "flip_horizontal": bool,
    },
    "mediapipe": {
        "max_num_hands": int,
        "min_detection_confidence": float,
        "min_tracking_confidence": float,
        "min_presence_confidence": float,
        "running_mode": str,
        "delegate": str,
    },
    "features": {
        "normalization": str,
        "min_palm_size": float,
        "log_every_n_frames": int,
    },
    "logging": {
        "level": str,
    },
    "performance": {
        "target_fps": float,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dict."""
    merged = base.copy()
    for key, value in override.items():
        # An empty YAML section ("features:" with all keys commented out) loads as None
        if value is None and isinstance(merged.get(key), dict):
            continue
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(data: dict) -> List[str]:
    """Check known fields against the schema. Returns the warnings it logged."""
    warnings = []
    for section_name, fields in _CONFIG_SCHEMA.items():
        section = data.get(section_name)
        if section is None:
            continue
        if not isinstance(section, dict):
            warnings.append(f"Section '{section_name}' should be a dict, got {type(section).__name__}")
            continue
        for field_name, expected_type in fields.items():
            if field_name not in section:
                continue
            value = section[field_name]
            # Allow int where float is expected; bool only counts as bool
            if isinstance(value, bool) and expected_type is not bool:
                pass
            elif expected_type is float and isinstance(value, (int, float)):
                continue
            elif isinstance(value, expected_type):
                continue
            warnings.append(
                f"{section_name}.{field_name}: expected {expected_type.__name__}, "
                f"got {type(value).__name__} ({value!r})"
            )

    for w in warnings:
        logger.warning("Config validation: %s", w)
    if not warnings:
        logger.debug("Config validation passed")
    return warnings


def load_config(config_path: Optional[str] = None) -> dict:
    """Load YAML config merged over defaults. A missing file yields the defaults."""
    config_path = config_path or DEFAULT_CONFIG_PATH
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded config from %s", config_path)
    except FileNotFoundError:
        logger.warning("Config file not found: %s, using defaults", config_path)
        data = {}

    if not isinstance(data, dict):
        logger.warning("Config file %s does not hold a mapping, using defaults", config_path)
        data = {}

    merged = _deep_merge(copy.deepcopy(DEFAULTS), data)
    validate_config(merged)
    for section, default in DEFAULTS.items():
        if not isinstance(merged.get(section), dict):
            logger.warning("Config section '%s' is not a mapping, using defaults", section)
            merged[section] = copy.deepcopy(default)
    return merged


@dataclass
class AppConfig:
    """Application configuration container."""
    camera: CameraConfig
    mediapipe: HandDetectorConfig
    features: SealFeatureConfig
    visualization: VisualizerConfig
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_max_size_mb: int = 10
    log_backup_count: int = 3
    log_every_n_frames: int = 1
    target_fps: float = 25.0
    performance_window: int = 30

    @classmethod
    def from_dict(cls, config_dict: dict) -> "AppConfig":
        logging_cfg = config_dict.get("logging", {})
        performance = config_dict.get("performance", {})
        features = config_dict.get("features", {})
        return cls(
            camera=CameraConfig.from_dict(config_dict.get("camera", {})),
            mediapipe=HandDetectorConfig.from_dict(config_dict.get("mediapipe", {})),
            features=SealFeatureConfig.from_dict(features),
            visualization=VisualizerConfig.from_dict(config_dict.get("visualization", {})),
            log_level=logging_cfg.get("level", "INFO"),
            log_file=logging_cfg.get("file"),
            log_max_size_mb=logging_cfg.get("max_size_mb", 10),
            log_backup_count=logging_cfg.get("backup_count", 3),
            log_every_n_frames=features.get("log_every_n_frames", 1),
            target_fps=float(performance.get("target_fps", 25.0)),
            performance_window=performance.get("window_size", 30),
        )
