"""
Logging setup and the per-frame feature diagnostic record.
"""

import os
import logging
import logging.handlers
import time
from collections import deque
from functools import wraps

from ..recognition.seal_features import ExtractionResult, ExtractionStatus


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure console and optional rotating file logging."""
    console_format = "%(asctime)s  %(levelname)-5s  %(message)s"
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-25s | %(message)s"
    date_format = "%H:%M:%S"

    level_value = getattr(logging, str(level).upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(level_value)
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


class FeatureLogger:
    """
    Emits the ratio diagnostic for each extraction and keeps a short history.

    Successful extractions are logged at INFO every ``every_n`` results;
    insufficient input and degenerate palms are logged at DEBUG since
    they are the normal state whenever fewer than two hands are in view.
    """

    def __init__(self, every_n: int = 1, history_size: int = 500):
        self.logger = logging.getLogger("seal_features")
        self.every_n = max(1, every_n)
        self._history = deque(maxlen=history_size)
        self._ok_count = 0
        self._last_status = None

    def log_result(self, result: ExtractionResult, frame_number: int = 0) -> None:
        entry = {
            "timestamp": time.time(),
            "frame": frame_number,
            "status": result.status.value,
            "values": list(result.values),
        }
        self._history.append(entry)

        if result.status is ExtractionStatus.OK:
            self._ok_count += 1
            if (self._ok_count - 1) % self.every_n == 0:
                self.logger.info("Hand 1 Ratios: %s", result.hand1.format())
                self.logger.info("Hand 2 Ratios: %s", result.hand2.format())
        elif result.status is not self._last_status:
            # Only log transitions so a missing hand does not flood the log
            self.logger.debug("Frame %d skipped: %s", frame_number, result.reason)

        self._last_status = result.status

    def get_history(self, last_n=None):
        if last_n:
            return list(self._history)[-last_n:]
        return list(self._history)

    @property
    def total_ok(self):
        return self._ok_count


def log_timing(func):
    """Decorator to log function execution time at debug level."""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug("%s took %.2fms", func.__name__, elapsed)
        return result

    return wrapper
