"""
Latest Result Slot
===================

Holds only the most recent detection result. A new result overwrites
the previous one; nothing is queued. Touched only from the frame loop
thread, so there is no locking.
"""

from typing import Optional

from ..detection.landmarks import FrameResult


class LatestResultSlot:
    """
    Single-slot holder for the latest FrameResult.

    Example:
        >>> slot = LatestResultSlot()
        >>> slot.put(detector.detect(frame.rgb, frame_number=frame.frame_number))
        >>> result = slot.get()
    """

    def __init__(self):
        self._result: Optional[FrameResult] = None
        self._consumed = True
        self.total_results = 0
        self.dropped_results = 0  # overwritten before anyone read them

    def put(self, result: FrameResult) -> None:
        if not self._consumed:
            self.dropped_results += 1
        self._result = result
        self._consumed = False
        self.total_results += 1

    def get(self) -> Optional[FrameResult]:
        """Return the latest result, or None if empty. Does not clear the slot."""
        if self._result is not None:
            self._consumed = True
        return self._result

    def clear(self) -> None:
        self._result = None
        self._consumed = True

    @property
    def last_frame_number(self) -> int:
        """Frame number of the held result, -1 when empty."""
        if self._result is None:
            return -1
        return self._result.frame_number

    def is_stale(self, frame_number: int) -> bool:
        """True when ``frame_number`` has not been detected yet."""
        return frame_number != self.last_frame_number
