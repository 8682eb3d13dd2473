"""Measures the wall-clock time spent on advancing frames.

.. autosummary::
   :nosignatures:

   FrameTimer
"""

from __future__ import annotations

import logging
import math
import time
from typing import Any

from ..tools.math import OnlineStatistics


class FrameTimer:
    """Accumulates the duration of individual frames.

    The timer only observes the simulation and has no influence on its state.

    Example:
        The timer can be used as a context manager around the work of a frame::

            timer = FrameTimer()
            with timer:
                advance_frame()
            timer.report()
    """

    _logger = logging.getLogger(__name__)

    def __init__(self):
        self.statistics = OnlineStatistics()
        self._t_start: float | None = None

    def __repr__(self):
        return f"{self.__class__.__name__}(frames={self.frames})"

    @property
    def running(self) -> bool:
        return self._t_start is not None

    def start(self) -> None:
        """Start measuring a frame."""
        if self.running:
            raise RuntimeError("Timer has already been started")
        self._t_start = time.perf_counter()

    def stop(self) -> float:
        """Stop measuring a frame.

        Returns:
            float: The elapsed time of the frame in milliseconds
        """
        if self._t_start is None:
            raise RuntimeError("Timer has not been started")
        elapsed = 1e3 * (time.perf_counter() - self._t_start)
        self._t_start = None
        self.statistics.add(elapsed)
        return elapsed

    def __enter__(self) -> FrameTimer:
        self.start()
        return self

    def cancel(self) -> None:
        """Stop measuring a frame without recording it."""
        self._t_start = None

    def __exit__(self, exc_type, exc_value, exc_tb):
        if exc_type is None:
            self.stop()
        else:
            # only completed frames enter the statistics
            self.cancel()
        return False

    @property
    def frames(self) -> int:
        """int: number of measured frames"""
        return int(self.statistics.count)

    @property
    def average(self) -> float:
        """float: average duration of a frame in milliseconds"""
        if self.frames == 0:
            return math.nan
        return float(self.statistics.mean)

    def to_dict(self) -> dict[str, Any]:
        """Return the statistics of the frame durations in milliseconds."""
        stats = self.statistics
        return {
            "frames": self.frames,
            "mean": self.average,
            "min": float(stats.min) if self.frames else math.nan,
            "max": float(stats.max) if self.frames else math.nan,
            "std": float(stats.std),
        }

    def report(self) -> float:
        """Log the average duration of a frame.

        Returns:
            float: The average duration in milliseconds
        """
        average = self.average
        self._logger.info(
            "Average time per frame: %3.1f ms (%d frames)", average, self.frames
        )
        return average
