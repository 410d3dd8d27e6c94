"""
Frame-rate and interaction-latency tracking.

Timestamps are in seconds (``time.perf_counter``); reported latencies are
in milliseconds.
"""

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Tuple

from PE_Libs.constants import DEFAULT_FRAME_WINDOW, DEFAULT_LATENCY_WINDOW


@dataclass(frozen=True)
class PerformanceMetrics:
    fps: int = 0
    avg_latency_ms: int = 0
    current_latency_ms: int = 0


class PerformanceTracker:
    """Rolling FPS estimate plus latency of the most recent interactions."""

    def __init__(
        self,
        latency_window: int = DEFAULT_LATENCY_WINDOW,
        frame_window: int = DEFAULT_FRAME_WINDOW,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._clock = clock
        self._frames: Deque[float] = deque(maxlen=frame_window)
        self._latencies: Deque[float] = deque(maxlen=latency_window)
        self._pending: Optional[Tuple[str, float]] = None
        self._current_latency = 0.0

    @property
    def pending_interaction(self) -> Optional[str]:
        return self._pending[0] if self._pending else None

    def record_frame(self, timestamp: Optional[float] = None) -> None:
        self._frames.append(self._clock() if timestamp is None else timestamp)

    def record_interaction_start(self, kind: str) -> None:
        """Mark the start of a user interaction (e.g. 'filter', 'crop', 'rotate')."""
        self._pending = (kind, self._clock())

    def record_interaction_end(self) -> Optional[float]:
        """
        Close the pending interaction.

        Returns:
            Latency in milliseconds, or None if nothing was pending
        """
        if self._pending is None:
            return None
        latency = (self._clock() - self._pending[1]) * 1000.0
        self._latencies.append(latency)
        self._current_latency = latency
        self._pending = None
        return latency

    def fps(self) -> float:
        if len(self._frames) < 2:
            return 0.0
        timespan = self._frames[-1] - self._frames[0]
        if timespan <= 0:
            return 0.0
        return (len(self._frames) - 1) / timespan

    def metrics(self) -> PerformanceMetrics:
        average = sum(self._latencies) / len(self._latencies) if self._latencies else 0.0
        return PerformanceMetrics(
            fps=round(self.fps()),
            avg_latency_ms=round(average),
            current_latency_ms=round(self._current_latency),
        )

    def reset(self) -> None:
        self._frames.clear()
        self._latencies.clear()
        self._pending = None
        self._current_latency = 0.0
