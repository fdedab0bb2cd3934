"""Inter-arrival tracking and the adaptive staleness timeout derived from it."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, Sequence

DEFAULT_MAX_INTERVALS = 10
DEFAULT_TIMEOUT_MULTIPLIER = 3.0
MIN_TIMEOUT_MS = 1000.0
MAX_TIMEOUT_MS = 10000.0


class IntervalWindow:
    """Fixed-capacity FIFO of the most recent inter-arrival durations (ms)."""

    def __init__(self, capacity: int = DEFAULT_MAX_INTERVALS) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._samples: Deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def append(self, interval_ms: float) -> None:
        if interval_ms < 0:
            raise ValueError(f"interval must be non-negative, got {interval_ms}")
        # deque evicts the oldest sample once maxlen is reached
        self._samples.append(float(interval_ms))

    def values(self) -> tuple[float, ...]:
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[float]:
        return iter(self._samples)


def average_interval(intervals: Sequence[float]) -> float:
    if not intervals:
        return 0.0
    return sum(intervals) / len(intervals)


def compute_dynamic_timeout(
    intervals: Iterable[float],
    multiplier: float = DEFAULT_TIMEOUT_MULTIPLIER,
    min_timeout: float = MIN_TIMEOUT_MS,
    max_timeout: float = MAX_TIMEOUT_MS,
) -> float:
    """Return the staleness threshold in milliseconds for the given history.

    With fewer than two samples there is no meaningful spacing to learn from,
    so the minimum timeout applies. Otherwise the average interval is scaled
    by ``multiplier`` and clamped to ``[min_timeout, max_timeout]``.
    """

    samples = tuple(intervals)
    if len(samples) < 2:
        return float(min_timeout)
    scaled = average_interval(samples) * multiplier
    return float(max(min_timeout, min(max_timeout, scaled)))


def estimate_fps(intervals: Iterable[float]) -> float:
    """Instantaneous producer rate, rounded to one decimal; 0.0 without data."""

    mean = average_interval(tuple(intervals))
    if mean <= 0:
        return 0.0
    return round(1000.0 / mean, 1)


__all__ = [
    "IntervalWindow",
    "average_interval",
    "compute_dynamic_timeout",
    "estimate_fps",
    "DEFAULT_MAX_INTERVALS",
    "DEFAULT_TIMEOUT_MULTIPLIER",
    "MIN_TIMEOUT_MS",
    "MAX_TIMEOUT_MS",
]
