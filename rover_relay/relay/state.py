"""Single-slot frame buffer shared between the upload and stream handlers."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .intervals import DEFAULT_MAX_INTERVALS, IntervalWindow

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class Frame:
    """One complete image payload as received from the producer."""

    data: bytes
    content_type: str
    received_at: float

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class RelaySnapshot:
    """Consistent view of the buffer: frame, its receipt time, and history."""

    frame: Optional[Frame]
    last_receipt: Optional[float]
    intervals: tuple[float, ...]

    @property
    def is_empty(self) -> bool:
        return self.frame is None


class FrameBuffer:
    """Holds the latest frame, its timestamp, and the interval window.

    All three are updated together under one lock; readers take the same lock
    only long enough to copy references, so they always observe a frame paired
    with its own timestamp.
    """

    def __init__(
        self,
        max_intervals: int = DEFAULT_MAX_INTERVALS,
        clock: Clock = monotonic_ms,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._frame: Optional[Frame] = None
        self._last_receipt: Optional[float] = None
        self._intervals = IntervalWindow(max_intervals)

    def now(self) -> float:
        return self._clock()

    def admit(self, data: bytes, content_type: str) -> RelaySnapshot:
        """Replace the current frame and record the interval since the last one."""

        with self._lock:
            now = self._clock()
            interval: Optional[float] = None
            if self._last_receipt is not None:
                # the receipt time never moves backwards
                now = max(now, self._last_receipt)
                interval = now - self._last_receipt
            frame = Frame(data=data, content_type=content_type, received_at=now)
            if interval is not None:
                self._intervals.append(interval)
            self._frame = frame
            self._last_receipt = now
            return self._snapshot_locked()

    def snapshot(self) -> RelaySnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> RelaySnapshot:
        return RelaySnapshot(
            frame=self._frame,
            last_receipt=self._last_receipt,
            intervals=self._intervals.values(),
        )


__all__ = ["Clock", "Frame", "FrameBuffer", "RelaySnapshot", "monotonic_ms"]
