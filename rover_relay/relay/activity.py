"""Recent upload outcomes, exposed to viewers that follow relay activity."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import Deque, List, Optional


@dataclass(frozen=True)
class UploadOutcome:
    """Result of one upload attempt as seen by the relay."""

    sequence: int
    accepted: bool
    timestamp: float
    frame_size: int
    fps: float
    dynamic_timeout_ms: float
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["frameSize"] = payload.pop("frame_size")
        payload["dynamicTimeout"] = payload.pop("dynamic_timeout_ms")
        return payload


class ActivityFeed:
    """Bounded log of upload outcomes with a sequence cursor for followers.

    Followers remember the last sequence they saw and ask for anything newer;
    outcomes that fall out of the history before a follower catches up are
    simply missed.
    """

    def __init__(self, history: int = 50) -> None:
        self._condition = threading.Condition()
        self._outcomes: Deque[UploadOutcome] = deque(maxlen=history)
        self._sequence = 0
        self._closed = False

    @property
    def latest_sequence(self) -> int:
        with self._condition:
            return self._sequence

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def record_accepted(self, frame_size: int, fps: float, dynamic_timeout_ms: float) -> UploadOutcome:
        return self._record(True, frame_size, fps, dynamic_timeout_ms, None)

    def record_rejected(self, reason: str, frame_size: int, dynamic_timeout_ms: float) -> UploadOutcome:
        return self._record(False, frame_size, 0.0, dynamic_timeout_ms, reason)

    def since(self, sequence: int) -> List[UploadOutcome]:
        with self._condition:
            return [outcome for outcome in self._outcomes if outcome.sequence > sequence]

    def wait_since(self, sequence: int, timeout: float) -> List[UploadOutcome]:
        """Block until an outcome newer than ``sequence`` exists, or timeout."""
        with self._condition:
            self._condition.wait_for(lambda: self._closed or self._sequence > sequence, timeout=timeout)
            return [outcome for outcome in self._outcomes if outcome.sequence > sequence]

    def close(self) -> None:
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def _record(
        self,
        accepted: bool,
        frame_size: int,
        fps: float,
        dynamic_timeout_ms: float,
        reason: Optional[str],
    ) -> UploadOutcome:
        with self._condition:
            self._sequence += 1
            outcome = UploadOutcome(
                sequence=self._sequence,
                accepted=accepted,
                timestamp=time.time(),
                frame_size=frame_size,
                fps=fps,
                dynamic_timeout_ms=dynamic_timeout_ms,
                reason=reason,
            )
            self._outcomes.append(outcome)
            self._condition.notify_all()
            return outcome


__all__ = ["ActivityFeed", "UploadOutcome"]
