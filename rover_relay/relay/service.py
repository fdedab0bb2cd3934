"""Camera relay: admits uploaded frames and decides whether they are still live."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from .activity import ActivityFeed
from .errors import InternalError, MissingDataError, RelayError, ValidationError
from .intervals import (
    DEFAULT_MAX_INTERVALS,
    DEFAULT_TIMEOUT_MULTIPLIER,
    MAX_TIMEOUT_MS,
    MIN_TIMEOUT_MS,
    compute_dynamic_timeout,
    estimate_fps,
)
from .state import Clock, Frame, FrameBuffer, RelaySnapshot, monotonic_ms

if TYPE_CHECKING:
    from rover_relay.service.config import RelaySettings

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_FRAME_BYTES = 5 * 1024 * 1024
DEFAULT_CONTENT_TYPES = ("image/jpeg", "image/png")
CONTENT_TYPE_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}

STATE_EMPTY = "empty"
STATE_LIVE = "live"
STATE_STALE = "stale"


@dataclass(frozen=True)
class IngestResult:
    frame_size: int
    fps: float
    dynamic_timeout_ms: float


@dataclass(frozen=True)
class StreamResult:
    """Outcome of a stream read; ``frame`` is None when the placeholder applies."""

    frame: Optional[Frame]
    age_ms: Optional[float]
    dynamic_timeout_ms: float

    @property
    def live(self) -> bool:
        return self.frame is not None


def normalize_content_type(content_type: Optional[str]) -> str:
    if not content_type:
        return ""
    base = content_type.split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_ALIASES.get(base, base)


class CameraRelay:
    """Latest-wins relay between a single frame producer and many viewers."""

    def __init__(
        self,
        max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES,
        allowed_content_types: Iterable[str] = DEFAULT_CONTENT_TYPES,
        max_intervals: int = DEFAULT_MAX_INTERVALS,
        timeout_multiplier: float = DEFAULT_TIMEOUT_MULTIPLIER,
        min_timeout_ms: float = MIN_TIMEOUT_MS,
        max_timeout_ms: float = MAX_TIMEOUT_MS,
        clock: Clock = monotonic_ms,
        activity: Optional[ActivityFeed] = None,
    ) -> None:
        if min_timeout_ms > max_timeout_ms:
            raise ValueError("min_timeout_ms must not exceed max_timeout_ms")
        self._max_frame_bytes = max_frame_bytes
        self._allowed = frozenset(normalize_content_type(ct) for ct in allowed_content_types)
        self._multiplier = timeout_multiplier
        self._min_timeout = min_timeout_ms
        self._max_timeout = max_timeout_ms
        self._buffer = FrameBuffer(max_intervals=max_intervals, clock=clock)
        self.activity = activity if activity is not None else ActivityFeed()

    @classmethod
    def from_settings(
        cls,
        settings: "RelaySettings",
        clock: Clock = monotonic_ms,
        activity: Optional[ActivityFeed] = None,
    ) -> "CameraRelay":
        return cls(
            max_frame_bytes=settings.max_frame_bytes,
            allowed_content_types=settings.allowed_content_types,
            max_intervals=settings.max_intervals,
            timeout_multiplier=settings.timeout_multiplier,
            min_timeout_ms=settings.min_timeout_ms,
            max_timeout_ms=settings.max_timeout_ms,
            clock=clock,
            activity=activity,
        )

    @property
    def max_frame_bytes(self) -> int:
        return self._max_frame_bytes

    def dynamic_timeout(self, intervals: Iterable[float]) -> float:
        return compute_dynamic_timeout(
            intervals,
            multiplier=self._multiplier,
            min_timeout=self._min_timeout,
            max_timeout=self._max_timeout,
        )

    def validate(self, data: Optional[bytes], content_type: Optional[str], declared_size: Optional[int] = None) -> str:
        """Check an upload without touching state; return the normalized type."""

        if not data:
            raise MissingDataError("No frame data received")
        normalized = normalize_content_type(content_type)
        if normalized not in self._allowed:
            raise ValidationError("Only .jpg, .jpeg, and .png formats are allowed")
        size = max(len(data), declared_size or 0)
        if size > self._max_frame_bytes:
            raise ValidationError(
                f"Frame too large: {size} bytes exceeds limit of {self._max_frame_bytes} bytes"
            )
        return normalized

    def ingest(
        self,
        data: Optional[bytes],
        content_type: Optional[str],
        declared_size: Optional[int] = None,
    ) -> IngestResult:
        try:
            normalized = self.validate(data, content_type, declared_size)
        except RelayError as exc:
            LOGGER.warning("Rejected camera frame: %s", exc.message)
            self.activity.record_rejected(
                exc.message,
                frame_size=len(data) if data else 0,
                dynamic_timeout_ms=self.dynamic_timeout(self._buffer.snapshot().intervals),
            )
            raise

        try:
            snapshot = self._buffer.admit(bytes(data), normalized)
        except Exception as exc:
            LOGGER.exception("Failed to admit camera frame")
            raise InternalError("Failed to process frame") from exc

        result = IngestResult(
            frame_size=snapshot.frame.size,
            fps=estimate_fps(snapshot.intervals),
            dynamic_timeout_ms=self.dynamic_timeout(snapshot.intervals),
        )
        LOGGER.info(
            "Frame received: %d bytes | FPS: %.1f | Dynamic timeout: %.0fms",
            result.frame_size,
            result.fps,
            result.dynamic_timeout_ms,
        )
        self.activity.record_accepted(result.frame_size, result.fps, result.dynamic_timeout_ms)
        return result

    def fetch(self) -> StreamResult:
        """Return the buffered frame if it is still within the dynamic timeout."""

        snapshot = self._buffer.snapshot()
        timeout = self.dynamic_timeout(snapshot.intervals)
        age = self._age(snapshot)
        if snapshot.frame is None or age is None or age > timeout:
            LOGGER.debug(
                "No active camera feed (has_frame=%s, frame_age=%s, dynamic_timeout=%.0fms)",
                snapshot.frame is not None,
                "n/a" if age is None else f"{age:.0f}ms",
                timeout,
            )
            return StreamResult(frame=None, age_ms=age, dynamic_timeout_ms=timeout)
        LOGGER.debug("Serving frame: %d bytes, age %.0fms", snapshot.frame.size, age)
        return StreamResult(frame=snapshot.frame, age_ms=age, dynamic_timeout_ms=timeout)

    def snapshot(self) -> RelaySnapshot:
        return self._buffer.snapshot()

    def status(self) -> dict:
        """Diagnostic summary of the relay for the status endpoint."""

        snapshot = self._buffer.snapshot()
        timeout = self.dynamic_timeout(snapshot.intervals)
        age = self._age(snapshot)
        if snapshot.frame is None:
            state = STATE_EMPTY
        elif age is not None and age > timeout:
            state = STATE_STALE
        else:
            state = STATE_LIVE
        return {
            "state": state,
            "hasFrame": snapshot.frame is not None,
            "frameSize": snapshot.frame.size if snapshot.frame else 0,
            "contentType": snapshot.frame.content_type if snapshot.frame else None,
            "frameAge": None if age is None else round(age),
            "fps": estimate_fps(snapshot.intervals),
            "dynamicTimeout": timeout,
            "intervalSamples": len(snapshot.intervals),
        }

    def _age(self, snapshot: RelaySnapshot) -> Optional[float]:
        if snapshot.last_receipt is None:
            return None
        return max(0.0, self._buffer.now() - snapshot.last_receipt)


__all__ = [
    "CameraRelay",
    "IngestResult",
    "StreamResult",
    "normalize_content_type",
    "DEFAULT_MAX_FRAME_BYTES",
    "DEFAULT_CONTENT_TYPES",
    "STATE_EMPTY",
    "STATE_LIVE",
    "STATE_STALE",
]
