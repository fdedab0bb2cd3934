"""Relay package exposing the frame buffer, timeout logic, and relay service."""

from .activity import ActivityFeed, UploadOutcome
from .errors import InternalError, MissingDataError, RelayError, ValidationError
from .intervals import IntervalWindow, compute_dynamic_timeout, estimate_fps
from .service import CameraRelay, IngestResult, StreamResult
from .state import Frame, FrameBuffer, RelaySnapshot

__all__ = [
    "ActivityFeed",
    "UploadOutcome",
    "CameraRelay",
    "IngestResult",
    "StreamResult",
    "Frame",
    "FrameBuffer",
    "RelaySnapshot",
    "IntervalWindow",
    "compute_dynamic_timeout",
    "estimate_fps",
    "RelayError",
    "ValidationError",
    "MissingDataError",
    "InternalError",
]
