"""Error taxonomy for frame admission and distribution."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for failures surfaced to HTTP clients."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RelayError):
    """Upload has a disallowed content type or exceeds the size cap."""

    status_code = 400


class MissingDataError(RelayError):
    """Upload carried no frame payload."""

    status_code = 400


class InternalError(RelayError):
    """Unexpected failure while admitting or serving a frame."""

    status_code = 500


__all__ = ["RelayError", "ValidationError", "MissingDataError", "InternalError"]
