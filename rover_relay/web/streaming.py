"""Response helpers for serving relay frames to browser viewers."""

from __future__ import annotations

import base64
from typing import Dict, Optional

from flask import Response

from rover_relay.relay import StreamResult

# 1x1 transparent GIF served whenever no live frame is available
PLACEHOLDER_GIF = base64.b64decode("R0lGODlhAQABAIAAAP///wAAACH5BAEAAAAALAAAAAABAAEAAAICRAEAOw==")
PLACEHOLDER_CONTENT_TYPE = "image/gif"
FRAME_AGE_HEADER = "X-Frame-Age"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

EMBED_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Cross-Origin-Resource-Policy": "cross-origin",
}


def _stream_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    headers = dict(NO_CACHE_HEADERS)
    headers.update(EMBED_HEADERS)
    if extra:
        headers.update(extra)
    return headers


def placeholder_response() -> Response:
    response = Response(PLACEHOLDER_GIF, status=200, mimetype=PLACEHOLDER_CONTENT_TYPE)
    response.headers.update(_stream_headers())
    response.content_length = len(PLACEHOLDER_GIF)
    return response


def frame_response(result: StreamResult) -> Response:
    """Build the response for a stream read, falling back to the placeholder.

    Live frames keep the content type they were uploaded with, so PNG uploads
    are served as image/png rather than always being labelled image/jpeg.
    """

    if result.frame is None:
        return placeholder_response()
    frame = result.frame
    response = Response(frame.data, status=200, mimetype=frame.content_type)
    response.headers.update(
        _stream_headers(
            {
                "Access-Control-Allow-Methods": "GET, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
                FRAME_AGE_HEADER: str(int(result.age_ms or 0)),
            }
        )
    )
    response.content_length = frame.size
    return response


__all__ = [
    "PLACEHOLDER_GIF",
    "PLACEHOLDER_CONTENT_TYPE",
    "FRAME_AGE_HEADER",
    "frame_response",
    "placeholder_response",
]
