"""Flask application exposing the camera upload, stream, and diagnostic endpoints."""

from __future__ import annotations

import json
import logging
from typing import Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from rover_relay.relay import (
    CameraRelay,
    InternalError,
    RelayError,
)
from rover_relay.service.config import AppConfig

from .streaming import frame_response

LOGGER = logging.getLogger(__name__)

RELAY_EXTENSION = "camera_relay"


def _find_upload(field: str) -> Optional[FileStorage]:
    """Return the named file part, or the first file part if the name is absent."""
    storage = request.files.get(field)
    if storage is None and request.files:
        storage = next(iter(request.files.values()))
    return storage


def _error_body(message: str, status: int) -> tuple[Response, int]:
    return jsonify({"status": "error", "message": message}), status


def create_app(
    app_config: AppConfig,
    relay: Optional[CameraRelay] = None,
) -> Flask:
    app = Flask(__name__)
    relay_settings = app_config.relay
    if relay is None:
        relay = CameraRelay.from_settings(relay_settings)
    app.extensions[RELAY_EXTENSION] = relay
    # bodies beyond this are refused before the multipart parser reads them
    app.config["MAX_CONTENT_LENGTH"] = relay_settings.max_request_bytes

    CORS(
        app,
        resources={r"/api/*": {"origins": app_config.web.cors_origins}},
        send_wildcard=True,
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.errorhandler(RelayError)
    def handle_relay_error(exc: RelayError):
        return _error_body(exc.message, exc.status_code)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(exc: RequestEntityTooLarge):
        LOGGER.warning("Rejected upload larger than %d bytes", relay_settings.max_request_bytes)
        return _error_body(
            f"Frame too large: limit is {relay_settings.max_frame_bytes} bytes", 400
        )

    @app.route("/api/camera/upload", methods=["POST"])
    def upload_frame():
        try:
            storage = _find_upload(relay_settings.upload_field)
            data: Optional[bytes] = None
            mimetype: Optional[str] = None
            declared_size: Optional[int] = None
            if storage is not None:
                # one byte past the cap is enough to detect an oversized part
                data = storage.stream.read(relay_settings.max_frame_bytes + 1)
                mimetype = storage.mimetype
                declared_size = storage.content_length or None
            result = relay.ingest(data, mimetype, declared_size=declared_size)
        except (RelayError, HTTPException):
            raise
        except Exception as exc:
            LOGGER.exception("Error processing camera frame")
            raise InternalError("Failed to process frame") from exc

        return jsonify(
            {
                "status": "success",
                "message": "Frame received",
                "frameSize": result.frame_size,
                "fps": result.fps,
                "dynamicTimeout": result.dynamic_timeout_ms,
            }
        )

    @app.route("/api/camera/stream")
    def camera_stream():
        try:
            return frame_response(relay.fetch())
        except Exception as exc:
            LOGGER.exception("Error serving camera stream")
            raise InternalError("Failed to serve camera stream") from exc

    @app.route("/api/camera/status")
    def camera_status():
        return jsonify(relay.status())

    @app.route("/api/camera/events")
    def camera_events():
        """Server-Sent Events feed of upload outcomes."""
        feed = relay.activity

        def generate():
            cursor = feed.latest_sequence
            yield "data: {\"type\": \"connected\"}\n\n"
            while not feed.closed:
                outcomes = feed.wait_since(cursor, timeout=15.0)
                if not outcomes:
                    yield ": keepalive\n\n"
                    continue
                for outcome in outcomes:
                    kind = "frame_accepted" if outcome.accepted else "frame_rejected"
                    yield f"data: {json.dumps({'type': kind, **outcome.to_dict()})}\n\n"
                cursor = outcomes[-1].sequence

        return Response(generate(), mimetype="text/event-stream")

    return app


def get_relay(app: Flask) -> CameraRelay:
    return app.extensions[RELAY_EXTENSION]


__all__ = ["create_app", "get_relay"]
