"""Main entry point wiring the camera relay into the web server."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from rover_relay.relay import CameraRelay
from rover_relay.service.config import AppConfig, resolve_config
from rover_relay.web import create_app

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rover camera relay server")
    parser.add_argument("--config", help="Path to application configuration JSON")
    parser.add_argument("--host", help="Override the listen host from the configuration")
    parser.add_argument("--port", type=int, help="Override the listen port from the configuration")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity",
    )
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def apply_overrides(app_config: AppConfig, host: Optional[str], port: Optional[int]) -> AppConfig:
    updates = {}
    if host:
        updates["host"] = host
    if port:
        updates["port"] = port
    if not updates:
        return app_config
    web = app_config.web.model_copy(update=updates)
    return app_config.model_copy(update={"web": web})


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)
    app_config = apply_overrides(resolve_config(args.config), args.host, args.port)
    relay_settings = app_config.relay
    LOGGER.info(
        "Relay configured: max frame %d bytes, timeout %.0f-%.0fms (x%.1f of %d-sample average)",
        relay_settings.max_frame_bytes,
        relay_settings.min_timeout_ms,
        relay_settings.max_timeout_ms,
        relay_settings.timeout_multiplier,
        relay_settings.max_intervals,
    )

    relay = CameraRelay.from_settings(relay_settings)
    app = create_app(app_config, relay=relay)

    LOGGER.info("Starting camera relay on %s:%s", app_config.web.host, app_config.web.port)
    try:
        app.run(
            host=app_config.web.host,
            port=app_config.web.port,
            debug=False,
            use_reloader=False,
            threaded=True,
        )
    except KeyboardInterrupt:
        LOGGER.info("Shutdown requested")
    finally:
        relay.activity.close()
        LOGGER.info("Shutdown complete")


if __name__ == "__main__":  # pragma: no cover - entry point guard
    main()
