#!/usr/bin/env python3
"""Simulate a camera producer by uploading the same JPEG at a fixed rate."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import requests

LOGGER = logging.getLogger("camera_sim")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("image", type=Path, nargs="?", default=Path("stream_frame.jpg"))
    parser.add_argument(
        "--url",
        default="http://localhost:3000/api/camera/upload",
        help="Upload endpoint of the relay",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=200.0,
        help="Milliseconds between uploads (200ms is roughly 5 FPS)",
    )
    parser.add_argument("--field", default="frame", help="Multipart field name")
    parser.add_argument("--content-type", default="image/jpeg")
    parser.add_argument("--count", type=int, default=0, help="Stop after N uploads (0 = run forever)")
    return parser.parse_args()


def upload_frame(session: requests.Session, url: str, field: str, name: str, payload: bytes, content_type: str) -> bool:
    try:
        response = session.post(url, files={field: (name, payload, content_type)}, timeout=5)
    except requests.exceptions.ConnectionError:
        sys.stdout.write("\rConnection refused - is the relay running?   ")
        sys.stdout.flush()
        return False
    except requests.exceptions.RequestException:
        LOGGER.exception("Upload failed")
        return False

    if response.ok:
        data = response.json()
        sys.stdout.write(f"\rUpload OK | FPS: {data.get('fps')} | timeout: {data.get('dynamicTimeout')}ms   ")
        sys.stdout.flush()
        return True
    LOGGER.error("Upload rejected: %s %s", response.status_code, response.text)
    return False


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    if not args.image.exists():
        LOGGER.error("Frame file not found: %s", args.image)
        return 1
    payload = args.image.read_bytes()
    interval = max(args.interval, 1.0) / 1000.0

    LOGGER.info("Starting camera simulation against %s (Ctrl+C to stop)", args.url)
    sent = 0
    next_due = time.monotonic()
    with requests.Session() as session:
        try:
            while args.count <= 0 or sent < args.count:
                upload_frame(session, args.url, args.field, args.image.name, payload, args.content_type)
                sent += 1
                next_due += interval
                time.sleep(max(0.0, next_due - time.monotonic()))
        except KeyboardInterrupt:
            sys.stdout.write("\n")
            LOGGER.info("Stopping simulation")
    return 0


if __name__ == "__main__":
    sys.exit(main())
