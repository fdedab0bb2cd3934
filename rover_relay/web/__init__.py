"""Web package exposing the relay application factory."""

from .app import create_app, get_relay

__all__ = ["create_app", "get_relay"]
