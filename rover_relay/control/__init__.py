"""Control-plane boundary: drive command model, payload codec, publisher protocol."""

from .commands import CommandPublisher, RoverCommand, decode_command, encode_command

__all__ = [
    "CommandPublisher",
    "RoverCommand",
    "decode_command",
    "encode_command",
]
