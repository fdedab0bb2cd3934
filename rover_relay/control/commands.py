"""Drive command messages exchanged with the rover over the control topic."""

from __future__ import annotations

import json
from typing import Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class RoverCommand(BaseModel):
    """A single drive command, optionally carrying a speed."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(..., description="Command name, e.g. forward or stop")
    speed: Optional[float] = Field(default=None, ge=0.0)

    @field_validator("command")
    @classmethod
    def _validate_command(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("command must not be empty")
        return value


class CommandPublisher(Protocol):
    """Transport able to deliver commands on a topic."""

    def publish(self, topic: str, command: RoverCommand) -> None:
        ...


def encode_command(command: RoverCommand) -> str:
    """JSON object when a speed is attached, bare command string otherwise."""
    if command.speed is None:
        return command.command
    return json.dumps({"command": command.command, "speed": command.speed})


def decode_command(payload: Union[str, bytes]) -> RoverCommand:
    text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
    text = text.strip()
    if not text.startswith("{"):
        try:
            return RoverCommand(command=text)
        except ValidationError as exc:
            raise ValueError(f"Invalid command payload: {exc}") from exc
    try:
        data = json.loads(text)
        return RoverCommand(**data)
    except (json.JSONDecodeError, TypeError, ValidationError) as exc:
        raise ValueError(f"Invalid command payload: {exc}") from exc


__all__ = ["CommandPublisher", "RoverCommand", "decode_command", "encode_command"]
