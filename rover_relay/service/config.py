"""Application configuration models and loaders."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class RelaySettings(BaseModel):
    """Parameters for the camera frame relay."""

    model_config = ConfigDict(frozen=True)

    max_intervals: int = Field(
        default=10,
        ge=1,
        description="Number of recent inter-arrival intervals kept for averaging",
    )
    timeout_multiplier: float = Field(
        default=3.0,
        gt=0.0,
        description="Staleness timeout as a multiple of the average interval",
    )
    min_timeout_ms: float = Field(default=1000.0, gt=0.0)
    max_timeout_ms: float = Field(default=10000.0, gt=0.0)
    max_frame_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1,
        description="Largest accepted frame payload",
    )
    allowed_content_types: List[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png"]
    )
    upload_field: str = Field(
        default="frame", description="Multipart field carrying the frame"
    )
    multipart_overhead_bytes: int = Field(
        default=64 * 1024,
        ge=0,
        description="Allowance for multipart framing on top of max_frame_bytes",
    )

    @field_validator("allowed_content_types")
    @classmethod
    def _validate_content_types(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one content type must be allowed")
        return [item.strip().lower() for item in value]

    @model_validator(mode="after")
    def _validate_timeout_bounds(self) -> "RelaySettings":
        if self.min_timeout_ms > self.max_timeout_ms:
            raise ValueError("min_timeout_ms must not exceed max_timeout_ms")
        return self

    @property
    def max_request_bytes(self) -> int:
        return self.max_frame_bytes + self.multipart_overhead_bytes


class WebSettings(BaseModel):
    """HTTP server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: str = Field(default="*")


class AppConfig(BaseModel):
    """Top-level configuration for the application."""

    model_config = ConfigDict(frozen=True)

    relay: RelaySettings = Field(default_factory=RelaySettings)
    web: WebSettings = Field(default_factory=WebSettings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        try:
            return cls(**data)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def from_file(cls, path: str | Path) -> "AppConfig":
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {cfg_path}")
        if cfg_path.suffix.lower() != ".json":
            raise ValueError("Unsupported configuration file format; use JSON")
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "AppConfig":
        return cls()


def resolve_config(path: Optional[str]) -> AppConfig:
    """Load configuration from disk, falling back to defaults when missing."""

    if path:
        return AppConfig.from_file(path)
    return AppConfig.default()


__all__ = [
    "AppConfig",
    "RelaySettings",
    "WebSettings",
    "resolve_config",
]
