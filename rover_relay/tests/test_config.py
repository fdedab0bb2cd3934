"""Configuration loading tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rover_relay.service.config import AppConfig, resolve_config
from rover_relay.service.main import apply_overrides, parse_args


def test_appconfig_default_matches_relay_constants() -> None:
    cfg = AppConfig.default()
    assert cfg.relay.max_intervals == 10
    assert cfg.relay.timeout_multiplier == 3.0
    assert cfg.relay.min_timeout_ms == 1000
    assert cfg.relay.max_timeout_ms == 10000
    assert cfg.relay.max_frame_bytes == 5 * 1024 * 1024
    assert cfg.relay.allowed_content_types == ["image/jpeg", "image/png"]
    assert cfg.web.port == 3000


def test_resolve_config_without_path_uses_defaults() -> None:
    cfg = resolve_config(None)
    assert isinstance(cfg, AppConfig)
    assert cfg.relay.upload_field == "frame"


def test_config_from_file(tmp_path: Path) -> None:
    target = tmp_path / "relay.json"
    target.write_text(
        json.dumps({"relay": {"max_intervals": 5, "max_timeout_ms": 4000}, "web": {"port": 8080}}),
        encoding="utf-8",
    )

    cfg = resolve_config(str(target))

    assert cfg.relay.max_intervals == 5
    assert cfg.relay.max_timeout_ms == 4000
    assert cfg.web.port == 8080


def test_invalid_timeout_bounds_rejected() -> None:
    with pytest.raises(ValueError):
        AppConfig.from_dict({"relay": {"min_timeout_ms": 5000, "max_timeout_ms": 1000}})


def test_missing_and_unsupported_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        AppConfig.from_file(tmp_path / "missing.json")
    yaml_file = tmp_path / "relay.yaml"
    yaml_file.write_text("relay: {}", encoding="utf-8")
    with pytest.raises(ValueError):
        AppConfig.from_file(yaml_file)


def test_cli_overrides_listen_address() -> None:
    args = parse_args(["--host", "127.0.0.1", "--port", "5050"])
    cfg = apply_overrides(AppConfig.default(), args.host, args.port)

    assert cfg.web.host == "127.0.0.1"
    assert cfg.web.port == 5050
    assert apply_overrides(cfg, None, None) is cfg
