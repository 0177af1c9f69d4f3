"""Configuration models for the browser RPC server."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_port() -> int:
    return int(os.environ.get("PORT", "0"))


class BrowserConfig(BaseModel):
    """Settings applied when launching browsers."""

    headless: bool = True
    launch_args: list[str] = Field(default_factory=list)
    default_timeout: Optional[float] = Field(
        default=None,
        description="Default timeout (in seconds) for page operations.",
    )
    viewport_width: Optional[int] = None
    viewport_height: Optional[int] = None


class ServerConfig(BaseModel):
    """Settings for the RPC transport."""

    host: str = Field(default="localhost")
    port: int = Field(
        default_factory=_default_port,
        description="Listening port; 0 lets the operating system pick one.",
    )


class RpcConfig(BaseSettings):
    """Top-level configuration for the RPC server."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_RPC_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> RpcConfig:
    """Load configuration from an optional YAML file and overrides."""

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = RpcConfig(**settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return RpcConfig.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
