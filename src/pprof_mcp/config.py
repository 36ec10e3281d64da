"""Server configuration and its YAML loader."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from pprof_mcp import __version__


class ConfigError(Exception):
    """Raised when a configuration file fails parsing or validation."""


class ServerConfig(BaseModel):
    """Process-level settings for ``pprof-mcp serve``."""

    name: str = Field(default="pprof-mcp", description="Server name reported in serverInfo.")
    version: str = Field(default=__version__, description="Server version reported in serverInfo.")
    transport: Literal["stdio", "http"] = Field(default="stdio", description="Transport to serve on.")
    host: str = Field(default="0.0.0.0", description="HTTP bind address.")
    port: int = Field(default=8080, ge=1, le=65535, description="HTTP port.")
    debug: bool = Field(default=False, description="Enable debug logging.")
    go_binary: str | None = Field(default=None, description="Path or name of the go executable.")
    pprof_timeout: float | None = Field(
        default=120.0,
        gt=0,
        description="Seconds a pprof run may take before it is killed (None disables).",
    )
    shutdown_timeout: float = Field(
        default=10.0,
        ge=0,
        description="Seconds the HTTP server waits for live connections on shutdown.",
    )
    telemetry: bool = Field(default=False, description="Export OpenTelemetry spans.")
    otlp_endpoint: str | None = Field(default=None, description="OTLP/gRPC endpoint for spans.")


class ConfigLoader:
    """Load and validate a YAML file into a :class:`ServerConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self, **overrides: Any) -> ServerConfig:
        """Read YAML, interpolate env vars, apply *overrides* and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  Overrides whose
        value is ``None`` are ignored.

        Raises:
            ConfigError: On read errors, YAML parse errors or validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config YAML must be a mapping")

        return build_config(data, **overrides)


def build_config(data: dict[str, Any] | None = None, **overrides: Any) -> ServerConfig:
    """Validate *data* merged with the non-``None`` *overrides*."""
    merged = dict(data or {})
    merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return ServerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
