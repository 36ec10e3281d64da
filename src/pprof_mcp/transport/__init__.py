"""Transports — stdio stream and HTTP bindings for the protocol engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pprof_mcp.transport.base import MCPTransport
from pprof_mcp.transport.http import HTTPTransport, create_app
from pprof_mcp.transport.stream import JsonStreamDecoder, StreamTransport

if TYPE_CHECKING:
    from pprof_mcp.config import ServerConfig


def create_transport(config: ServerConfig) -> MCPTransport:
    """Build the transport named by ``config.transport``."""
    if config.transport == "stdio":
        return StreamTransport()
    if config.transport == "http":
        return HTTPTransport(
            host=config.host,
            port=config.port,
            server_name=config.name,
            shutdown_timeout=config.shutdown_timeout,
        )
    msg = f"Unknown transport: {config.transport}"
    raise ValueError(msg)


__all__ = [
    "HTTPTransport",
    "JsonStreamDecoder",
    "MCPTransport",
    "StreamTransport",
    "create_app",
    "create_transport",
]
