"""MCPTransport protocol — the common interface for server transports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import asyncio

    from pprof_mcp.server.engine import ProtocolEngine


@runtime_checkable
class MCPTransport(Protocol):
    """Carries JSON-RPC messages between clients and a :class:`ProtocolEngine`.

    ``run()`` owns the read/decode/dispatch/encode/write loop and returns
    once the peer goes away or *shutdown* is set.
    """

    async def connect(self) -> None: ...
    async def run(self, engine: ProtocolEngine, shutdown: asyncio.Event | None = None) -> None: ...
    async def close(self) -> None: ...
