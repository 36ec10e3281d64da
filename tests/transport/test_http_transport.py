"""Tests for the HTTP transport."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from pprof_mcp.protocol.models import Tool, ToolCallResult
from pprof_mcp.server.engine import ProtocolEngine
from pprof_mcp.server.registry import ToolRegistry
from pprof_mcp.transport import MCPTransport
from pprof_mcp.transport.http import HTTPTransport, _EmbeddedServer, create_app


async def _slow(arguments: dict[str, Any]) -> ToolCallResult:
    await asyncio.sleep(0.05)
    return ToolCallResult.from_text(str(arguments.get("n")))


@pytest.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    registry = ToolRegistry()
    registry.register(Tool(name="slow"), _slow)
    app = create_app(ProtocolEngine(registry), server_name="test-server")
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c


class TestMcpEndpoint:
    async def test_request_response(self, client: httpx.AsyncClient) -> None:
        resp = await client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == 1
        assert body["result"]["tools"][0]["name"] == "slow"

    async def test_notification_gets_empty_202(self, client: httpx.AsyncClient) -> None:
        resp = await client.post("/mcp", json={"jsonrpc": "2.0", "method": "initialized"})
        assert resp.status_code == 202
        assert resp.content == b""

    async def test_wrong_content_type(self, client: httpx.AsyncClient) -> None:
        resp = await client.post("/mcp", content=b"{}", headers={"content-type": "text/plain"})
        assert resp.status_code == 400
        assert resp.text == "Unsupported content type"

    async def test_content_type_parameters_tolerated(self, client: httpx.AsyncClient) -> None:
        resp = await client.post(
            "/mcp",
            content=b'{"jsonrpc": "2.0", "id": 2, "method": "resources/list"}',
            headers={"content-type": "application/json; charset=utf-8"},
        )
        assert resp.status_code == 200
        assert resp.json()["result"] == {"resources": []}

    async def test_invalid_json(self, client: httpx.AsyncClient) -> None:
        resp = await client.post("/mcp", content=b"{nope", headers={"content-type": "application/json"})
        assert resp.status_code == 400
        assert resp.text.startswith("Invalid JSON: ")

    async def test_get_not_allowed(self, client: httpx.AsyncClient) -> None:
        resp = await client.get("/mcp")
        assert resp.status_code == 405

    async def test_protocol_error_is_200(self, client: httpx.AsyncClient) -> None:
        resp = await client.post("/mcp", json={"jsonrpc": "2.0", "id": 3, "method": "nope"})
        assert resp.status_code == 200
        assert resp.json()["error"]["code"] == -32601

    async def test_concurrent_calls(self, client: httpx.AsyncClient) -> None:
        requests = [
            client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "id": n, "method": "tools/call", "params": {"name": "slow", "arguments": {"n": n}}},
            )
            for n in range(5)
        ]
        responses = await asyncio.gather(*requests)
        assert [r.json()["result"]["content"][0]["text"] for r in responses] == ["0", "1", "2", "3", "4"]


class TestHealth:
    async def test_get(self, client: httpx.AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "server": "test-server"}

    async def test_post(self, client: httpx.AsyncClient) -> None:
        resp = await client.post("/health")
        assert resp.json()["status"] == "ok"


class TestHTTPTransport:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(HTTPTransport(), MCPTransport)

    def test_address(self) -> None:
        assert HTTPTransport(host="127.0.0.1", port=9000).address == "127.0.0.1:9000"

    async def test_shutdown_event_stops_server(self) -> None:
        async def fake_serve(self: _EmbeddedServer, sockets: Any = None) -> None:
            while not self.should_exit:
                await asyncio.sleep(0.01)

        shutdown = asyncio.Event()
        transport = HTTPTransport(host="127.0.0.1", port=0)
        with patch.object(_EmbeddedServer, "serve", fake_serve):
            await transport.connect()
            task = asyncio.create_task(transport.run(ProtocolEngine(ToolRegistry()), shutdown))
            await asyncio.sleep(0.05)
            assert not task.done()
            shutdown.set()
            await asyncio.wait_for(task, timeout=1)
        await transport.close()
