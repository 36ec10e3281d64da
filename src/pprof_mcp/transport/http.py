"""HTTPTransport — JSON-RPC over HTTP request/response.

``POST /mcp`` carries exactly one JSON-RPC message per request and returns
exactly one JSON response (``202`` with no body for notifications).
``GET|POST /health`` is an unauthenticated liveness probe.

Requests on different connections are dispatched concurrently.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

if TYPE_CHECKING:
    from pprof_mcp.server.engine import ProtocolEngine

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"
HEALTH_PATH = "/health"
JSON_MEDIA_TYPE = "application/json"


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server stopped through the shutdown event rather than signals."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


def create_app(engine: ProtocolEngine, *, server_name: str = "pprof-mcp") -> FastAPI:
    """Build the ASGI app serving *engine*."""
    app = FastAPI(title=server_name, docs_url=None, redoc_url=None, openapi_url=None)

    @app.post(MCP_PATH)
    async def handle_mcp(request: Request) -> Response:
        content_type = request.headers.get("content-type", "")
        if content_type.split(";", 1)[0].strip().lower() != JSON_MEDIA_TYPE:
            return PlainTextResponse("Unsupported content type", status_code=400)

        body = await request.body()
        try:
            payload: Any = json.loads(body)
        except ValueError as exc:
            return PlainTextResponse(f"Invalid JSON: {exc}", status_code=400)

        response = await engine.handle_message(payload)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response.to_wire())

    @app.api_route(HEALTH_PATH, methods=["GET", "POST"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "server": server_name}

    return app


class HTTPTransport:
    """Serves a :class:`ProtocolEngine` with uvicorn.

    Usage::

        transport = HTTPTransport(host="127.0.0.1", port=8080)
        await transport.connect()
        await transport.run(engine, shutdown_event)
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 8080,
        *,
        server_name: str = "pprof-mcp",
        shutdown_timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._server_name = server_name
        self._shutdown_timeout = shutdown_timeout
        self._server: uvicorn.Server | None = None

    @property
    def address(self) -> str:
        return f"{self._host}:{self._port}"

    async def connect(self) -> None:
        """Nothing to open until ``run()`` binds the listener."""

    async def run(self, engine: ProtocolEngine, shutdown: asyncio.Event | None = None) -> None:
        """Serve until *shutdown* is set, then drain live connections."""
        config = uvicorn.Config(
            create_app(engine, server_name=self._server_name),
            host=self._host,
            port=self._port,
            lifespan="off",
            log_config=None,
            timeout_graceful_shutdown=self._shutdown_timeout,
        )
        self._server = _EmbeddedServer(config)
        logger.info("HTTP server listening on %s", self.address)

        serve_task = asyncio.create_task(self._server.serve())
        if shutdown is None:
            await serve_task
            return

        stop_task = asyncio.create_task(shutdown.wait())
        done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        if serve_task in done:
            stop_task.cancel()
            serve_task.result()
            return

        logger.info("Shutting down HTTP server...")
        self._server.should_exit = True
        await serve_task

    async def close(self) -> None:
        """Ask a running server to stop."""
        if self._server is not None:
            self._server.should_exit = True
            self._server = None
