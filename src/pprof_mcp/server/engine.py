"""ProtocolEngine — dispatches JSON-RPC requests to MCP methods and tools.

The engine is transport-agnostic: transports hand it decoded JSON values and
write back whatever response it returns.  Notifications (no ``id``) are
processed but never answered.

Protocol errors (malformed envelope, unknown method or tool, bad params)
become JSON-RPC ``error`` objects.  A tool handler's own failure does not:
it is captured into a successful response whose result has ``isError`` set,
so agents can tell "your request was malformed" from "the operation failed".
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from pprof_mcp import __version__
from pprof_mcp.protocol.errors import (
    ErrorCode,
    InternalError,
    InvalidParamsError,
    MethodNotFoundError,
    ProtocolError,
    ToolError,
)
from pprof_mcp.protocol.models import (
    MCP_PROTOCOL_VERSION,
    ImplementationInfo,
    InitializeParams,
    InitializeResult,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolCallRequest,
    ToolCallResult,
)
from pprof_mcp.utils.telemetry import (
    ATTR_RPC_METHOD,
    ATTR_RPC_NOTIFICATION,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from pprof_mcp.server.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

MethodHandler = Callable[[Any], Awaitable[Any]]


class SessionState(str, Enum):
    """Lifecycle of a client session.

    The state is recorded, not enforced: methods are served in any state.
    """

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    TERMINATED = "terminated"


class ProtocolEngine:
    """Routes requests to the built-in MCP methods or to registered tools.

    Usage::

        registry = ToolRegistry()
        register_default_tools(registry, PprofRunner())
        engine = ProtocolEngine(registry)

        response = await engine.handle_message({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        server_info: ImplementationInfo | None = None,
    ) -> None:
        self._registry = registry
        self._server_info = server_info or ImplementationInfo(name="pprof-mcp", version=__version__)
        self._state = SessionState.UNINITIALIZED
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "initialized": self._initialized,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
            "shutdown": self._shutdown,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def server_info(self) -> ImplementationInfo:
        return self._server_info

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is not SessionState.UNINITIALIZED

    async def handle_message(self, payload: Any) -> JsonRpcResponse | None:
        """Validate a decoded JSON value as a request and dispatch it."""
        try:
            request = JsonRpcRequest.model_validate(payload)
        except ValidationError as exc:
            request_id = payload.get("id") if isinstance(payload, dict) else None
            if not isinstance(request_id, (int, str)) or isinstance(request_id, bool):
                logger.warning("Dropping invalid request without id: %s", exc.errors()[0]["msg"])
                return None
            return JsonRpcResponse.failure(request_id, ErrorCode.INVALID_REQUEST, "invalid request")
        return await self.dispatch(request)

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """Run *request* and build its response (``None`` for notifications)."""
        with _tracer.start_as_current_span("mcp.dispatch") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            span.set_attribute(ATTR_RPC_NOTIFICATION, request.is_notification)

            handler = self._methods.get(request.method)
            try:
                if handler is None:
                    raise MethodNotFoundError(f"unknown method: {request.method}")
                result = await handler(request.params)
            except ProtocolError as exc:
                logger.debug("%s failed: %s", request.method, exc.message)
                response = JsonRpcResponse.failure(request.id, exc.code, exc.message, exc.data)
            except Exception:
                logger.exception("Unhandled error in %s", request.method)
                response = JsonRpcResponse.failure(request.id, ErrorCode.INTERNAL_ERROR, "internal error")
            else:
                response = JsonRpcResponse.success(request.id, result)

        if request.is_notification:
            return None
        return response

    # ------------------------------------------------------------------
    # Built-in methods
    # ------------------------------------------------------------------

    async def _initialize(self, params: Any) -> dict[str, Any]:
        if params is not None and not isinstance(params, dict):
            raise InvalidParamsError("invalid params")
        try:
            init = InitializeParams.model_validate(params or {})
        except ValidationError as exc:
            raise InvalidParamsError("invalid params") from exc

        logger.info(
            "Initialize request from %s %s",
            init.client_info.name or "<unknown>",
            init.client_info.version,
        )
        if init.protocol_version and init.protocol_version != MCP_PROTOCOL_VERSION:
            logger.debug(
                "Client asked for protocol %s; answering %s",
                init.protocol_version,
                MCP_PROTOCOL_VERSION,
            )

        self._state = SessionState.INITIALIZED
        result = InitializeResult(server_info=self._server_info)
        return result.model_dump(by_alias=True)

    async def _initialized(self, params: Any) -> dict[str, Any]:
        logger.info("Initialized")
        return {}

    async def _list_tools(self, params: Any) -> dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in self._registry.list_tools()]}

    async def _call_tool(self, params: Any) -> dict[str, Any]:
        try:
            call = ToolCallRequest.model_validate(params)
        except ValidationError as exc:
            raise InvalidParamsError("invalid params") from exc

        handler = self._registry.resolve(call.name)

        with _tracer.start_as_current_span("mcp.tools.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, call.name)
            try:
                result = await handler(call.arguments or {})
            except ToolError as exc:
                logger.info("Tool %s failed: %s", call.name, exc)
                result = ToolCallResult.from_error(str(exc))
            except Exception as exc:
                logger.exception("Tool %s raised unexpectedly", call.name)
                result = ToolCallResult.from_error(str(exc) or type(exc).__name__)
            span.set_attribute(ATTR_TOOL_IS_ERROR, result.is_error)

        return result.to_wire()

    async def _list_resources(self, params: Any) -> dict[str, Any]:
        return {"resources": [res.to_wire() for res in self._registry.list_resources()]}

    async def _read_resource(self, params: Any) -> dict[str, Any]:
        raise InternalError("not implemented")

    async def _shutdown(self, params: Any) -> None:
        logger.info("Shutdown")
        self._state = SessionState.TERMINATED
        return None
