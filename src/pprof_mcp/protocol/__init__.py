"""Protocol layer — JSON-RPC 2.0 envelopes and MCP payloads."""

from pprof_mcp.protocol.errors import (
    ErrorCode,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ProtocolError,
    ToolArgumentError,
    ToolError,
    ToolNotFoundError,
)
from pprof_mcp.protocol.models import (
    MCP_PROTOCOL_VERSION,
    ContentBlock,
    InitializeParams,
    InitializeResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    Resource,
    Tool,
    ToolCallRequest,
    ToolCallResult,
)

__all__ = [
    "MCP_PROTOCOL_VERSION",
    "ContentBlock",
    "ErrorCode",
    "InitializeParams",
    "InitializeResult",
    "InternalError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ProtocolError",
    "Resource",
    "Tool",
    "ToolArgumentError",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolError",
    "ToolNotFoundError",
]
