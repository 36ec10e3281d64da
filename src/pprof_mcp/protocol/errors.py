"""Shared error types for the protocol layer.

Two families live here:

* :class:`ProtocolError` — a malformed envelope or an unknown method/tool.
  Converted into a JSON-RPC ``error`` object by the engine.
* :class:`ToolError` — the requested operation failed.  Converted into a
  successful response whose ``ToolCallResult`` carries ``isError``.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class InvalidRequestError(ProtocolError):
    """The payload is not a valid JSON-RPC request object."""

    code = ErrorCode.INVALID_REQUEST


class MethodNotFoundError(ProtocolError):
    """The requested method does not exist."""

    code = ErrorCode.METHOD_NOT_FOUND


class InvalidParamsError(ProtocolError):
    """The method parameters are malformed."""

    code = ErrorCode.INVALID_PARAMS


class InternalError(ProtocolError):
    """The server failed to handle an otherwise valid request."""

    code = ErrorCode.INTERNAL_ERROR


class ToolNotFoundError(MethodNotFoundError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"tool not found: {name}")


class ToolError(Exception):
    """Base error for tool-level failures reported through ``isError``."""


class ToolArgumentError(ToolError):
    """Tool arguments are missing or of the wrong shape."""

    def __init__(self, tool_name: str, detail: str) -> None:
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(detail)
