"""MCP models — JSON-RPC 2.0 messages, tool and resource definitions.

Implements the message format used by the Model Context Protocol for the
server side of the handshake (``initialize``), tool discovery
(``tools/list``), tool execution (``tools/call``) and resource discovery
(``resources/list``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2024-11-05"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    A request without an ``id`` (or with ``id: null``) is a notification and
    never receives a response.
    """

    jsonrpc: str = JSONRPC_VERSION
    method: str
    id: int | str | None = None
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = JSONRPC_VERSION
    id: int | str | None = None
    result: Any = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: int | str | None, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: int | str | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the wire shape: ``result`` xor ``error``, ``id`` always."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        return payload


# ---------------------------------------------------------------------------
# Handshake payloads
# ---------------------------------------------------------------------------


class ImplementationInfo(BaseModel):
    """Name and version of a client or server implementation."""

    name: str = ""
    version: str = ""


class InitializeParams(BaseModel):
    """Parameters of the ``initialize`` request."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(default="", alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: ImplementationInfo = Field(default_factory=ImplementationInfo, alias="clientInfo")
    metadata: dict[str, Any] | None = None


class ToolsCapability(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    list_changed: bool = Field(default=False, alias="listChanged")


class ResourcesCapability(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subscribe: bool = False
    list_changed: bool = Field(default=False, alias="listChanged")


class ServerCapabilities(BaseModel):
    """Capability flags advertised in the ``initialize`` result."""

    tools: ToolsCapability = Field(default_factory=ToolsCapability)
    resources: ResourcesCapability = Field(default_factory=ResourcesCapability)


class InitializeResult(BaseModel):
    """Result of the ``initialize`` request."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(default=MCP_PROTOCOL_VERSION, alias="protocolVersion")
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)
    server_info: ImplementationInfo = Field(alias="serverInfo")


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class Tool(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ToolCallRequest(BaseModel):
    """Parameters of a ``tools/call`` request."""

    name: str
    arguments: dict[str, Any] | None = None


class ContentBlock(BaseModel):
    """A single typed block of tool output."""

    model_config = ConfigDict(frozen=True)

    type: str = "text"
    text: str = ""


class ToolCallResult(BaseModel):
    """The result of a tool invocation."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    content: list[ContentBlock] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_text(cls, text: str, metadata: dict[str, Any] | None = None) -> ToolCallResult:
        """Create a result with a single text block."""
        return cls(content=[ContentBlock(text=text)], metadata=metadata)

    @classmethod
    def from_error(cls, message: str) -> ToolCallResult:
        """Create an ``isError`` result carrying a human-readable message."""
        return cls(content=[ContentBlock(text=f"Error: {message}")], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content if block.type == "text")

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": [block.model_dump() for block in self.content]}
        if self.is_error:
            payload["isError"] = True
        if self.metadata:
            payload["metadata"] = self.metadata
        return payload


class Resource(BaseModel):
    """A URI-addressable, read-only artifact advertised by ``resources/list``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    uri: str
    name: str
    description: str = ""
    mime_type: str = Field(default="", alias="mimeType")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
