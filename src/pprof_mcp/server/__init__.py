"""Server side of the protocol: registry, tool handlers and dispatch engine."""

from pprof_mcp.server.catalog import DEFAULT_RESOURCES, DEFAULT_TOOLS, register_default_tools
from pprof_mcp.server.engine import ProtocolEngine, SessionState
from pprof_mcp.server.handlers import ProfileToolHandlers
from pprof_mcp.server.registry import ReadWriteLock, ToolHandler, ToolRegistry

__all__ = [
    "DEFAULT_RESOURCES",
    "DEFAULT_TOOLS",
    "ProfileToolHandlers",
    "ProtocolEngine",
    "ReadWriteLock",
    "SessionState",
    "ToolHandler",
    "ToolRegistry",
    "register_default_tools",
]
