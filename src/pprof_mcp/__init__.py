"""pprof-mcp — go tool pprof exposed to agents through MCP tool calls."""

from __future__ import annotations

__version__ = "0.1.0"
