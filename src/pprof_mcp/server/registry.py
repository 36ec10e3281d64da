"""ToolRegistry — the catalog of invocable tools and static resources.

The registry is built once at startup and handed to the
:class:`~pprof_mcp.server.engine.ProtocolEngine`.  Lookups vastly outnumber
registrations, so access goes through a reader/writer lock.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any

from pprof_mcp.protocol.errors import ToolNotFoundError
from pprof_mcp.protocol.models import Resource, Tool, ToolCallResult

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolCallResult]]


class ReadWriteLock:
    """Many concurrent readers or one exclusive writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ToolRegistry:
    """Name-to-handler map plus the resource catalog.

    Usage::

        registry = ToolRegistry()
        registry.register(tool, handler)

        tools = registry.list_tools()
        handler = registry.resolve("top_functions")  # ToolNotFoundError if unknown
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._tools: dict[str, Tool] = {}
        self._handlers: dict[str, ToolHandler] = {}
        self._resources: dict[str, Resource] = {}

    def register(self, tool: Tool, handler: ToolHandler) -> None:
        """Add *tool*; an existing tool of the same name is replaced."""
        with self._lock.write():
            self._tools[tool.name] = tool
            self._handlers[tool.name] = handler
        logger.debug("Registered tool: %s", tool.name)

    def list_tools(self) -> list[Tool]:
        """Return a snapshot of all registered tools."""
        with self._lock.read():
            return list(self._tools.values())

    def resolve(self, name: str) -> ToolHandler:
        """Return the handler bound to *name*."""
        with self._lock.read():
            handler = self._handlers.get(name)
        if handler is None:
            raise ToolNotFoundError(name)
        return handler

    def register_resource(self, resource: Resource) -> None:
        with self._lock.write():
            self._resources[resource.uri] = resource

    def list_resources(self) -> list[Resource]:
        with self._lock.read():
            return list(self._resources.values())

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._tools

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._tools)
