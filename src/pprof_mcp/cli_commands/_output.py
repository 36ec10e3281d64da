"""Shared CLI output formatters."""

from __future__ import annotations

import json
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from pprof_mcp.protocol.models import Tool  # noqa: TC001

console = Console()
# ``serve`` must keep stdout clean for the stdio transport.
err_console = Console(stderr=True)


def print_tools_table(tools: Sequence[Tool], *, as_json: bool = False) -> None:
    """Pretty-print the tool catalog as a table (or raw schemas)."""
    if as_json:
        console.print_json(json.dumps([tool.to_wire() for tool in tools]))
        return

    table = Table(title="pprof Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Required")
    table.add_column("Optional")

    for tool in tools:
        properties = tool.input_schema.get("properties", {})
        required = list(tool.input_schema.get("required", []))
        optional = [name for name in properties if name not in required]
        table.add_row(
            tool.name,
            _truncate(tool.description),
            ", ".join(required) or "-",
            ", ".join(optional) or "-",
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
