"""``pprof-mcp tools`` — show the tool catalog the server exposes."""

from __future__ import annotations

import click

from pprof_mcp.cli_commands._output import print_tools_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw tool schemas as JSON.")
def tools(as_json: bool) -> None:
    """List the tools served by ``pprof-mcp serve``."""
    from pprof_mcp.server.catalog import DEFAULT_TOOLS

    print_tools_table(DEFAULT_TOOLS, as_json=as_json)
