"""pprof-mcp CLI entrypoint."""

from __future__ import annotations

import click

from pprof_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="pprof-mcp")
def main() -> None:
    """pprof-mcp — go tool pprof for agents over MCP."""


# Register subcommands
from pprof_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
