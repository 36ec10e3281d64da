"""``pprof-mcp serve`` — run the MCP server on stdio or HTTP."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.markup import escape

from pprof_mcp.cli_commands._output import err_console

if TYPE_CHECKING:
    from pprof_mcp.config import ServerConfig
    from pprof_mcp.server.engine import ProtocolEngine
    from pprof_mcp.transport.base import MCPTransport

logger = logging.getLogger(__name__)


def build_engine(config: ServerConfig) -> ProtocolEngine:
    """Wire runner, registry and engine for *config*."""
    from pprof_mcp.pprof.runner import PprofRunner
    from pprof_mcp.protocol.models import ImplementationInfo
    from pprof_mcp.server.catalog import register_default_tools
    from pprof_mcp.server.engine import ProtocolEngine
    from pprof_mcp.server.registry import ToolRegistry

    runner = PprofRunner(config.go_binary, timeout=config.pprof_timeout)
    if runner.tool_path is None:
        logger.warning("go executable not found; tool calls will fail until it is installed")

    registry = ToolRegistry()
    register_default_tools(registry, runner)
    return ProtocolEngine(
        registry,
        server_info=ImplementationInfo(name=config.name, version=config.version),
    )


async def run_server(transport: MCPTransport, engine: ProtocolEngine) -> None:
    """Run *transport* until EOF or SIGINT/SIGTERM."""
    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, _request_shutdown, shutdown, sig)

    await transport.connect()
    try:
        await transport.run(engine, shutdown)
    finally:
        await transport.close()
    logger.info("Server stopped")


def _request_shutdown(shutdown: asyncio.Event, sig: signal.Signals) -> None:
    logger.info("Received %s, shutting down", sig.name)
    shutdown.set()


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML configuration file.",
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Transport to serve on (default: stdio).",
)
@click.option("--host", default=None, help="HTTP bind address.")
@click.option("--port", type=int, default=None, help="HTTP port.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option("--telemetry", is_flag=True, help="Export OpenTelemetry spans.")
@click.option("--go-binary", default=None, help="Path to the go executable.")
@click.option("--timeout", type=float, default=None, help="Seconds a pprof run may take.")
def serve(
    config_path: str | None,
    transport: str | None,
    host: str | None,
    port: int | None,
    debug: bool,
    telemetry: bool,
    go_binary: str | None,
    timeout: float | None,
) -> None:
    """Serve the pprof tools over MCP."""
    from pprof_mcp.config import ConfigError, ConfigLoader, build_config
    from pprof_mcp.transport import create_transport
    from pprof_mcp.utils.logging import configure_logging

    overrides = {
        "transport": transport,
        "host": host,
        "port": port,
        "debug": debug or None,
        "telemetry": telemetry or None,
        "go_binary": go_binary,
        "pprof_timeout": timeout,
    }
    try:
        if config_path:
            config = ConfigLoader(Path(config_path)).load(**overrides)
        else:
            config = build_config(**overrides)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(1)

    configure_logging(debug=config.debug)
    if config.debug:
        logger.debug("Debug mode enabled")

    if config.telemetry:
        from pprof_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(
                service_name=config.name,
                export_to_console=config.otlp_endpoint is None,
                otlp_endpoint=config.otlp_endpoint,
            )
        except ImportError as exc:
            err_console.print(f"[red]Telemetry unavailable:[/red] {escape(str(exc))}")
            sys.exit(1)

    engine = build_engine(config)
    server_transport = create_transport(config)
    logger.info("Starting %s %s on %s", config.name, config.version, config.transport)

    try:
        asyncio.run(run_server(server_transport, engine))
    except Exception as exc:
        err_console.print(f"[red]Server error:[/red] {escape(str(exc))}")
        sys.exit(1)
