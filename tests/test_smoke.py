"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import pprof_mcp

    assert pprof_mcp.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from pprof_mcp.cli import main

    assert callable(main)


def test_package_exports() -> None:
    from pprof_mcp.pprof import PprofRunner, analyze, parse_output
    from pprof_mcp.protocol import JsonRpcRequest, ToolCallResult
    from pprof_mcp.server import ProtocolEngine, ToolRegistry, register_default_tools
    from pprof_mcp.transport import HTTPTransport, StreamTransport, create_transport

    assert PprofRunner is not None
    assert analyze is not None
    assert parse_output is not None
    assert JsonRpcRequest is not None
    assert ToolCallResult is not None
    assert ProtocolEngine is not None
    assert ToolRegistry is not None
    assert register_default_tools is not None
    assert HTTPTransport is not None
    assert StreamTransport is not None
    assert create_transport is not None
