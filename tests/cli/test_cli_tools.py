"""Tests for ``pprof-mcp tools`` and the top-level group."""

from __future__ import annotations

from click.testing import CliRunner

from pprof_mcp import __version__
from pprof_mcp.cli import main
from pprof_mcp.cli_commands._output import _truncate


class TestToolsCommand:
    def test_table(self) -> None:
        result = CliRunner().invoke(main, ["tools"])
        assert result.exit_code == 0
        assert "pprof Tools" in result.output
        assert "parse_profile" in result.output
        assert "list_callers" in result.output

    def test_json(self) -> None:
        result = CliRunner().invoke(main, ["tools", "--json"])
        assert result.exit_code == 0
        assert '"inputSchema"' in result.output
        assert '"analyze_performance"' in result.output


class TestMainGroup:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert "serve" in result.output
        assert "tools" in result.output


class TestTruncate:
    def test_short(self) -> None:
        assert _truncate("abc") == "abc"

    def test_long(self) -> None:
        assert _truncate("x" * 100, max_len=10) == "xxxxxxx..."
