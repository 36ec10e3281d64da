"""Tests for the pprof tool handlers with a mocked runner."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from pprof_mcp.pprof.errors import PprofExecutionError
from pprof_mcp.pprof.models import FunctionInfo, ProfileType
from pprof_mcp.pprof.parser import TRUNCATION_LIMIT, TRUNCATION_MARKER, parse_output
from pprof_mcp.protocol.errors import ToolArgumentError
from pprof_mcp.server.handlers import ProfileToolHandlers


def _runner(sample_report: str = "") -> MagicMock:
    runner = MagicMock()
    runner.parse_profile = AsyncMock(return_value=parse_output(sample_report))
    runner.top_functions = AsyncMock(return_value=[])
    runner.generate_svg = AsyncMock(return_value="<svg/>")
    runner.compare_profiles = AsyncMock(return_value="diff output")
    runner.list_callers = AsyncMock(return_value="list output")
    return runner


class TestParseProfile:
    async def test_json_output(self, sample_report: str) -> None:
        runner = _runner(sample_report)
        result = await ProfileToolHandlers(runner).parse_profile({"filePath": "cpu.pprof"})

        runner.parse_profile.assert_awaited_once_with("cpu.pprof", ProfileType.AUTO)
        payload = json.loads(result.text)
        assert payload["summary"]["profileType"] == "cpu"
        assert len(payload["topFunctions"]) == 6
        assert not result.is_error

    async def test_text_output_returns_raw_report(self, sample_report: str) -> None:
        handlers = ProfileToolHandlers(_runner(sample_report))
        result = await handlers.parse_profile({"filePath": "cpu.pprof", "outputFormat": "text"})
        assert result.text == sample_report

    async def test_missing_file_path(self) -> None:
        runner = _runner()
        with pytest.raises(ToolArgumentError, match="filePath is required"):
            await ProfileToolHandlers(runner).parse_profile({})
        runner.parse_profile.assert_not_awaited()

    async def test_runner_failure_propagates(self) -> None:
        runner = _runner()
        runner.parse_profile.side_effect = PprofExecutionError("exit status 1", exit_code=1)
        with pytest.raises(PprofExecutionError):
            await ProfileToolHandlers(runner).parse_profile({"filePath": "cpu.pprof"})


class TestTopFunctions:
    async def test_results(self) -> None:
        runner = _runner()
        runner.top_functions.return_value = [
            FunctionInfo(name="main.a", samples=100, percentage=1.0, flat=1.0, cum=2.0),
        ]
        result = await ProfileToolHandlers(runner).top_functions({"filePath": "cpu.pprof", "topN": 5})

        runner.top_functions.assert_awaited_once_with("cpu.pprof", 5)
        payload = json.loads(result.text)
        assert payload["filePath"] == "cpu.pprof"
        assert payload["topN"] == 5
        assert payload["results"] == [
            {"name": "main.a", "samples": 100, "percentage": 1.0, "flat": 1.0, "cum": 2.0},
        ]

    async def test_default_top_n(self) -> None:
        runner = _runner()
        await ProfileToolHandlers(runner).top_functions({"filePath": "cpu.pprof"})
        runner.top_functions.assert_awaited_once_with("cpu.pprof", 10)


class TestGenerateSvg:
    async def test_metadata(self) -> None:
        runner = _runner()
        result = await ProfileToolHandlers(runner).generate_svg({"filePath": "cpu.pprof", "ignore": "runtime"})

        runner.generate_svg.assert_awaited_once_with("cpu.pprof", "", "runtime")
        assert result.text == "<svg/>"
        assert result.metadata == {"filePath": "cpu.pprof", "format": "svg"}

    async def test_large_svg_truncated(self) -> None:
        runner = _runner()
        runner.generate_svg.return_value = "<" * (TRUNCATION_LIMIT * 2)
        result = await ProfileToolHandlers(runner).generate_svg({"filePath": "cpu.pprof"})
        assert len(result.text) == TRUNCATION_LIMIT + len(TRUNCATION_MARKER)
        assert result.text.endswith(TRUNCATION_MARKER)


class TestAnalyzePerformance:
    async def test_report(self, sample_report: str) -> None:
        handlers = ProfileToolHandlers(_runner(sample_report))
        result = await handlers.analyze_performance({"filePath": "cpu.pprof"})

        payload = json.loads(result.text)
        assert payload["summary"]["profileType"] == "cpu"
        assert len(payload["hotspots"]) == 4
        assert payload["bottlenecks"][0] == {
            "function": "sync.(*Mutex).Lock",
            "type": "Concurrency",
            "impact": "High",
            "percentage": 25.0,
            "suggestion": "Consider reducing lock contention or using lock-free data structures",
        }

    async def test_threshold_100_has_no_hotspots(self, sample_report: str) -> None:
        handlers = ProfileToolHandlers(_runner(sample_report))
        result = await handlers.analyze_performance({"filePath": "cpu.pprof", "threshold": 100})
        assert json.loads(result.text)["hotspots"] == []

    async def test_bad_focus(self) -> None:
        with pytest.raises(ToolArgumentError, match="focus"):
            await ProfileToolHandlers(_runner()).analyze_performance({"filePath": "p", "focus": "memory"})


class TestCompareAndList:
    async def test_compare_profiles(self) -> None:
        runner = _runner()
        result = await ProfileToolHandlers(runner).compare_profiles({"baseFile": "a", "compareFile": "b"})

        runner.compare_profiles.assert_awaited_once_with("a", "b")
        assert json.loads(result.text) == {"baseFile": "a", "compareFile": "b", "diff": "diff output"}

    async def test_list_callers(self) -> None:
        runner = _runner()
        result = await ProfileToolHandlers(runner).list_callers({"filePath": "p", "functionName": "main.run"})

        runner.list_callers.assert_awaited_once_with("p", "main.run")
        assert json.loads(result.text) == {
            "function": "main.run",
            "filePath": "p",
            "maxDepth": 10,
            "callers": "list output",
        }

    async def test_list_callers_requires_function(self) -> None:
        with pytest.raises(ToolArgumentError, match="functionName is required"):
            await ProfileToolHandlers(_runner()).list_callers({"filePath": "p"})
