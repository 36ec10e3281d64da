"""Tool handlers — one coroutine per catalog entry.

Every handler validates its raw arguments into a typed model, drives the
:class:`~pprof_mcp.pprof.runner.PprofRunner` and renders a
:class:`ToolCallResult`.  Failures propagate as :class:`ToolError`; the engine
turns them into ``isError`` results.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pprof_mcp.pprof.analysis import analyze
from pprof_mcp.pprof.parser import truncate_output
from pprof_mcp.protocol.models import ToolCallResult
from pprof_mcp.server.arguments import (
    AnalyzePerformanceArgs,
    CompareProfilesArgs,
    GenerateSvgArgs,
    ListCallersArgs,
    ParseProfileArgs,
    TopFunctionsArgs,
    validate_arguments,
)

if TYPE_CHECKING:
    from pprof_mcp.pprof.runner import PprofRunner


def _json_result(payload: Any, metadata: dict[str, Any] | None = None) -> ToolCallResult:
    return ToolCallResult.from_text(json.dumps(payload, indent=2), metadata=metadata)


class ProfileToolHandlers:
    """Binds the pprof tools to a runner."""

    def __init__(self, runner: PprofRunner) -> None:
        self._runner = runner

    async def parse_profile(self, arguments: dict[str, Any]) -> ToolCallResult:
        args = validate_arguments("parse_profile", ParseProfileArgs, arguments)
        output = await self._runner.parse_profile(args.file_path, args.profile_type)
        if args.output_format == "text":
            return ToolCallResult.from_text(output.raw_text)
        return _json_result(output.to_payload())

    async def top_functions(self, arguments: dict[str, Any]) -> ToolCallResult:
        args = validate_arguments("top_functions", TopFunctionsArgs, arguments)
        functions = await self._runner.top_functions(args.file_path, args.top_n)
        return _json_result({
            "filePath": args.file_path,
            "topN": args.top_n,
            "results": [fn.model_dump(mode="json", exclude_none=True) for fn in functions],
        })

    async def generate_svg(self, arguments: dict[str, Any]) -> ToolCallResult:
        args = validate_arguments("generate_svg", GenerateSvgArgs, arguments)
        svg = await self._runner.generate_svg(args.file_path, args.focus, args.ignore)
        return ToolCallResult.from_text(
            truncate_output(svg),
            metadata={"filePath": args.file_path, "format": "svg"},
        )

    async def analyze_performance(self, arguments: dict[str, Any]) -> ToolCallResult:
        args = validate_arguments("analyze_performance", AnalyzePerformanceArgs, arguments)
        output = await self._runner.parse_profile(args.file_path, args.profile_type)
        report = analyze(
            output.top_functions,
            output.summary.profile_type,
            focus=args.focus,
            threshold=args.threshold,
            summary=output.summary,
        )
        return _json_result(report.to_payload())

    async def compare_profiles(self, arguments: dict[str, Any]) -> ToolCallResult:
        args = validate_arguments("compare_profiles", CompareProfilesArgs, arguments)
        diff = await self._runner.compare_profiles(args.base_file, args.compare_file)
        return _json_result({
            "baseFile": args.base_file,
            "compareFile": args.compare_file,
            "diff": diff,
        })

    async def list_callers(self, arguments: dict[str, Any]) -> ToolCallResult:
        args = validate_arguments("list_callers", ListCallersArgs, arguments)
        output = await self._runner.list_callers(args.file_path, args.function_name)
        return _json_result({
            "function": args.function_name,
            "filePath": args.file_path,
            "maxDepth": args.max_depth,
            "callers": output,
        })
