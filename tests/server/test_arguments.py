"""Tests for tool argument validation."""

from __future__ import annotations

import pytest

from pprof_mcp.pprof.models import AnalysisFocus, ProfileType
from pprof_mcp.protocol.errors import ToolArgumentError, ToolError
from pprof_mcp.server.arguments import (
    AnalyzePerformanceArgs,
    CompareProfilesArgs,
    ListCallersArgs,
    ParseProfileArgs,
    TopFunctionsArgs,
    validate_arguments,
)


class TestValidateArguments:
    def test_defaults_applied(self) -> None:
        args = validate_arguments("analyze_performance", AnalyzePerformanceArgs, {"filePath": "cpu.pprof"})
        assert args.file_path == "cpu.pprof"
        assert args.focus is AnalysisFocus.ALL
        assert args.threshold == 5.0
        assert args.profile_type is ProfileType.AUTO

    def test_none_arguments_treated_as_empty(self) -> None:
        with pytest.raises(ToolArgumentError, match="filePath is required"):
            validate_arguments("parse_profile", ParseProfileArgs, None)

    def test_empty_string_is_missing(self) -> None:
        with pytest.raises(ToolArgumentError, match="filePath is required"):
            validate_arguments("parse_profile", ParseProfileArgs, {"filePath": ""})

    def test_wrong_type_names_field(self) -> None:
        with pytest.raises(ToolArgumentError, match="filePath") as exc_info:
            validate_arguments("parse_profile", ParseProfileArgs, {"filePath": 42})
        assert isinstance(exc_info.value, ToolError)
        assert exc_info.value.tool_name == "parse_profile"

    def test_bad_enum(self) -> None:
        with pytest.raises(ToolArgumentError, match="outputFormat"):
            validate_arguments("parse_profile", ParseProfileArgs, {"filePath": "p", "outputFormat": "xml"})

    def test_top_n_bounds(self) -> None:
        assert validate_arguments("top_functions", TopFunctionsArgs, {"filePath": "p", "topN": 100}).top_n == 100
        with pytest.raises(ToolArgumentError, match="topN"):
            validate_arguments("top_functions", TopFunctionsArgs, {"filePath": "p", "topN": 101})
        with pytest.raises(ToolArgumentError, match="topN"):
            validate_arguments("top_functions", TopFunctionsArgs, {"filePath": "p", "topN": 0})

    def test_several_missing_fields(self) -> None:
        with pytest.raises(ToolArgumentError) as exc_info:
            validate_arguments("compare_profiles", CompareProfilesArgs, {})
        assert str(exc_info.value) == "baseFile is required; compareFile is required"

    def test_unknown_fields_ignored(self) -> None:
        args = validate_arguments(
            "list_callers",
            ListCallersArgs,
            {"filePath": "p", "functionName": "main.run", "verbose": True},
        )
        assert args.max_depth == 10
