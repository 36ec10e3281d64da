"""Typed argument models for each tool.

Handlers never poke at the raw ``arguments`` mapping: they call
:func:`validate_arguments`, which either returns a fully-defaulted model or
raises :class:`ToolArgumentError` naming the offending field.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pprof_mcp.pprof.models import AnalysisFocus, ProfileType
from pprof_mcp.protocol.errors import ToolArgumentError

ArgsT = TypeVar("ArgsT", bound="ToolArguments")

_REQUIRED_ERROR_TYPES = frozenset({"missing", "string_too_short"})


class ToolArguments(BaseModel):
    """Base for per-tool argument models (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ParseProfileArgs(ToolArguments):
    file_path: str = Field(alias="filePath", min_length=1, strict=True)
    profile_type: ProfileType = Field(default=ProfileType.AUTO, alias="profileType")
    output_format: Literal["json", "text"] = Field(default="json", alias="outputFormat")


class TopFunctionsArgs(ToolArguments):
    file_path: str = Field(alias="filePath", min_length=1, strict=True)
    top_n: int = Field(default=10, alias="topN", ge=1, le=100)


class GenerateSvgArgs(ToolArguments):
    file_path: str = Field(alias="filePath", min_length=1, strict=True)
    focus: str = Field(default="", strict=True)
    ignore: str = Field(default="", strict=True)


class AnalyzePerformanceArgs(ToolArguments):
    file_path: str = Field(alias="filePath", min_length=1, strict=True)
    focus: AnalysisFocus = AnalysisFocus.ALL
    threshold: float = Field(default=5.0, ge=0)
    profile_type: ProfileType = Field(default=ProfileType.AUTO, alias="profileType")


class CompareProfilesArgs(ToolArguments):
    base_file: str = Field(alias="baseFile", min_length=1, strict=True)
    compare_file: str = Field(alias="compareFile", min_length=1, strict=True)


class ListCallersArgs(ToolArguments):
    file_path: str = Field(alias="filePath", min_length=1, strict=True)
    function_name: str = Field(alias="functionName", min_length=1, strict=True)
    max_depth: int = Field(default=10, alias="maxDepth", ge=1)


def validate_arguments(tool_name: str, model: type[ArgsT], arguments: dict[str, Any] | None) -> ArgsT:
    """Validate raw tool *arguments* against *model*."""
    try:
        return model.model_validate(arguments or {})
    except ValidationError as exc:
        raise ToolArgumentError(tool_name, describe_validation_error(exc)) from exc


def describe_validation_error(exc: ValidationError) -> str:
    """Render a pydantic error as ``"filePath is required"``-style text."""
    problems: list[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "arguments"
        if error["type"] in _REQUIRED_ERROR_TYPES:
            problems.append(f"{field} is required")
        else:
            problems.append(f"{field}: {error['msg']}")
    return "; ".join(problems)
