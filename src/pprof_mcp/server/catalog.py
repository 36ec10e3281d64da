"""Default tool and resource catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pprof_mcp.pprof.models import AnalysisFocus, ProfileType
from pprof_mcp.protocol.models import Resource, Tool
from pprof_mcp.server.handlers import ProfileToolHandlers

if TYPE_CHECKING:
    from pprof_mcp.pprof.runner import PprofRunner
    from pprof_mcp.server.registry import ToolRegistry

_FILE_PATH = {"type": "string", "description": "Path to the pprof file"}
_PROFILE_TYPES = [t.value for t in ProfileType]

PARSE_PROFILE = Tool(
    name="parse_profile",
    description="Parse a pprof file and return structured summary",
    input_schema={
        "type": "object",
        "properties": {
            "filePath": _FILE_PATH,
            "profileType": {
                "type": "string",
                "default": "auto",
                "enum": _PROFILE_TYPES,
                "description": "Type of profile",
            },
            "outputFormat": {
                "type": "string",
                "default": "json",
                "enum": ["json", "text"],
                "description": "Output format",
            },
        },
        "required": ["filePath"],
    },
)

TOP_FUNCTIONS = Tool(
    name="top_functions",
    description="Get top N hot functions",
    input_schema={
        "type": "object",
        "properties": {
            "filePath": _FILE_PATH,
            "topN": {
                "type": "number",
                "default": 10,
                "minimum": 1,
                "maximum": 100,
                "description": "Number of top functions to return",
            },
        },
        "required": ["filePath"],
    },
)

GENERATE_SVG = Tool(
    name="generate_svg",
    description="Generate SVG flamegraph",
    input_schema={
        "type": "object",
        "properties": {
            "filePath": _FILE_PATH,
            "focus": {
                "type": "string",
                "default": "",
                "description": "Focus on a specific function or pattern",
            },
            "ignore": {
                "type": "string",
                "default": "",
                "description": "Ignore functions matching pattern",
            },
        },
        "required": ["filePath"],
    },
)

ANALYZE_PERFORMANCE = Tool(
    name="analyze_performance",
    description="Deep performance analysis",
    input_schema={
        "type": "object",
        "properties": {
            "filePath": _FILE_PATH,
            "focus": {
                "type": "string",
                "default": "all",
                "enum": [f.value for f in AnalysisFocus],
                "description": "Analysis focus area",
            },
            "threshold": {
                "type": "number",
                "default": 5,
                "minimum": 0,
                "description": "Percentage threshold",
            },
            "profileType": {
                "type": "string",
                "default": "auto",
                "enum": _PROFILE_TYPES,
                "description": "Type of profile",
            },
        },
        "required": ["filePath"],
    },
)

COMPARE_PROFILES = Tool(
    name="compare_profiles",
    description="Compare two pprof files",
    input_schema={
        "type": "object",
        "properties": {
            "baseFile": {"type": "string", "description": "Base profile file path"},
            "compareFile": {"type": "string", "description": "Comparison profile file path"},
        },
        "required": ["baseFile", "compareFile"],
    },
)

LIST_CALLERS = Tool(
    name="list_callers",
    description="List callers of a function",
    input_schema={
        "type": "object",
        "properties": {
            "filePath": _FILE_PATH,
            "functionName": {
                "type": "string",
                "description": "Function name to list callers for",
            },
            "maxDepth": {
                "type": "number",
                "default": 10,
                "minimum": 1,
                "description": "Maximum depth",
            },
        },
        "required": ["filePath", "functionName"],
    },
)

DEFAULT_TOOLS: tuple[Tool, ...] = (
    PARSE_PROFILE,
    TOP_FUNCTIONS,
    GENERATE_SVG,
    ANALYZE_PERFORMANCE,
    COMPARE_PROFILES,
    LIST_CALLERS,
)

DEFAULT_RESOURCES: tuple[Resource, ...] = (
    Resource(
        uri="pprof://summary/{filePath}",
        name="Profile Summary",
        description="Get summary of a pprof file",
        mime_type="application/json",
    ),
    Resource(
        uri="pprof://text/{filePath}",
        name="Profile Text Output",
        description="Get text format output from pprof",
        mime_type="text/plain",
    ),
    Resource(
        uri="pprof://svg/{filePath}",
        name="Profile SVG",
        description="Get SVG flamegraph from pprof",
        mime_type="image/svg+xml",
    ),
)


def register_default_tools(registry: ToolRegistry, runner: PprofRunner) -> None:
    """Bind every default tool to its handler and add the static resources."""
    handlers = ProfileToolHandlers(runner)
    bindings = {
        PARSE_PROFILE.name: handlers.parse_profile,
        TOP_FUNCTIONS.name: handlers.top_functions,
        GENERATE_SVG.name: handlers.generate_svg,
        ANALYZE_PERFORMANCE.name: handlers.analyze_performance,
        COMPARE_PROFILES.name: handlers.compare_profiles,
        LIST_CALLERS.name: handlers.list_callers,
    }
    for tool in DEFAULT_TOOLS:
        registry.register(tool, bindings[tool.name])
    for resource in DEFAULT_RESOURCES:
        registry.register_resource(resource)
