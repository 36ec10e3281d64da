"""pprof subsystem — subprocess adapter, report parser and analysis rules."""

from pprof_mcp.pprof.analysis import analyze
from pprof_mcp.pprof.errors import (
    PprofError,
    PprofExecutionError,
    PprofNotFoundError,
    PprofTimeoutError,
)
from pprof_mcp.pprof.models import (
    AnalysisFocus,
    AnalysisReport,
    FunctionInfo,
    PprofOutput,
    ProfileSummary,
    ProfileType,
)
from pprof_mcp.pprof.parser import parse_functions, parse_output, parse_summary, truncate_output
from pprof_mcp.pprof.runner import PprofOperation, PprofRunner

__all__ = [
    "AnalysisFocus",
    "AnalysisReport",
    "FunctionInfo",
    "PprofError",
    "PprofExecutionError",
    "PprofNotFoundError",
    "PprofOperation",
    "PprofOutput",
    "PprofRunner",
    "PprofTimeoutError",
    "ProfileSummary",
    "ProfileType",
    "analyze",
    "parse_functions",
    "parse_output",
    "parse_summary",
    "truncate_output",
]
