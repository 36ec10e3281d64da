"""Rule-based analysis of parsed pprof functions.

Everything here is a pure function of its inputs: no state, no I/O.
"""

from __future__ import annotations

from collections.abc import Sequence

from pprof_mcp.pprof.models import (
    AnalysisFocus,
    AnalysisReport,
    Bottleneck,
    BottleneckCategory,
    FunctionInfo,
    Hotspot,
    ImpactLevel,
    ProfileSummary,
    ProfileType,
    Suggestion,
)

DEFAULT_THRESHOLD = 5.0

# Ordered: a function matching several categories yields entries in this order.
BOTTLENECK_RULES: tuple[tuple[BottleneckCategory, tuple[str, ...], str], ...] = (
    (
        BottleneckCategory.IO,
        ("syscall", "net.", "File.", "database"),
        "Consider using caching or batching to reduce I/O operations",
    ),
    (
        BottleneckCategory.MEMORY,
        ("malloc", "gc", "new"),
        "Consider object pooling or reducing allocation frequency",
    ),
    (
        BottleneckCategory.CONCURRENCY,
        ("Lock", "Mutex", "sync."),
        "Consider reducing lock contention or using lock-free data structures",
    ),
)

RUNTIME_PREFIX = "runtime."
GC_TOKENS = ("gc", "GC")
IO_TOKENS = ("net.", "File")

GC_SUGGESTION_MIN = 4
IO_SUGGESTION_MIN = 3
RUNTIME_SUGGESTION_MIN = 6


def impact_level(percentage: float) -> ImpactLevel:
    """Map a flat share to an impact level."""
    if percentage > 20:
        return ImpactLevel.HIGH
    if percentage > 10:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def find_hotspots(functions: Sequence[FunctionInfo], threshold: float) -> list[Hotspot]:
    """Functions whose flat share is at least *threshold*, in input order."""
    return [
        Hotspot(
            function=fn.name,
            percentage=fn.percentage,
            cumulative=fn.cum,
            location=fn.location,
            samples=fn.samples,
        )
        for fn in functions
        if fn.percentage >= threshold
    ]


def detect_bottlenecks(functions: Sequence[FunctionInfo]) -> list[Bottleneck]:
    """Classify each function against the keyword rules; one entry per match."""
    bottlenecks: list[Bottleneck] = []
    for fn in functions:
        for category, keywords, suggestion in BOTTLENECK_RULES:
            if any(keyword in fn.name for keyword in keywords):
                bottlenecks.append(
                    Bottleneck(
                        function=fn.name,
                        type=category,
                        impact=impact_level(fn.percentage),
                        percentage=fn.percentage,
                        suggestion=suggestion,
                    )
                )
    return bottlenecks


def generate_suggestions(
    functions: Sequence[FunctionInfo],
    profile_type: ProfileType,
) -> list[Suggestion]:
    """Profile-wide suggestions driven by simple name counters."""
    runtime_count = sum(1 for fn in functions if fn.name.startswith(RUNTIME_PREFIX))
    gc_count = sum(1 for fn in functions if any(t in fn.name for t in GC_TOKENS))
    io_count = sum(1 for fn in functions if any(t in fn.name for t in IO_TOKENS))

    suggestions: list[Suggestion] = []
    if gc_count >= GC_SUGGESTION_MIN:
        suggestions.append(
            Suggestion(
                priority=ImpactLevel.HIGH,
                area="Garbage Collection",
                suggestion="High GC overhead detected. Consider reducing allocations.",
                estimated_improvement="20-40%",
            )
        )
    if io_count >= IO_SUGGESTION_MIN:
        suggestions.append(
            Suggestion(
                priority=ImpactLevel.MEDIUM,
                area="I/O Operations",
                suggestion="Multiple I/O operations in hot path. Consider batching or async I/O.",
                estimated_improvement="15-25%",
            )
        )
    if profile_type is ProfileType.CPU and runtime_count >= RUNTIME_SUGGESTION_MIN:
        suggestions.append(
            Suggestion(
                priority=ImpactLevel.LOW,
                area="Runtime Overhead",
                suggestion="Significant time in runtime. Consider reviewing algorithm complexity.",
                estimated_improvement="10-20%",
            )
        )
    return suggestions


def analyze(
    functions: Sequence[FunctionInfo],
    profile_type: ProfileType = ProfileType.AUTO,
    focus: AnalysisFocus = AnalysisFocus.ALL,
    threshold: float = DEFAULT_THRESHOLD,
    summary: ProfileSummary | None = None,
) -> AnalysisReport:
    """Run every rule over *functions* and assemble the report."""
    hotspots = None
    if focus in (AnalysisFocus.ALL, AnalysisFocus.HOTSPOTS):
        hotspots = find_hotspots(functions, threshold)

    bottlenecks: list[Bottleneck] = []
    if focus in (AnalysisFocus.ALL, AnalysisFocus.BOTTLENECKS):
        bottlenecks = detect_bottlenecks(functions)

    return AnalysisReport(
        summary=summary or ProfileSummary(profile_type=profile_type),
        hotspots=hotspots,
        bottlenecks=bottlenecks,
        suggestions=generate_suggestions(functions, profile_type),
    )
