"""Data models for parsed pprof reports and their analysis."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProfileType(str, Enum):
    """Kind of profile a pprof file holds."""

    AUTO = "auto"
    CPU = "cpu"
    HEAP = "heap"
    BLOCK = "block"
    MUTEX = "mutex"
    GOROUTINE = "goroutine"


class ProfileSummary(BaseModel):
    """Profile-level facts gathered alongside the function table."""

    model_config = ConfigDict(populate_by_name=True)

    profile_type: ProfileType = Field(default=ProfileType.AUTO, alias="profileType")
    total_samples: int = Field(default=0, alias="totalSamples")
    time_range: str | None = Field(default=None, alias="timeRange")
    sample_rate: int | None = Field(default=None, alias="sampleRate")


class FunctionInfo(BaseModel):
    """One row of a pprof text report."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    samples: int = 0
    percentage: float = 0.0
    flat: float = 0.0
    cum: float = 0.0
    file: str | None = None
    line: int | None = None

    @property
    def location(self) -> str:
        return f"{self.file or ''}:{self.line or 0}"


class PprofOutput(BaseModel):
    """A parsed report: summary, ranked functions and the untouched text."""

    model_config = ConfigDict(populate_by_name=True)

    summary: ProfileSummary = Field(default_factory=ProfileSummary)
    top_functions: list[FunctionInfo] = Field(default_factory=list, alias="topFunctions")
    raw_text: str = Field(default="", alias="rawText")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Analysis results
# ---------------------------------------------------------------------------


class AnalysisFocus(str, Enum):
    """Which sections an analysis reports."""

    ALL = "all"
    HOTSPOTS = "hotspots"
    BOTTLENECKS = "bottlenecks"


class ImpactLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class BottleneckCategory(str, Enum):
    IO = "I/O"
    MEMORY = "Memory"
    CONCURRENCY = "Concurrency"


class Hotspot(BaseModel):
    """A function whose flat share meets the analysis threshold."""

    function: str
    percentage: float
    cumulative: float
    location: str
    samples: int


class Bottleneck(BaseModel):
    """A keyword-based classification of a function."""

    function: str
    type: BottleneckCategory
    impact: ImpactLevel
    percentage: float
    suggestion: str


class Suggestion(BaseModel):
    """A profile-wide optimization suggestion."""

    model_config = ConfigDict(populate_by_name=True)

    priority: ImpactLevel
    area: str
    suggestion: str
    estimated_improvement: str = Field(alias="estimatedImprovement")


class AnalysisReport(BaseModel):
    """Everything ``analyze_performance`` reports for one profile."""

    summary: ProfileSummary
    hotspots: list[Hotspot] | None = None
    bottlenecks: list[Bottleneck] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON document returned to agents.

        ``hotspots`` is present whenever the focus asked for it; the other
        lists are only present when non-empty.
        """
        payload: dict[str, Any] = {
            "summary": self.summary.model_dump(mode="json", by_alias=True, exclude_none=True),
        }
        if self.hotspots is not None:
            payload["hotspots"] = [h.model_dump(mode="json") for h in self.hotspots]
        if self.bottlenecks:
            payload["bottlenecks"] = [b.model_dump(mode="json") for b in self.bottlenecks]
        if self.suggestions:
            payload["optimizationSuggestions"] = [
                s.model_dump(mode="json", by_alias=True) for s in self.suggestions
            ]
        return payload
