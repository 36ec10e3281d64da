"""Heuristic parser for the text reports printed by ``go tool pprof``.

A ``-text`` / ``-top`` report looks like::

    File: server
    Type: cpu
    Time: Mar 3, 2024 at 10:00am (UTC)
    Showing nodes accounting for 2.10s, 95.45% of 2.20s total
          flat  flat%   sum%        cum   cum%
    ...

The function table is read positionally: field 0 is taken as the flat
percentage, field 5 as the cumulative percentage and fields 6 onwards as the
function name.  Rows that do not fit are dropped; numbers that do not parse
degrade to zero.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pprof_mcp.pprof.models import FunctionInfo, PprofOutput, ProfileSummary, ProfileType

logger = logging.getLogger(__name__)

MIN_FIELDS = 6
NAME_FIELD = 6
SOURCE_SUFFIXES = (".go", ".s", ".c")

TRUNCATION_LIMIT = 10000
TRUNCATION_MARKER = "\n... (truncated) ..."

DEFAULT_SAMPLE_RATE = 100

_TOTAL_RE = re.compile(r"Total:\s*([\d.]+)")

_SAMPLE_TYPES: dict[str, ProfileType] = {
    "cpu": ProfileType.CPU,
    "samples": ProfileType.CPU,
    "inuse_space": ProfileType.HEAP,
    "inuse_objects": ProfileType.HEAP,
    "alloc_space": ProfileType.HEAP,
    "alloc_objects": ProfileType.HEAP,
    "space": ProfileType.HEAP,
    "goroutine": ProfileType.GOROUTINE,
}


def parse_functions(raw_text: str) -> list[FunctionInfo]:
    """Turn the function table of a report into records, in report order."""
    functions: list[FunctionInfo] = []
    for line in raw_text.splitlines():
        if not line.strip():
            continue
        if "flat" in line and "flat%" in line:
            continue
        info = parse_function_line(line)
        if info is not None and info.name:
            functions.append(info)
    return functions


def parse_function_line(line: str) -> FunctionInfo | None:
    """Parse a single table row; ``None`` when the row has no usable shape."""
    fields = line.split()
    if len(fields) < MIN_FIELDS:
        return None

    raw_name = " ".join(fields[NAME_FIELD:])
    if not raw_name:
        return None

    flat = _parse_percent(fields[0])
    cum = _parse_percent(fields[5])
    name, file, line_no = _split_location(raw_name)

    return FunctionInfo(
        name=clean_function_name(name),
        percentage=flat,
        flat=flat,
        cum=cum,
        file=file,
        line=line_no,
    )


def clean_function_name(name: str) -> str:
    """Strip whitespace and any directory-style prefix from *name*."""
    name = name.strip()
    idx = name.rfind("/")
    if idx > 0:
        name = name[idx + 1 :]
    return name


def parse_summary(
    raw_text: str,
    profile_type: ProfileType = ProfileType.AUTO,
    file_path: str | None = None,
) -> ProfileSummary:
    """Collect the profile-level facts a report header exposes."""
    summary = ProfileSummary(profile_type=profile_type)

    for line in raw_text.splitlines():
        stripped = line.strip()
        if stripped.startswith("Type:") and summary.profile_type is ProfileType.AUTO:
            sample_type = stripped.removeprefix("Type:").strip()
            summary.profile_type = _SAMPLE_TYPES.get(sample_type, ProfileType.AUTO)
        elif stripped.startswith("Time:"):
            summary.time_range = stripped.removeprefix("Time:").strip() or None
        elif "Total:" in stripped:
            match = _TOTAL_RE.search(stripped)
            if match:
                try:
                    summary.total_samples = int(float(match.group(1)) * 100)
                except ValueError:
                    logger.debug("Unparseable total in line %r", stripped)

    if file_path and Path(file_path).exists():
        summary.sample_rate = DEFAULT_SAMPLE_RATE
    return summary


def parse_output(
    raw_text: str,
    profile_type: ProfileType = ProfileType.AUTO,
    file_path: str | None = None,
) -> PprofOutput:
    """Parse a full report into a :class:`PprofOutput`."""
    return PprofOutput(
        summary=parse_summary(raw_text, profile_type, file_path),
        top_functions=parse_functions(raw_text),
        raw_text=raw_text,
    )


def truncate_output(text: str, limit: int = TRUNCATION_LIMIT) -> str:
    """Cap *text* at *limit* characters followed by a truncation marker.

    Applying it to an already truncated value returns the value unchanged.
    """
    if len(text) <= limit:
        return text
    if text.endswith(TRUNCATION_MARKER) and len(text) - len(TRUNCATION_MARKER) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def _parse_percent(field: str) -> float:
    try:
        value = float(field.removesuffix("%"))
    except ValueError:
        return 0.0
    if not 0.0 <= value <= 100.0:
        return 0.0
    return value


def _split_location(raw_name: str) -> tuple[str, str | None, int | None]:
    """Split a trailing ``path/file.go:NN`` off a raw function name.

    The location is the last whitespace-separated token before the colon;
    when the name is nothing but a location, the location doubles as name.
    """
    idx = raw_name.rfind(":")
    if idx <= 0:
        return raw_name, None, None
    try:
        line_no = int(raw_name[idx + 1 :])
    except ValueError:
        return raw_name, None, None

    head = raw_name[:idx]
    file = head.rsplit(" ", 1)[-1]
    if not file.endswith(SOURCE_SUFFIXES):
        return raw_name, None, None

    name = head[: len(head) - len(file)].strip() or file
    return name, file, line_no
