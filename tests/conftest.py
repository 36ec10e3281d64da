"""Shared fixtures: a canned pprof text report and a fake ``go`` executable."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

# Rows follow the positional layout the parser reads:
# flat%, four filler columns, cum%, then the function name and location.
SAMPLE_REPORT = """\
File: server
Type: cpu
Time: 2024-03-03T10:00:00Z
Total: 2.20
      flat  flat%   sum%        cum   cum%
25.00% 0.55s 25.00% 0.90s 40.91% 40.91% sync.(*Mutex).Lock /usr/local/go/src/sync/mutex.go:81
18.00% 0.40s 43.00% 0.40s 18.18% 18.18% main.compute /app/main.go:42
12.00% 0.26s 55.00% 0.30s 13.64% 13.64% runtime.mallocgc /usr/local/go/src/runtime/malloc.go:1000
8.00% 0.18s 63.00% 0.18s 8.18% 8.18% net.(*conn).Read /usr/local/go/src/net/net.go:179
4.00% 0.09s 67.00% 0.09s 4.09% 4.09% encoding/json.Unmarshal
2.00% 0.04s 69.00% 0.04s 1.82% 1.82% main.main
"""


@pytest.fixture
def sample_report() -> str:
    return SAMPLE_REPORT


@pytest.fixture
def make_go(tmp_path: Path) -> Callable[[str], str]:
    """Return a factory writing an executable ``go`` shell script.

    The script body receives pprof's arguments as ``$@`` after the leading
    ``tool pprof`` pair has been shifted away.
    """

    def _make(body: str) -> str:
        script = tmp_path / "go"
        script.write_text(f"#!/bin/sh\nshift 2\n{body}\n")
        script.chmod(0o755)
        return str(script)

    return _make


@pytest.fixture
def report_go(tmp_path: Path, make_go: Callable[[str], str], sample_report: str) -> str:
    """A fake ``go`` that prints :data:`SAMPLE_REPORT` for any report."""
    report = tmp_path / "report.txt"
    report.write_text(sample_report)
    return make_go(f'cat "{report}"')
