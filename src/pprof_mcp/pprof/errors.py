"""Error types raised while driving ``go tool pprof``."""

from pprof_mcp.protocol.errors import ToolError


class PprofError(ToolError):
    """Base error for all profiler adapter failures."""


class PprofNotFoundError(PprofError):
    """The ``go`` executable could not be located."""

    def __init__(self, binary: str = "go") -> None:
        self.binary = binary
        super().__init__(f"{binary} tool not found")


class PprofExecutionError(PprofError):
    """``go tool pprof`` could not be started or exited non-zero."""

    def __init__(self, detail: str, *, exit_code: int | None = None, stderr: str = "") -> None:
        self.detail = detail
        self.exit_code = exit_code
        self.stderr = stderr
        msg = f"pprof command failed: {detail}"
        if stderr:
            msg += f", stderr: {stderr.strip()}"
        super().__init__(msg)


class PprofTimeoutError(PprofError):
    """``go tool pprof`` exceeded the configured deadline and was killed."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"pprof command timed out after {timeout}s")
