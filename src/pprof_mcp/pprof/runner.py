"""PprofRunner — drives ``go tool pprof`` as a subprocess.

Each call builds an operation-specific argument vector, runs
``go tool pprof <args>`` with separate stdout/stderr pipes and returns the
captured stdout.  A non-zero exit status raises :class:`PprofExecutionError`
carrying the captured stderr.

A per-runner deadline (``timeout``) kills the child when exceeded, and the
child is also killed when the awaiting task is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from enum import Enum
from typing import Any

from pprof_mcp.pprof.errors import PprofExecutionError, PprofNotFoundError, PprofTimeoutError
from pprof_mcp.pprof.models import FunctionInfo, PprofOutput, ProfileType
from pprof_mcp.pprof.parser import parse_functions, parse_output
from pprof_mcp.utils.telemetry import ATTR_PPROF_EXIT_CODE, ATTR_PPROF_OPERATION, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_TIMEOUT = 120.0
SAMPLES_SCALE = 10000


class PprofOperation(str, Enum):
    """Report kinds the runner knows how to request."""

    TEXT = "text"
    TOP = "top"
    SVG = "svg"
    LIST = "list"
    DIFF = "diff"


def build_args(
    operation: PprofOperation,
    *,
    file_path: str,
    focus: str = "",
    ignore: str = "",
    function_name: str = "",
    base_file: str = "",
) -> list[str]:
    """Return the ``pprof`` argument vector for *operation*."""
    if operation is PprofOperation.TEXT:
        return ["-text", file_path]
    if operation is PprofOperation.TOP:
        return ["-top", file_path]
    if operation is PprofOperation.SVG:
        args = ["-svg"]
        if focus:
            args += ["-focus", focus]
        if ignore:
            args += ["-ignore", ignore]
        args.append(file_path)
        return args
    if operation is PprofOperation.LIST:
        return ["-list", function_name, file_path]
    if operation is PprofOperation.DIFF:
        return ["-base", base_file, file_path]
    msg = f"Unsupported pprof operation: {operation}"
    raise ValueError(msg)


class PprofRunner:
    """Locates the ``go`` binary once and runs pprof reports through it.

    Usage::

        runner = PprofRunner(timeout=60)
        text = await runner.run(PprofOperation.TOP, file_path="cpu.pprof")
        output = await runner.parse_profile("cpu.pprof", ProfileType.CPU)
    """

    def __init__(self, go_binary: str | None = None, *, timeout: float | None = DEFAULT_TIMEOUT) -> None:
        self._binary_name = go_binary or "go"
        # A missing binary is only reported when a report is requested.
        self._tool_path = shutil.which(self._binary_name)
        self._timeout = timeout

    @property
    def tool_path(self) -> str | None:
        return self._tool_path

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def run(self, operation: PprofOperation, **arguments: Any) -> str:
        """Run one pprof operation and return its stdout."""
        if self._tool_path is None:
            raise PprofNotFoundError(self._binary_name)

        command = [self._tool_path, "tool", "pprof", *build_args(operation, **arguments)]
        logger.debug("Running %s", command)

        with _tracer.start_as_current_span("pprof.run") as span:
            span.set_attribute(ATTR_PPROF_OPERATION, operation.value)
            try:
                proc = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                raise PprofExecutionError(str(exc)) from exc

            try:
                stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
            except TimeoutError:
                await _kill(proc)
                raise PprofTimeoutError(self._timeout or 0.0) from None
            except asyncio.CancelledError:
                await _kill(proc)
                raise

            exit_code = proc.returncode or 0
            span.set_attribute(ATTR_PPROF_EXIT_CODE, exit_code)

        err_text = stderr.decode(errors="replace") if stderr else ""
        if exit_code != 0:
            logger.warning("pprof %s exited with status %d", operation.value, exit_code)
            raise PprofExecutionError(f"exit status {exit_code}", exit_code=exit_code, stderr=err_text)
        return stdout.decode(errors="replace") if stdout else ""

    # ------------------------------------------------------------------
    # Report helpers
    # ------------------------------------------------------------------

    async def raw_text(self, file_path: str) -> str:
        """Return the ``-text`` report unparsed."""
        return await self.run(PprofOperation.TEXT, file_path=file_path)

    async def parse_profile(
        self,
        file_path: str,
        profile_type: ProfileType = ProfileType.AUTO,
    ) -> PprofOutput:
        """Run ``-text`` and parse it into summary plus ranked functions."""
        output = await self.raw_text(file_path)
        return parse_output(output, profile_type, file_path)

    async def top_functions(self, file_path: str, n: int) -> list[FunctionInfo]:
        """Run ``-top`` and return the first *n* parsed functions."""
        output = await self.run(PprofOperation.TOP, file_path=file_path)
        functions = parse_functions(output)[:n]
        for fn in functions:
            # pprof's text report carries no raw counts; approximate from flat%.
            fn.samples = int(fn.flat * SAMPLES_SCALE)
        return functions

    async def generate_svg(self, file_path: str, focus: str = "", ignore: str = "") -> str:
        """Render the call graph as SVG."""
        return await self.run(PprofOperation.SVG, file_path=file_path, focus=focus, ignore=ignore)

    async def list_callers(self, file_path: str, function_name: str) -> str:
        """Return the annotated ``-list`` output for *function_name*."""
        return await self.run(PprofOperation.LIST, file_path=file_path, function_name=function_name)

    async def compare_profiles(self, base_file: str, compare_file: str) -> str:
        """Return the report of *compare_file* relative to *base_file*."""
        return await self.run(PprofOperation.DIFF, file_path=compare_file, base_file=base_file)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill *proc* if still running and reap it."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
