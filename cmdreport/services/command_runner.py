"""External command runner.

Commands are split with shlex and executed without a shell.  The blocking
subprocess call runs inside a bounded thread pool so the FastAPI event loop
is never blocked.
"""

from __future__ import annotations

import asyncio
import errno
import shlex
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor

from cmdreport.config import Settings, settings
from cmdreport.models.commands import CommandSpec, ExecutionResult, FailureKind
from cmdreport.utils.logging import get_logger
from cmdreport.utils.report_parser import split_lines

log = get_logger(__name__)

# Shell conventions for "could not run" and "killed by timeout"
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


class CommandRunner:
    """Runs one CommandSpec at a time per worker thread."""

    def __init__(self, cfg: Settings | None = None) -> None:
        self._cfg = cfg or settings
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, self._cfg.report_runner_workers),
            thread_name_prefix="runner",
        )

    # ── blocking call ─────────────────────────────────────────────────

    def run(self, spec: CommandSpec) -> ExecutionResult:
        """Run *spec* to completion and classify the outcome."""
        try:
            args = shlex.split(spec.command)
        except ValueError as exc:
            return _launch_failure(spec, EXIT_NOT_FOUND, f"could not parse command: {exc}")
        if not args:
            return _launch_failure(spec, EXIT_NOT_FOUND, "empty command")

        timeout = spec.timeout_seconds or self._cfg.report_command_timeout_seconds
        t0 = time.monotonic()
        try:
            proc = subprocess.run(
                args,
                capture_output=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            dt = time.monotonic() - t0
            log.error("runner.timeout", command=spec.echo, elapsed=round(dt, 2))
            return ExecutionResult(
                command=spec.command,
                exit_code=EXIT_TIMEOUT,
                succeeded=False,
                failure=FailureKind.command_failure,
                error=f"timeout after {dt:.1f}s",
                elapsed_time=dt,
            )
        except PermissionError as exc:
            return _launch_failure(spec, EXIT_NOT_EXECUTABLE, str(exc))
        except OSError as exc:
            code = EXIT_NOT_EXECUTABLE if exc.errno == errno.EACCES else EXIT_NOT_FOUND
            return _launch_failure(spec, code, str(exc))

        dt = time.monotonic() - t0
        out = (proc.stdout or b"").decode("utf-8", errors="replace")
        err = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
        lines = tuple(split_lines(out))
        ok = proc.returncode == 0 or spec.allow_failure
        if proc.returncode == 0:
            log.info(
                "runner.exec", command=spec.echo, rc=0,
                lines=len(lines), elapsed=round(dt, 2),
            )
        else:
            log.warning(
                "runner.exec", command=spec.echo, rc=proc.returncode,
                allowed=spec.allow_failure, stderr=err[:200],
            )

        return ExecutionResult(
            command=spec.command,
            exit_code=proc.returncode,
            stdout_lines=lines,
            succeeded=ok,
            failure=None if ok else FailureKind.command_failure,
            error=None if ok else (err or None),
            elapsed_time=dt,
        )

    # ── async wrapper ─────────────────────────────────────────────────

    async def run_async(self, spec: CommandSpec) -> ExecutionResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.run, spec)

    def close(self) -> None:
        self._executor.shutdown(wait=False)


def _launch_failure(spec: CommandSpec, code: int, error: str) -> ExecutionResult:
    log.error("runner.launch_failed", command=spec.echo, error=error)
    return ExecutionResult(
        command=spec.command,
        exit_code=code,
        succeeded=False,
        failure=FailureKind.launch_failure,
        error=error,
    )


# ── Singleton instance ────────────────────────────────────────────────────

command_runner = CommandRunner()
