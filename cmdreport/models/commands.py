"""Command-related data structures."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FailureKind(str, Enum):
    launch_failure = "launch_failure"
    command_failure = "command_failure"


class CommandSpec(BaseModel):
    """An external command to run, fixed once built."""

    model_config = ConfigDict(frozen=True)

    command: str
    allow_failure: bool = False
    display: Optional[str] = None
    timeout_seconds: Optional[int] = None

    @property
    def echo(self) -> str:
        """Human-readable form shown above a report."""
        return self.display or self.command


class ExecutionResult(BaseModel):
    """Outcome of one command invocation."""

    model_config = ConfigDict(frozen=True)

    command: str
    exit_code: int
    stdout_lines: tuple[str, ...] = ()
    succeeded: bool
    failure: Optional[FailureKind] = None
    error: Optional[str] = None
    elapsed_time: float = 0.0

    @property
    def has_output(self) -> bool:
        return len(self.stdout_lines) > 0

    def with_echo(self, echo: str) -> ExecutionResult:
        """Copy with *echo* prepended as the first output line.

        Empty output stays empty so it is still reported as "no data".
        """
        if not self.stdout_lines:
            return self
        return self.model_copy(
            update={"stdout_lines": (echo, *self.stdout_lines)},
        )
