"""Parsed report and cache entry models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cmdreport.models.commands import ExecutionResult


class Report(BaseModel):
    """Tabular view of tab-separated command output.

    Row 0 echoes the command, row 1 holds the column headers and the
    remaining rows are data.
    """

    rows: list[list[str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def command(self) -> str:
        if not self.rows:
            return ""
        return " ".join(self.rows[0])

    @property
    def headers(self) -> list[str]:
        if len(self.rows) < 2:
            return []
        return self.rows[1]

    @property
    def data(self) -> list[list[str]]:
        return self.rows[2:]


class CachedReport(BaseModel):
    """One cache slot. Replaced wholesale on refresh, never edited."""

    model_config = ConfigDict(frozen=True)

    key: str
    result: ExecutionResult
    created_at: float
    ttl_seconds: int

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl_seconds
