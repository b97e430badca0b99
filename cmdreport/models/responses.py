"""API request and response models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cmdreport.models.commands import FailureKind


class HealthResponse(BaseModel):
    status: str
    version: str


class SearchReplaceOptions(BaseModel):
    dry_run: bool = True
    all_tables: bool = False
    network: bool = False
    skip_backup: bool = False


class SearchReplaceRequest(BaseModel):
    """Body for POST /reports/search-replace."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str = ""
    options: SearchReplaceOptions = Field(default_factory=SearchReplaceOptions)
    force: bool = False


class CleanupOptions(BaseModel):
    dry_run: bool = True


class CleanupRequest(BaseModel):
    """Body for POST /reports/db-cleanup."""

    options: CleanupOptions = Field(default_factory=CleanupOptions)
    force: bool = False


class ReportResponse(BaseModel):
    section: str
    success: bool
    cached: bool = False
    command: str = ""
    headers: list[str] = []
    rows: list[list[str]] = []
    message: str = ""
    error: Optional[str] = None
    error_kind: Optional[FailureKind] = None
    # Seconds since the cached result was computed
    age_seconds: Optional[float] = None


class TableSizeTotals(BaseModel):
    tables: int = 0
    total_bytes: int = 0
    largest: Optional[str] = None


class TableSizesResponse(ReportResponse):
    totals: TableSizeTotals = Field(default_factory=TableSizeTotals)


class CacheEntryInfo(BaseModel):
    key: str
    age_seconds: float
    ttl_seconds: int
    succeeded: bool


class CacheInvalidateResponse(BaseModel):
    key: Optional[str] = None
    removed: int
