"""Section report endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from cmdreport.auth import require_api_key
from cmdreport.models.responses import (
    CleanupRequest,
    ReportResponse,
    SearchReplaceRequest,
    TableSizesResponse,
)
from cmdreport.services import report_commands as rc
from cmdreport.services.command_filter import check_search_replace, check_section
from cmdreport.services.presentation import error_response
from cmdreport.services.report_service import report_service
from cmdreport.utils.logging import get_logger

log = get_logger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(require_api_key)],
)


@router.post("/search-replace", response_model=ReportResponse)
async def search_replace(req: SearchReplaceRequest) -> ReportResponse:
    """Run (or dry run) a search-replace and return its replacement table."""
    filt = check_search_replace(req.from_, req.to)
    if not filt.allowed:
        raise HTTPException(status_code=400, detail=filt.reason)
    filt = report_service.check_real_run(req)
    if not filt.allowed:
        raise HTTPException(status_code=400, detail=filt.reason)
    try:
        return await report_service.search_replace(req)
    except Exception as exc:
        log.exception("report.failed", section=rc.SEARCH_REPLACE)
        return error_response(rc.SEARCH_REPLACE, exc)


@router.post("/db-cleanup", response_model=ReportResponse)
async def db_cleanup(req: CleanupRequest) -> ReportResponse:
    """Run (or dry run) the database cleanup script."""
    try:
        return await report_service.db_cleanup(req)
    except Exception as exc:
        log.exception("report.failed", section=rc.DB_CLEANUP)
        return error_response(rc.DB_CLEANUP, exc)


@router.get("/db-tables", response_model=TableSizesResponse)
async def db_tables(force: bool = Query(False)) -> TableSizesResponse:
    """Database table sizes with totals."""
    try:
        return await report_service.db_tables(force=force)
    except Exception as exc:
        log.exception("report.failed", section=rc.DB_TABLES)
        return TableSizesResponse(**error_response(rc.DB_TABLES, exc).model_dump())


@router.get("/auto/{section}", response_model=ReportResponse)
async def auto_command(section: str, force: bool = Query(False)) -> ReportResponse:
    """Output of a configured auto command."""
    filt = check_section(section)
    if not filt.allowed:
        raise HTTPException(status_code=400, detail=filt.reason)
    try:
        resp = await report_service.auto(section, force=force)
    except Exception as exc:
        log.exception("report.failed", section=section)
        return error_response(section, exc)
    if resp is None:
        raise HTTPException(status_code=404, detail="Unknown section")
    return resp
