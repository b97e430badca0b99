"""Turn ExecutionResults into API report responses."""

from __future__ import annotations

from typing import Optional

from cmdreport.models.commands import ExecutionResult, FailureKind
from cmdreport.models.report import Report
from cmdreport.models.responses import ReportResponse
from cmdreport.utils.report_parser import parse_lines, relabel_headers

NO_DATA_MESSAGE = "No data returned for section."
LOAD_FAILED_MESSAGE = "Failed to load. Please try again."


def failure_message(result: ExecutionResult, echo: str) -> str:
    if result.failure == FailureKind.launch_failure:
        return f"Failed to start command: {echo}"
    return f"Command failed: {echo}"


def result_report(
    result: ExecutionResult,
    header_aliases: Optional[dict[str, str]] = None,
) -> Report:
    report = parse_lines(result.stdout_lines)
    if header_aliases:
        report = relabel_headers(report, header_aliases)
    return report


def build_report_response(
    section: str,
    result: ExecutionResult,
    *,
    echo: str,
    cached: bool = False,
    age_seconds: Optional[float] = None,
    header_aliases: Optional[dict[str, str]] = None,
) -> ReportResponse:
    """Build the response for one section.

    A failed result never carries rows; an empty successful one carries
    the "no data" message instead of an error.
    """
    resp = ReportResponse(
        section=section,
        success=result.succeeded,
        cached=cached,
        age_seconds=age_seconds,
    )
    if not result.succeeded:
        resp.command = echo
        resp.message = failure_message(result, echo)
        resp.error = result.error
        resp.error_kind = result.failure
        return resp

    report = result_report(result, header_aliases)
    if report.is_empty:
        resp.command = echo
        resp.message = NO_DATA_MESSAGE
        return resp

    resp.command = report.command
    resp.headers = report.headers
    resp.rows = report.data
    return resp


def error_response(section: str, exc: Exception) -> ReportResponse:
    return ReportResponse(
        section=section,
        success=False,
        message=LOAD_FAILED_MESSAGE,
        error=str(exc),
    )
