"""Utilities for parsing tab-separated WP-CLI report output."""

from __future__ import annotations

import re
from typing import Any, Iterable

from cmdreport.models.report import Report


# ---------------------------------------------------------------------------
# Generic TSV reports
# ---------------------------------------------------------------------------

def split_lines(text: str) -> list[str]:
    """Split on "\n" only, dropping a "\r" before it.

    Form feeds, record separators and Unicode line separators stay inside
    their cell. A final newline does not add an empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_lines(lines: Iterable[str]) -> Report:
    """Split each line on tabs. Empty trailing columns are kept."""
    return Report(rows=[line.split("\t") for line in lines])


def parse(raw_text: str) -> Report:
    """Parse raw command output into rows of columns.

    ``parse("")`` gives a report with no rows, which is different from a
    report whose rows have empty cells.
    """
    if not raw_text:
        return Report()
    return parse_lines(split_lines(raw_text))


def relabel_headers(report: Report, aliases: dict[str, str]) -> Report:
    """Return a copy with substrings of the header row replaced."""
    if len(report.rows) < 2 or not aliases:
        return report
    headers = []
    for col in report.rows[1]:
        for old, new in aliases.items():
            col = col.replace(old, new)
        headers.append(col)
    rows = [list(report.rows[0]), headers, *(list(r) for r in report.rows[2:])]
    return Report(rows=rows)


# ---------------------------------------------------------------------------
# Table sizes (wp db size --tables)
# ---------------------------------------------------------------------------

_SIZE_RE = re.compile(r"^\s*([\d.]+)\s*([KMGT]?i?B)?\s*$", re.IGNORECASE)

_UNITS: dict[str, int] = {
    "": 1,
    "B": 1,
    "KB": 1024,
    "KIB": 1024,
    "MB": 1024 ** 2,
    "MIB": 1024 ** 2,
    "GB": 1024 ** 3,
    "GIB": 1024 ** 3,
    "TB": 1024 ** 4,
    "TIB": 1024 ** 4,
}


def parse_size(text: str) -> int | None:
    """Convert "16384", "16384 B", "16 KB" or "1.5 MB" into bytes."""
    m = _SIZE_RE.match(text or "")
    if not m:
        return None
    try:
        value = float(m.group(1))
    except ValueError:
        return None
    unit = (m.group(2) or "").upper()
    return int(value * _UNITS.get(unit, 1))


def _size_column(headers: list[str]) -> int | None:
    for i, name in enumerate(headers):
        if name.strip().lower() == "size":
            return i
    return None


def table_size_totals(report: Report) -> dict[str, Any]:
    """Summarise a table-size report.

    Returns {"tables": int, "total_bytes": int, "largest": str | None}.
    Rows whose size column does not parse are counted but not summed.
    """
    totals: dict[str, Any] = {"tables": 0, "total_bytes": 0, "largest": None}
    col = _size_column(report.headers)
    if col is None:
        return totals

    largest_bytes = -1
    for row in report.data:
        if not row or not row[0]:
            continue
        totals["tables"] += 1
        if col >= len(row):
            continue
        size = parse_size(row[col])
        if size is None:
            continue
        totals["total_bytes"] += size
        if size > largest_bytes:
            largest_bytes = size
            totals["largest"] = row[0]
    return totals
