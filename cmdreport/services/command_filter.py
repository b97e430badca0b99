"""Argument checks for caller-supplied command parameters.

Parameters are shell-quoted into commands, so quoting is not the concern
here.  What is refused: values WP-CLI would read as options, control
characters, and search-replace requests that cannot do anything useful.
"""

from __future__ import annotations

import re

from cmdreport.utils.logging import get_logger

log = get_logger(__name__)

# ── ALWAYS-DENIED argument patterns ───────────────────────────────────────
DENY_ARG_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"^\s*-"),
    re.compile(r"[\x00-\x08\x0b-\x1f\x7f]"),
]

SECTION_RE = re.compile(r"^[a-z0-9_][a-z0-9_\-]{0,63}$", re.I)


# ── Public API ────────────────────────────────────────────────────────────

class CommandFilterResult:
    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str):
        self.allowed = allowed
        self.reason = reason

    def __bool__(self) -> bool:
        return self.allowed


def check_argument(value: str) -> CommandFilterResult:
    """Check a single free-form argument."""
    for pat in DENY_ARG_PATTERNS:
        if pat.search(value):
            return CommandFilterResult(False, f"argument denied by safety rule: {pat.pattern}")
    return CommandFilterResult(True, "allowed argument")


def check_search_replace(from_: str, to: str) -> CommandFilterResult:
    """Check the from/to pair of a search-replace request."""
    if not from_:
        return CommandFilterResult(False, "search string is empty")
    if from_ == to:
        return CommandFilterResult(False, "search and replace strings are identical")

    for value in (from_, to):
        if not value:
            continue
        res = check_argument(value)
        if not res:
            log.warning("filter.denied", reason=res.reason)
            return res
    return CommandFilterResult(True, "allowed search-replace")


def check_section(section: str) -> CommandFilterResult:
    if not SECTION_RE.match(section):
        return CommandFilterResult(False, f"invalid section name: {section!r}")
    return CommandFilterResult(True, "allowed section")


def check_search_replace_options(options: dict[str, bool]) -> CommandFilterResult:
    """Across all tables only a dry run is allowed."""
    if not options.get("dry_run") and options.get("all_tables"):
        return CommandFilterResult(False, "a real run across all tables is not allowed, dry run only")
    return CommandFilterResult(True, "allowed search-replace options")
