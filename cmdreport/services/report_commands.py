"""Builders turning request parameters into CommandSpecs and cache keys."""

from __future__ import annotations

import hashlib
import json
import shlex
from typing import Any, Optional

from cmdreport.config import Settings, settings
from cmdreport.models.commands import CommandSpec

SEARCH_REPLACE = "search_replace"
DB_CLEANUP = "db_cleanup"
DB_TABLES = "db_tables"

# Header substitution used by the search-replace and cleanup reports only
COUNT_HEADER_ALIASES: dict[str, str] = {"Replacements": "Count"}

# Boolean search-replace options and the WP-CLI switch each one enables
SEARCH_REPLACE_FLAGS: dict[str, str] = {
    "dry_run": "--dry-run",
    "all_tables": "--all-tables",
    "network": "--network",
}


def cache_key(section: str, params: dict[str, Any]) -> str:
    """Key for a (section, parameters) pair.

    Dry runs and real runs always land under different keys.
    """
    parts = [section]
    if "dry_run" in params:
        parts.append("dry" if params["dry_run"] else "run")
    blob = json.dumps(params, sort_keys=True, ensure_ascii=False, default=str)
    parts.append(hashlib.md5(blob.encode()).hexdigest()[:12])
    return ":".join(parts)


def _wp_base(cfg: Settings) -> list[str]:
    parts = [cfg.report_wp_cli_path]
    if cfg.report_site_path:
        parts.append(f"--path={cfg.report_site_path}")
    return parts


def search_replace_command(
    from_: str,
    to: str,
    options: dict[str, bool],
    *,
    cfg: Settings | None = None,
) -> CommandSpec:
    _cfg = cfg or settings
    args = ["search-replace", from_, to]
    if _cfg.report_site_url:
        args.append(f"--url={_cfg.report_site_url}")
    for name, flag in SEARCH_REPLACE_FLAGS.items():
        if options.get(name):
            args.append(flag)
    return CommandSpec(
        command=shlex.join(_wp_base(_cfg) + args),
        display=shlex.join(["wp"] + args),
    )


def search_replace_params(from_: str, to: str, options: dict[str, bool]) -> dict[str, Any]:
    """Cache parameters for a search-replace. A dry run ignores skip_backup."""
    params = {"from": from_, "to": to, **options}
    if params.get("dry_run"):
        params.pop("skip_backup", None)
    return params


def backup_command(*, cfg: Settings | None = None) -> Optional[CommandSpec]:
    _cfg = cfg or settings
    if not _cfg.report_backup_command:
        return None
    return CommandSpec(command=_cfg.report_backup_command)


def db_cleanup_command(
    options: dict[str, bool],
    *,
    cfg: Settings | None = None,
) -> CommandSpec:
    _cfg = cfg or settings
    command = _cfg.report_db_cleanup_command
    if options.get("dry_run"):
        command += " --dry-run"
    return CommandSpec(command=command)


def db_tables_command(*, cfg: Settings | None = None) -> CommandSpec:
    _cfg = cfg or settings
    command = _cfg.report_db_tables_command
    display = command
    if command.startswith("wp "):
        command = shlex.join(_wp_base(_cfg)) + command[2:]
    return CommandSpec(command=command, display=display)


def auto_command(section: str, *, cfg: Settings | None = None) -> Optional[CommandSpec]:
    """Configured command for *section*, or None when not configured."""
    _cfg = cfg or settings
    command = _cfg.report_auto_commands.get(section)
    if not command:
        return None
    return CommandSpec(
        command=command,
        allow_failure=section in _cfg.report_auto_allow_failure,
    )
