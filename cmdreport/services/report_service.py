"""Section reports: build the command, go through the cache, present.

The runner, the cache and the presentation helpers only meet here.
"""

from __future__ import annotations

from typing import Optional

from cmdreport.config import Settings, settings
from cmdreport.models.commands import CommandSpec, ExecutionResult
from cmdreport.models.report import Report
from cmdreport.models.responses import (
    CleanupRequest,
    ReportResponse,
    SearchReplaceRequest,
    TableSizeTotals,
    TableSizesResponse,
)
from cmdreport.services import report_commands as rc
from cmdreport.services.command_filter import (
    CommandFilterResult,
    check_search_replace_options,
)
from cmdreport.services.command_runner import CommandRunner, command_runner
from cmdreport.services.presentation import build_report_response
from cmdreport.services.report_cache import ReportCache, report_cache
from cmdreport.utils.logging import get_logger
from cmdreport.utils.report_parser import table_size_totals

log = get_logger(__name__)


class ReportService:
    """Runs section commands through a shared ReportCache."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        cache: ReportCache | None = None,
        cfg: Settings | None = None,
    ) -> None:
        self._runner = runner or command_runner
        self._cache = cache or report_cache
        self._cfg = cfg or settings

    @property
    def cache(self) -> ReportCache:
        return self._cache

    # ── core ──────────────────────────────────────────────────────────

    async def _execute(
        self,
        spec: CommandSpec,
        before: Optional[CommandSpec] = None,
    ) -> ExecutionResult:
        if before is not None:
            pre = await self._runner.run_async(before)
            if not pre.succeeded:
                log.warning("report.pre_command_failed", command=before.echo)
                return pre
        result = await self._runner.run_async(spec)
        if not result.succeeded:
            return result
        return result.with_echo(spec.echo)

    async def fetch(
        self,
        section: str,
        spec: CommandSpec,
        params: dict,
        *,
        ttl_seconds: int | None = None,
        force: bool = False,
        header_aliases: Optional[dict[str, str]] = None,
        before: Optional[CommandSpec] = None,
    ) -> ReportResponse:
        """Report for *section*, served from cache while it is live."""
        key = rc.cache_key(section, params)
        ttl = ttl_seconds if ttl_seconds is not None else self._cfg.report_cache_ttl_seconds
        if force:
            await self._cache.invalidate(key)

        ran = False

        async def compute() -> ExecutionResult:
            nonlocal ran
            ran = True
            return await self._execute(spec, before)

        result = await self._cache.get_or_compute(key, ttl, compute)

        entry = self._cache.peek(key)
        age = None
        if entry is not None and entry.result is result:
            age = round(self._cache.now() - entry.created_at, 3)
        echo = spec.echo
        if before is not None and result.command == before.command:
            echo = before.echo

        resp = build_report_response(
            section,
            result,
            echo=echo,
            cached=not ran,
            age_seconds=age,
            header_aliases=header_aliases,
        )
        log.info(
            "report.built", section=section, key=key, success=resp.success,
            cached=resp.cached, rows=len(resp.rows),
        )
        return resp

    # ── sections ──────────────────────────────────────────────────────

    def check_real_run(self, req: SearchReplaceRequest) -> CommandFilterResult:
        """A real search-replace needs a live, successful dry run of the same request."""
        options = req.options.model_dump()
        res = check_search_replace_options(options)
        if not res or options["dry_run"]:
            return res
        dry = rc.search_replace_params(req.from_, req.to, {**options, "dry_run": True})
        entry = self._cache.peek(rc.cache_key(rc.SEARCH_REPLACE, dry))
        if entry is None or not entry.result.succeeded:
            log.warning("report.real_run_refused", section=rc.SEARCH_REPLACE)
            return CommandFilterResult(False, "run a successful dry run with the same parameters first")
        return CommandFilterResult(True, "dry run found")

    async def search_replace(self, req: SearchReplaceRequest) -> ReportResponse:
        options = req.options.model_dump()
        spec = rc.search_replace_command(req.from_, req.to, options, cfg=self._cfg)
        before = None
        if not options["dry_run"] and not options["skip_backup"]:
            before = rc.backup_command(cfg=self._cfg)
        params = rc.search_replace_params(req.from_, req.to, options)
        return await self.fetch(
            rc.SEARCH_REPLACE,
            spec,
            params,
            ttl_seconds=self._cfg.search_replace_ttl,
            force=req.force,
            header_aliases=rc.COUNT_HEADER_ALIASES,
            before=before,
        )

    async def db_cleanup(self, req: CleanupRequest) -> ReportResponse:
        options = req.options.model_dump()
        spec = rc.db_cleanup_command(options, cfg=self._cfg)
        return await self.fetch(
            rc.DB_CLEANUP,
            spec,
            options,
            force=req.force,
            header_aliases=rc.COUNT_HEADER_ALIASES,
        )

    async def db_tables(self, force: bool = False) -> TableSizesResponse:
        spec = rc.db_tables_command(cfg=self._cfg)
        resp = await self.fetch(rc.DB_TABLES, spec, {}, force=force)
        out = TableSizesResponse(**resp.model_dump())
        if resp.success and resp.rows:
            report = Report(rows=[[resp.command], resp.headers, *resp.rows])
            out.totals = TableSizeTotals(**table_size_totals(report))
        return out

    async def auto(self, section: str, force: bool = False) -> Optional[ReportResponse]:
        """Report for a configured auto command; None if *section* is unknown."""
        spec = rc.auto_command(section, cfg=self._cfg)
        if spec is None:
            return None
        return await self.fetch(section, spec, {"auto": section}, force=force)


# Singleton
report_service = ReportService()
