"""In-memory report cache with per-key single flight.

A miss starts the computation as its own task; every caller for that key,
the first included, awaits the same task through ``asyncio.shield`` and
gets the identical result object.  A cancelled caller therefore never stops
the computation, and nobody can start a second one while it runs.  Failed
results are cached like successful ones until their TTL runs out or the key
is invalidated.
"""

from __future__ import annotations

import asyncio
import functools
import time
from typing import Awaitable, Callable, Optional

from cmdreport.models.commands import ExecutionResult
from cmdreport.models.report import CachedReport
from cmdreport.utils.logging import get_logger

log = get_logger(__name__)

Compute = Callable[[], Awaitable[ExecutionResult]]


class ReportCache:
    """Key -> CachedReport map owned by the event loop.

    Nothing here awaits between reading and writing the maps, so every
    mutation is atomic with respect to other coroutines.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CachedReport] = {}
        self._inflight: dict[str, asyncio.Task[ExecutionResult]] = {}
        # In-flight tasks whose result must not be stored
        self._discarded: set[asyncio.Task[ExecutionResult]] = set()

    def __len__(self) -> int:
        return len(self._entries)

    # ── lookups ───────────────────────────────────────────────────────

    def now(self) -> float:
        return self._clock()

    def peek(self, key: str) -> Optional[CachedReport]:
        """Live entry for *key*, or None. Never computes."""
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry

    def entries(self) -> list[CachedReport]:
        now = self._clock()
        return [e for e in self._entries.values() if not e.is_expired(now)]

    # ── main entry point ──────────────────────────────────────────────

    async def get_or_compute(
        self,
        key: str,
        ttl_seconds: int,
        compute: Compute,
    ) -> ExecutionResult:
        entry = self.peek(key)
        if entry is not None:
            log.debug("cache.hit", key=key)
            return entry.result

        task = self._inflight.get(key)
        if task is None:
            log.debug("cache.miss", key=key)
            task = asyncio.get_running_loop().create_task(compute())
            # Registered before any shield, so the entry is stored before
            # the first awaiter resumes.
            task.add_done_callback(functools.partial(self._finish, key, ttl_seconds))
            self._inflight[key] = task
        else:
            log.debug("cache.wait", key=key)

        return await asyncio.shield(task)

    def _finish(self, key: str, ttl_seconds: int, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

        if task.cancelled():
            log.warning("cache.cancelled", key=key)
            self._discarded.discard(task)
            return
        exc = task.exception()
        if task in self._discarded:
            self._discarded.discard(task)
            log.debug("cache.discard", key=key)
            return
        if exc is not None:
            log.warning("cache.compute_failed", key=key, error=str(exc))
            return

        self._purge(self._clock())
        result = task.result()
        self._entries[key] = CachedReport(
            key=key,
            result=result,
            created_at=self._clock(),
            ttl_seconds=ttl_seconds,
        )
        log.debug(
            "cache.store", key=key, ttl=ttl_seconds,
            succeeded=result.succeeded, size=len(self._entries),
        )

    # ── invalidation ──────────────────────────────────────────────────

    async def invalidate(self, key: str) -> bool:
        """Drop *key*. Returns True if a live or in-flight entry was affected."""
        removed = self._entries.pop(key, None) is not None
        task = self._inflight.get(key)
        if task is not None:
            self._discarded.add(task)
            removed = True
        if removed:
            log.info("cache.invalidate", key=key)
        return removed

    async def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        self._discarded.update(self._inflight.values())
        log.info("cache.clear", removed=count)
        return count

    async def purge_expired(self) -> int:
        return self._purge(self._clock())

    def _purge(self, now: float) -> int:
        stale = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in stale:
            del self._entries[key]
        if stale:
            log.debug("cache.purge", removed=len(stale))
        return len(stale)


# Singleton
report_cache = ReportCache()
