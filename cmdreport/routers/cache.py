"""Cache inspection and invalidation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from cmdreport.auth import require_api_key
from cmdreport.models.responses import CacheEntryInfo, CacheInvalidateResponse
from cmdreport.services.report_service import report_service

router = APIRouter(
    prefix="/cache",
    tags=["cache"],
    dependencies=[Depends(require_api_key)],
)


@router.get("", response_model=list[CacheEntryInfo])
async def list_entries() -> list[CacheEntryInfo]:
    cache = report_service.cache
    now = cache.now()
    return [
        CacheEntryInfo(
            key=e.key,
            age_seconds=round(now - e.created_at, 3),
            ttl_seconds=e.ttl_seconds,
            succeeded=e.result.succeeded,
        )
        for e in cache.entries()
    ]


@router.delete("/{key}", response_model=CacheInvalidateResponse)
async def invalidate(key: str) -> CacheInvalidateResponse:
    removed = await report_service.cache.invalidate(key)
    if not removed:
        raise HTTPException(status_code=404, detail="Key not cached")
    return CacheInvalidateResponse(key=key, removed=1)


@router.delete("", response_model=CacheInvalidateResponse)
async def clear() -> CacheInvalidateResponse:
    removed = await report_service.cache.clear()
    return CacheInvalidateResponse(removed=removed)
