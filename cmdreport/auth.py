"""X-API-Key guard for the report and cache routers.

``/health`` is mounted without it.  With ``REPORT_API_KEY`` unset every
request passes, which suits a service bound to localhost.
"""

from __future__ import annotations

import secrets

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from cmdreport.config import settings
from cmdreport.utils.logging import get_logger

log = get_logger(__name__)

API_KEY_HEADER = "X-API-Key"
NO_KEY_CONFIGURED = "no-key-configured"

_api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def key_matches(supplied: str | None, expected: str) -> bool:
    """Constant-time comparison of the supplied key against *expected*."""
    if not supplied:
        return False
    return secrets.compare_digest(supplied.encode(), expected.encode())


async def require_api_key(
    request: Request,
    api_key: str | None = Security(_api_key_header),
) -> str:
    expected = settings.report_api_key
    if not expected:
        return NO_KEY_CONFIGURED
    if not key_matches(api_key, expected):
        log.warning(
            "auth.rejected",
            path=request.url.path,
            client=request.client.host if request.client else None,
            reason="missing" if not api_key else "mismatch",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or missing {API_KEY_HEADER} header",
            headers={"WWW-Authenticate": API_KEY_HEADER},
        )
    return api_key
