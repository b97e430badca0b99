"""Shared pytest fixtures."""

from __future__ import annotations

import os

# Force settings to use test-safe defaults before any import
os.environ.setdefault("REPORT_API_KEY", "")
os.environ.setdefault("REPORT_WP_CLI_PATH", "wp")
os.environ.setdefault("REPORT_SITE_PATH", "")
os.environ.setdefault("REPORT_SITE_URL", "")
os.environ.setdefault("REPORT_AUTO_COMMANDS", '{"php_version": "php -v", "git_status": "git status --short"}')
os.environ.setdefault("REPORT_AUTO_ALLOW_FAILURE", '["git_status"]')

import pytest
from httpx import ASGITransport, AsyncClient

from cmdreport.services.report_cache import ReportCache
from tests.mock_runner import MockCommandRunner


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """A fresh ReportCache on a fake clock."""
    return ReportCache(clock=clock)


@pytest.fixture
def mock_runner():
    """Provide a fresh MockCommandRunner."""
    return MockCommandRunner()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client(mock_runner, cache, monkeypatch):
    """Async test client with the mock runner and a fresh cache injected."""
    from cmdreport.config import settings
    from cmdreport.services.report_service import ReportService

    service = ReportService(runner=mock_runner, cache=cache, cfg=settings)

    # Patch the singleton in every module that imported it
    import cmdreport.routers.cache as rcache
    import cmdreport.routers.reports as rreports
    import cmdreport.services.report_service as svc_mod

    monkeypatch.setattr(svc_mod, "report_service", service)
    monkeypatch.setattr(rreports, "report_service", service)
    monkeypatch.setattr(rcache, "report_service", service)

    from cmdreport.main import app as fastapi_app

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
