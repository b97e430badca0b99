"""FastAPI application entry-point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from cmdreport import __version__
from cmdreport.routers import cache, health, reports
from cmdreport.services.command_runner import command_runner
from cmdreport.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks."""
    setup_logging()
    yield
    # Shutdown: stop the runner's worker threads
    command_runner.close()


app = FastAPI(
    title="Command Report API",
    description="Cached WP-CLI maintenance reports",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(reports.router)
app.include_router(cache.router)


if __name__ == "__main__":
    import uvicorn

    from cmdreport.config import settings

    uvicorn.run(
        "cmdreport.main:app",
        host=settings.report_host,
        port=settings.report_port,
        log_level=settings.report_log_level.lower(),
    )
