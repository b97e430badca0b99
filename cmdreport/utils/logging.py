"""structlog setup shared by every module."""

from __future__ import annotations

import logging
import sys

import structlog

from cmdreport.config import Settings, settings

_configured = False


def setup_logging(cfg: Settings | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    Console rendering by default; JSON lines when REPORT_LOG_JSON is set.
    Safe to call more than once.
    """
    global _configured
    _cfg = cfg or settings
    level = logging.getLevelName(_cfg.report_log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if _cfg.report_log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.setLevel(level)
    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        _configured = True

    get_logger(__name__).debug("logging.configured", level=_cfg.report_log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
