"""Structured request logging.

Every request gets a request id, taken from an incoming ``X-Request-ID``
header when a proxy already assigned one. The id is bound to the structlog
context so service-level events (interview scheduled, feedback refused, ...)
carry it, and it is echoed back on the response.
"""

import logging
import re
import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from organiser.config.settings import settings

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Probe endpoints hit every few seconds by orchestrators
QUIET_PATHS = frozenset({"/health", "/api/v1/health/live", "/api/v1/health/ready"})


def configure_logging() -> None:
    """Configure structlog: JSON lines in production, coloured console in DEBUG."""
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.DEBUG
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def resolve_request_id(request: Request) -> str:
    """Reuse a well-formed upstream request id, otherwise mint a short one."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its caller, outcome and duration."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        path = request.url.path
        log_start = logger.debug if path in QUIET_PATHS else logger.info
        log_start(
            "Request started",
            method=request.method,
            path=path,
            query=str(request.query_params),
            client=request.client.host if request.client else None,
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        # Set by AuthMiddleware, which runs inside this one
        user = getattr(request.state, "user", None) or {}

        if response.status_code >= 500:
            log_end = logger.error
        elif response.status_code >= 400:
            log_end = logger.warning
        elif path in QUIET_PATHS:
            log_end = logger.debug
        else:
            log_end = logger.info
        log_end(
            "Request completed",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            user=user.get("sub"),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
