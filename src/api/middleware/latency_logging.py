"""Per-request access log with latency-based severity."""

import logging
import time
from typing import Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000
VERY_SLOW_REQUEST_MS = 3000

# Probed every few seconds by the platform; kept out of the info log
QUIET_PATHS = frozenset({"/health", "/health/ready"})


def _level_for(path: str, status_code: int, latency_ms: float) -> tuple[int, str]:
    if path in QUIET_PATHS:
        return logging.DEBUG, ""
    if status_code >= 500:
        return logging.ERROR, ""
    if latency_ms > VERY_SLOW_REQUEST_MS:
        return logging.ERROR, "VERY SLOW REQUEST: "
    if latency_ms > SLOW_REQUEST_MS:
        return logging.WARNING, "SLOW REQUEST: "
    if status_code >= 400:
        return logging.WARNING, ""
    return logging.INFO, ""


async def latency_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Log `METHOD path - status - N.NNms` once the response is ready.

    A request whose handler raised is logged as a 500 before the exception
    continues outward.
    """
    started = time.perf_counter()
    status_code = 500

    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        latency_ms = (time.perf_counter() - started) * 1000
        level, prefix = _level_for(request.url.path, status_code, latency_ms)
        logger.log(
            level,
            prefix + "%s %s - %d - %.2fms",
            request.method,
            request.url.path,
            status_code,
            latency_ms,
        )
