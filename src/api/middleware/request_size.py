"""Reject oversized request bodies before a handler reads them."""

import logging
from typing import Callable

from fastapi import Request, Response, status

from src.api.middleware.error_handler import create_error_response
from src.core.config import get_settings

logger = logging.getLogger(__name__)


def _declared_length(request: Request) -> int | None:
    value = request.headers.get("content-length", "")
    return int(value) if value.isdigit() else None


async def request_size_limit_middleware(request: Request, call_next: Callable[[Request], Response]) -> Response:
    """Answer 413 when Content-Length exceeds MAX_REQUEST_BODY_SIZE.

    Bodies without a declared length pass through; the photo endpoint
    still enforces its own, smaller, limit on what it reads.
    """
    limit = get_settings().max_request_body_size
    length = _declared_length(request)

    if length is not None and length > limit:
        logger.warning("Rejected %s %s: body of %d bytes exceeds %d", request.method, request.url.path, length, limit)
        return create_error_response(
            error_type="request_too_large",
            message=f"Request body exceeds maximum size of {limit} bytes",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            request_id=request.headers.get("X-Request-ID"),
        )

    return await call_next(request)
