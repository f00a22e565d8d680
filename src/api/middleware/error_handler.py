"""Exception types routes raise, and the middleware that turns them into JSON."""

import logging
import traceback
from typing import Any, Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """An error with a known status code and category.

    Subclasses fix the status code and category; routes only pass the
    message (and, for field errors, the details list).
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "api_error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, details: list[dict[str, Any]] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class BadRequestError(APIError):
    """Missing or malformed input, e.g. a spot without coordinates."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "bad_request"
    default_message = "Bad request"


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Resource not found"


class ValidationError(APIError):
    """A value broke a field rule; details name the field."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_type = "validation_error"
    default_message = "Validation error"


class StoreError(APIError):
    """Supabase rejected or failed a read or write."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "store_error"
    default_message = "Database error"


HTTP_ERROR_TYPES = {
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an ErrorResponse envelope.

    Args:
        error_type: Error category for client handling.
        message: Human-readable error description.
        status_code: HTTP status code.
        details: Optional error details.
        request_id: Optional request ID for tracing.
        headers: Optional extra response headers.

    Returns:
        JSONResponse: Formatted error response.
    """
    body = ErrorResponse.from_exception(
        error_type=error_type,
        message=message,
        details=details,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Format errors that escape the route handlers.

    APIError subclasses keep their status and message. Anything unexpected
    is logged with its traceback and reported as a generic 500 so store
    internals never reach the client.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: The handler's response, or the formatted error.
    """
    request_id = request.headers.get("X-Request-ID")

    try:
        return await call_next(request)

    except APIError as e:
        log = logger.error if e.status_code >= 500 else logger.warning
        log(
            "%s %s failed: %s - %s",
            request.method,
            request.url.path,
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            details=e.details,
            request_id=request_id,
        )

    except Exception as e:
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            e,
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPExceptions (bad credentials, unknown routes) as ErrorResponse.

    FastAPI resolves these inside the router, before any middleware sees
    them, so this is registered as an exception handler.

    Args:
        request: The incoming request.
        exc: The raised HTTPException.

    Returns:
        JSONResponse: Formatted error response with the exception's headers.
    """
    request_id = request.headers.get("X-Request-ID")
    logger.warning(
        "HTTP exception on %s %s: %s - %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.detail,
        extra={"request_id": request_id},
    )
    return create_error_response(
        error_type=HTTP_ERROR_TYPES.get(exc.status_code, "http_error"),
        message=str(exc.detail),
        status_code=exc.status_code,
        request_id=request_id,
        headers=getattr(exc, "headers", None),
    )
