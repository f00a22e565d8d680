"""Shared response schemas: health probes and the error envelope."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: HealthStatus = Field(description="Whether the process is serving requests")
    service: str = Field(default="actioo-api", description="Service name")
    version: str = Field(default="0.1.0", description="API version")
    timestamp: datetime = Field(default_factory=_utcnow, description="Probe time (UTC)")


class CheckResult(BaseModel):
    """Outcome of probing one backing service."""

    name: str = Field(description="Backing service, e.g. 'database'")
    healthy: bool = Field(description="Probe succeeded")
    latency_ms: float | None = Field(default=None, description="Probe round trip in milliseconds")
    error: str | None = Field(default=None, description="Failure reason when unhealthy")


class ReadinessResponse(BaseModel):
    """Readiness probe payload; unhealthy if any check failed."""

    status: HealthStatus
    checks: list[CheckResult] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorDetail(BaseModel):
    """One entry in an error's details list, e.g. the field that failed."""

    model_config = ConfigDict(from_attributes=True)

    loc: list[str] | None = Field(default=None, description="Path to the offending value")
    msg: str = Field(description="What is wrong with it")
    type: str = Field(default="error", description="Machine-readable error kind")


class ErrorResponse(BaseModel):
    """Envelope for every error the API formats itself.

    `error` is a stable machine-readable category (bad_request,
    validation_error, store_error, ...); `message` is safe to show to users.
    """

    error: str = Field(description="Error category")
    message: str = Field(description="User-facing description")
    details: list[ErrorDetail] | None = Field(default=None, description="Per-field or per-item details")
    request_id: str | None = Field(default=None, description="Echo of the X-Request-ID header")
    timestamp: datetime = Field(default_factory=_utcnow, description="When the error occurred (UTC)")

    @classmethod
    def from_exception(
        cls,
        error_type: str,
        message: str,
        details: list[dict[str, Any]] | None = None,
        request_id: str | None = None,
    ) -> "ErrorResponse":
        """Build the envelope from an error's category, message and raw details."""
        return cls(
            error=error_type,
            message=message,
            details=[ErrorDetail.model_validate(d) for d in details] if details else None,
            request_id=request_id,
        )
