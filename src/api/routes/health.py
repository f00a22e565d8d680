"""Liveness, readiness and token probes."""

import time

from fastapi import APIRouter, Response, status

from src.api.deps import CurrentUser
from src.core.config import get_settings
from src.core.supabase import check_database_connection
from src.schemas.auth import AuthenticatedResponse
from src.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    """Answer without touching Supabase."""
    return HealthResponse(status=HealthStatus.HEALTHY, service=get_settings().app_name)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"description": "Supabase database unreachable"}},
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Probe the database with a one-row profiles query; 503 if it fails."""
    started = time.perf_counter()
    result = await check_database_connection()
    database = CheckResult(
        name="database",
        healthy=result["healthy"],
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
        error=result.get("error"),
    )

    if not database.healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status=HealthStatus.UNHEALTHY, checks=[database])

    return ReadinessResponse(status=HealthStatus.HEALTHY, checks=[database])


@router.get(
    "/health/auth",
    response_model=AuthenticatedResponse,
    summary="Token probe",
    responses={401: {"description": "Missing, malformed or expired token"}},
)
async def authenticated_check(user: CurrentUser) -> AuthenticatedResponse:
    """Echo the identity carried by the caller's access token."""
    return AuthenticatedResponse(user_id=str(user.user_id), email=user.email, role=user.role)
