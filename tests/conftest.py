"""Pytest configuration and fixtures."""

import os
import time
from collections.abc import Generator
from contextlib import ExitStack
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from jose import jwt

TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests"
TEST_USER_ID = "550e8400-e29b-41d4-a716-446655440000"

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("SUPABASE_SIGNING_KEY_JWK", "")

# Every module that resolves the backend client by name
SUPABASE_CLIENT_TARGETS = (
    "src.core.supabase.get_supabase_client",
    "src.services.photo_service.get_supabase_client",
    "src.services.profile_service.get_supabase_client",
    "src.services.spot_service.get_supabase_client",
    "src.services.stats_service.get_supabase_client",
)

# Route modules that build a client scoped to the caller's token
USER_CLIENT_TARGETS = (
    "src.api.routes.profiles.create_user_client",
    "src.api.routes.spots.create_user_client",
)


def create_test_token(
    sub: str = TEST_USER_ID,
    email: str | None = "rider@example.com",
    exp_offset: int = 3600,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """Create an HS256 access token like the ones Supabase Auth issues.

    Args:
        sub: Subject (user ID).
        email: User email.
        exp_offset: Seconds from now for expiration (negative for expired).
        secret: JWT secret for signing.

    Returns:
        str: Encoded JWT token.
    """
    now = int(time.time())
    payload = {
        "sub": sub,
        "email": email,
        "role": "authenticated",
        "exp": now + exp_offset,
        "iat": now,
        "aud": "authenticated",
        "iss": "https://test-project.supabase.co/auth/v1",
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    # Clear the cache to ensure fresh settings
    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    # Clean up cache after tests
    get_settings.cache_clear()


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client.

    The same mock stands in for the backend singleton and for user-scoped
    clients, so tests configure one query chain regardless of which client
    a route uses.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    # Configure default mock responses
    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with ExitStack() as stack:
        for target in SUPABASE_CLIENT_TARGETS:
            stack.enter_context(patch(target, return_value=mock_client))
        for target in USER_CLIENT_TARGETS:
            stack.enter_context(patch(target, return_value=mock_client))
        yield mock_client


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Args:
        mock_supabase_client: Mocked Supabase client fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header carrying a valid token for TEST_USER_ID."""
    return {"Authorization": f"Bearer {create_test_token()}"}
