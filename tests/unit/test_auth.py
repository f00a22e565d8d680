"""Unit tests for JWT decoding and authentication utilities."""

import time
from unittest.mock import MagicMock, patch

import jwt as pyjwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from jose import jwt
from jwt.algorithms import ECAlgorithm

from src.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt, get_verification_key


# Test JWT secret for unit tests
TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests"


def create_test_token(
    sub: str | None = "550e8400-e29b-41d4-a716-446655440000",
    email: str | None = "test@example.com",
    role: str | None = "authenticated",
    exp_offset: int = 3600,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """Create a test JWT token.

    Args:
        sub: Subject (user ID); None omits the claim.
        email: User email.
        role: User role.
        exp_offset: Seconds from now for expiration (negative for expired).
        secret: JWT secret for signing.

    Returns:
        str: Encoded JWT token.
    """
    now = int(time.time())
    payload = {
        "email": email,
        "role": role,
        "exp": now + exp_offset,
        "iat": now,
        "aud": "authenticated",
        "iss": "https://test.supabase.co/auth/v1",
    }
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, secret, algorithm="HS256")


def use_hs256(mock_settings: MagicMock, secret: str = TEST_JWT_SECRET) -> None:
    mock_settings.return_value.supabase_signing_key_jwk = ""
    mock_settings.return_value.supabase_jwt_secret = secret


class TestDecodeJWT:
    """Tests for decode_jwt function."""

    @patch("src.api.middleware.auth.get_settings")
    def test_decode_jwt_with_valid_token(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt successfully decodes a valid token."""
        use_hs256(mock_settings)

        payload = decode_jwt(create_test_token())

        assert payload.sub == "550e8400-e29b-41d4-a716-446655440000"
        assert payload.email == "test@example.com"
        assert payload.role == "authenticated"
        assert payload.aud == "authenticated"

    @patch("src.api.middleware.auth.get_settings")
    def test_decode_jwt_with_expired_token(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt raises AuthError for expired token."""
        use_hs256(mock_settings)

        token = create_test_token(exp_offset=-3600)

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.TOKEN_EXPIRED
        assert "expired" in exc_info.value.message.lower()

    @patch("src.api.middleware.auth.get_settings")
    def test_decode_jwt_with_invalid_signature(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt rejects a token signed with another secret."""
        use_hs256(mock_settings)

        token = create_test_token(secret="some-other-secret")

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.INVALID_SIGNATURE

    @patch("src.api.middleware.auth.get_settings")
    def test_decode_jwt_with_malformed_token(self, mock_settings: MagicMock) -> None:
        """Test decode_jwt rejects garbage."""
        use_hs256(mock_settings)

        with pytest.raises(AuthError) as exc_info:
            decode_jwt("not-a-jwt")

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN

    @patch("src.api.middleware.auth.get_settings")
    def test_decode_jwt_requires_subject(self, mock_settings: MagicMock) -> None:
        """Test a token without a sub claim is rejected."""
        use_hs256(mock_settings)

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(create_test_token(sub=None))

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN
        assert "sub" in exc_info.value.message

    @patch("src.api.middleware.auth.get_settings")
    def test_decode_jwt_with_signing_key_jwk(self, mock_settings: MagicMock) -> None:
        """Test ES256 tokens verify against the configured JWK."""
        private_key = ec.generate_private_key(ec.SECP256R1())
        mock_settings.return_value.supabase_signing_key_jwk = ECAlgorithm.to_jwk(private_key.public_key())
        mock_settings.return_value.supabase_jwt_secret = ""

        now = int(time.time())
        token = pyjwt.encode(
            {"sub": "550e8400-e29b-41d4-a716-446655440000", "exp": now + 60, "iat": now},
            private_key,
            algorithm="ES256",
        )

        payload = decode_jwt(token)

        assert payload.sub == "550e8400-e29b-41d4-a716-446655440000"

    @patch("src.api.middleware.auth.get_settings")
    def test_hs256_token_rejected_when_jwk_configured(self, mock_settings: MagicMock) -> None:
        """Test the JWK takes precedence over the legacy secret."""
        private_key = ec.generate_private_key(ec.SECP256R1())
        mock_settings.return_value.supabase_signing_key_jwk = ECAlgorithm.to_jwk(private_key.public_key())
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET

        with pytest.raises(AuthError):
            decode_jwt(create_test_token())


class TestGetVerificationKey:
    """Tests for signing key resolution."""

    @patch("src.api.middleware.auth.get_settings")
    def test_falls_back_to_jwt_secret(self, mock_settings: MagicMock) -> None:
        use_hs256(mock_settings, secret="legacy")

        key, algorithms = get_verification_key()

        assert key == "legacy"
        assert algorithms == ["HS256"]

    @patch("src.api.middleware.auth.get_settings")
    def test_raises_when_nothing_configured(self, mock_settings: MagicMock) -> None:
        use_hs256(mock_settings, secret="")

        with pytest.raises(AuthError) as exc_info:
            get_verification_key()

        assert exc_info.value.message == "Signing key not configured"

    @patch("src.api.middleware.auth.get_settings")
    def test_invalid_jwk_json(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.supabase_signing_key_jwk = "{not json"

        with pytest.raises(AuthError) as exc_info:
            get_verification_key()

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN
