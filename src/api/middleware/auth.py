"""Supabase access token verification."""

import json
from enum import Enum
from functools import lru_cache
from typing import Any

import jwt
from jwt import PyJWK

from src.core.config import get_settings
from src.schemas.auth import TokenPayload

REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class AuthErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """A token could not be accepted; `code` says why."""

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


@lru_cache
def _load_jwk(jwk_json: str) -> Any:
    try:
        return PyJWK.from_dict(json.loads(jwk_json)).key
    except (json.JSONDecodeError, jwt.PyJWKError, jwt.InvalidKeyError) as e:
        raise AuthError(f"Invalid signing key JWK format: {e}", AuthErrorCode.INVALID_TOKEN) from e


def get_verification_key() -> tuple[Any, list[str]]:
    """Pick the key tokens are checked against.

    Projects on asymmetric signing keys configure the public JWK (ES256);
    older projects use the shared HS256 JWT secret. The JWK wins when both
    are set.

    Returns:
        tuple: (key, allowed algorithms).

    Raises:
        AuthError: If neither is configured.
    """
    settings = get_settings()

    if settings.supabase_signing_key_jwk:
        return _load_jwk(settings.supabase_signing_key_jwk), ["ES256"]
    if settings.supabase_jwt_secret:
        return settings.supabase_jwt_secret, ["HS256"]

    raise AuthError("Signing key not configured", AuthErrorCode.INVALID_TOKEN)


def decode_jwt(token: str) -> TokenPayload:
    """Verify a Supabase access token and return its claims.

    Signature, expiry and issue time are checked and exp/iat/sub must be
    present. The audience is not checked.

    Args:
        token: Encoded JWT from the Authorization header.

    Returns:
        TokenPayload: Verified claims.

    Raises:
        AuthError: TOKEN_EXPIRED, INVALID_SIGNATURE or INVALID_TOKEN.
    """
    key, algorithms = get_verification_key()

    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            key,
            algorithms=algorithms,
            options={"verify_aud": False, "require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", AuthErrorCode.TOKEN_EXPIRED) from e
    except jwt.InvalidSignatureError as e:
        raise AuthError("Invalid token signature", AuthErrorCode.INVALID_SIGNATURE) from e
    except jwt.MissingRequiredClaimError as e:
        raise AuthError(f"Token missing required claim: {e.claim}", AuthErrorCode.INVALID_TOKEN) from e
    except jwt.DecodeError as e:
        raise AuthError(f"Invalid token format: {e}", AuthErrorCode.INVALID_TOKEN) from e
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Token validation failed: {e}", AuthErrorCode.INVALID_TOKEN) from e

    return TokenPayload(
        sub=claims["sub"],
        email=claims.get("email"),
        role=claims.get("role"),
        exp=claims["exp"],
        iat=claims["iat"],
        aud=claims.get("aud"),
        iss=claims.get("iss"),
    )
