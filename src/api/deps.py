"""Request dependencies."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt
from src.schemas.auth import UserContext

BEARER_FORMAT_MESSAGE = "Invalid authorization header format. Expected: Bearer <token>"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer access token")] = "",
) -> UserContext:
    """Resolve the caller from the Authorization header.

    Any failure is a 401 with a WWW-Authenticate challenge; routes that
    depend on this never run for anonymous callers.

    Returns:
        UserContext: The caller, including the verified token.
    """
    if not authorization:
        raise _unauthorized("Missing authorization token")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token or " " in token:
        raise _unauthorized(BEARER_FORMAT_MESSAGE)

    try:
        payload = decode_jwt(token)
    except AuthError as e:
        if e.code == AuthErrorCode.TOKEN_EXPIRED:
            raise _unauthorized("Token has expired") from e
        raise _unauthorized("Invalid or expired token") from e

    try:
        return payload.to_user_context(access_token=token)
    except ValueError as e:
        # sub is not a user id
        raise _unauthorized("Invalid or expired token") from e


CurrentUser = Annotated[UserContext, Depends(get_current_user)]
