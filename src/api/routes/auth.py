"""Password recovery and sign-out routes."""

from fastapi import APIRouter

from src.api.deps import CurrentUser
from src.api.middleware.error_handler import BadRequestError
from src.schemas.auth import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResetPasswordRequest,
    ResetPasswordResponse,
    SignOutResponse,
)
from src.services.auth_service import AuthService, PasswordResetError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    summary="Request password reset",
    description="Emails a recovery link. The response never reveals whether the account exists.",
)
async def forgot_password(data: ForgotPasswordRequest) -> ForgotPasswordResponse:
    result = await AuthService().request_password_reset(email=data.email)
    return ForgotPasswordResponse(**result)


@router.post(
    "/reset-password",
    response_model=ResetPasswordResponse,
    summary="Reset password",
    responses={400: {"description": "Recovery token invalid or expired"}},
)
async def reset_password(data: ResetPasswordRequest) -> ResetPasswordResponse:
    """Set a new password with the token from the recovery email."""
    try:
        result = await AuthService().reset_password(token=data.token, new_password=data.new_password)
    except PasswordResetError as e:
        raise BadRequestError(str(e)) from e

    return ResetPasswordResponse(**result)


@router.post(
    "/signout",
    response_model=SignOutResponse,
    summary="Sign out",
    description="Revokes the caller's session. Succeeds even if revocation fails.",
)
async def sign_out(user: CurrentUser) -> SignOutResponse:
    result = await AuthService().sign_out(user.access_token)
    return SignOutResponse(**result)
