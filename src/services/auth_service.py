"""Password recovery and sign-out through Supabase Auth."""

import logging

from src.core.config import get_settings
from src.core.supabase import create_auth_client

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists with this email, a password reset link has been sent."
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired password reset token"


class PasswordResetError(Exception):
    """The recovery token was rejected or the new password could not be set."""

    pass


class AuthService:
    """Account recovery flows.

    Each instance owns an isolated auth client, since recovery sets a
    session on the client it runs on.
    """

    def __init__(self) -> None:
        self.client = create_auth_client()
        self.redirect_base = get_settings().auth_redirect_url

    async def request_password_reset(self, email: str) -> dict[str, str | bool]:
        """Email a recovery link.

        The result is the same whether or not the address belongs to an
        account; provider errors are only logged.
        """
        try:
            self.client.auth.reset_password_for_email(
                email,
                options={"redirect_to": f"{self.redirect_base}/reset-password"},
            )
            logger.info("Password reset email requested for %s", email)
        except Exception as e:
            logger.error("Password reset request failed for %s: %s", email, e)

        return {"email_sent": True, "message": RESET_REQUESTED_MESSAGE}

    async def reset_password(self, token: str, new_password: str) -> dict[str, str]:
        """Exchange a recovery token for a session and set the new password.

        Args:
            token: Token hash from the recovery email link.
            new_password: Password to set.

        Returns:
            dict: Confirmation message and where to send the user next.

        Raises:
            PasswordResetError: If the token is invalid or expired, or the
                password update is refused.
        """
        try:
            verified = self.client.auth.verify_otp({"token_hash": token, "type": "recovery"})
        except Exception as e:
            logger.warning("Recovery token rejected: %s", e)
            raise PasswordResetError(INVALID_RESET_TOKEN_MESSAGE) from e

        if not verified.user or not verified.session:
            raise PasswordResetError(INVALID_RESET_TOKEN_MESSAGE)

        try:
            self.client.auth.set_session(verified.session.access_token, verified.session.refresh_token)
            updated = self.client.auth.update_user({"password": new_password})
        except Exception as e:
            logger.error("Password update failed for %s: %s", verified.user.id, e)
            raise PasswordResetError(f"Password reset failed: {e}") from e

        if not updated.user:
            raise PasswordResetError("Failed to update password")

        logger.info("Password reset for user %s", verified.user.id)
        return {
            "message": "Password has been reset successfully",
            "redirect_url": f"{self.redirect_base}/?success=password-reset",
        }

    async def sign_out(self, access_token: str) -> dict[str, str]:
        """Revoke the session behind an access token.

        Revocation failures are logged only; the client discards its token
        regardless.
        """
        try:
            self.client.auth.admin.sign_out(access_token)
            logger.info("Session revoked")
        except Exception as e:
            logger.warning("Session revocation failed: %s", e)

        return {"message": "Signed out successfully"}
