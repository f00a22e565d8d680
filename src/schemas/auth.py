"""Token, caller identity and account recovery schemas."""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserContext(BaseModel):
    """The authenticated caller.

    Built by the auth dependency from a verified access token. The raw
    token travels along so routes can open user-scoped Supabase clients
    that row-level security applies to.
    """

    user_id: UUID = Field(description="Supabase auth user id (the token's sub claim)")
    email: str | None = Field(default=None, description="Account email, when the token carries one")
    role: str | None = Field(default=None, description="Postgres role, normally 'authenticated'")
    access_token: str = Field(default="", repr=False, description="Verified bearer token")


class TokenPayload(BaseModel):
    """Claims read from a Supabase access token."""

    sub: str
    email: str | None = None
    role: str | None = None
    exp: int = Field(description="Expiry, seconds since the epoch")
    iat: int = Field(description="Issue time, seconds since the epoch")
    aud: str | None = None
    iss: str | None = None

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)

    def to_user_context(self, access_token: str = "") -> UserContext:
        return UserContext(
            user_id=UUID(self.sub),
            email=self.email,
            role=self.role,
            access_token=access_token,
        )


class AuthenticatedResponse(BaseModel):
    """Identity echoed back by the authenticated health probe."""

    authenticated: bool = True
    user_id: str
    email: str | None = None
    role: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(description="Address to send the recovery link to")


class ForgotPasswordResponse(BaseModel):
    message: str
    email_sent: bool = Field(description="Always true; does not reveal whether the account exists")


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1, description="Token hash from the recovery link")
    new_password: str = Field(min_length=8, max_length=100, description="New password")


class ResetPasswordResponse(BaseModel):
    message: str
    redirect_url: str | None = Field(default=None, description="Where the client should navigate next")


class SignOutResponse(BaseModel):
    message: str
