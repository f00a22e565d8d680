"""Runtime configuration, read from the environment (and .env when present)."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings.

    Field names map to upper-case environment variables
    (supabase_url <- SUPABASE_URL). Only the Supabase URL and secret key are
    mandatory; everything else has a development default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    app_name: str = Field(default="actioo-api", description="Service name used in logs and probes")
    app_env: str = Field(default="development", description="development, staging or production")
    debug: bool = Field(default=False, description="Expose the OpenAPI docs and enable reload")
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port")

    # Web client
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Allowed browser origins, comma-separated",
    )
    auth_redirect_url: str = Field(
        default="http://localhost:3000",
        description="Web app base URL that recovery emails link back to",
    )

    # Supabase project
    supabase_url: str = Field(..., description="Project URL, e.g. https://<ref>.supabase.co")
    supabase_secret_key: str = Field(..., description="Secret key; bypasses row-level security")
    supabase_anon_key: str = Field(default="", description="Publishable key for user-scoped clients")
    supabase_jwt_secret: str = Field(default="", description="Legacy HS256 token secret")
    supabase_signing_key_jwk: str = Field(
        default="",
        description="Public ES256 signing key as a JWK JSON string; preferred over the HS256 secret",
    )

    # Profile photos
    profile_photo_bucket: str = Field(default="profile-photos", description="Storage bucket for profile photos")
    max_photo_size_bytes: int = Field(default=2 * 1024 * 1024, description="Largest accepted photo (2 MB)")

    # Profile editor timings
    autosave_debounce_seconds: float = Field(default=1.0, description="Quiet period before a text field is saved")
    saved_status_seconds: float = Field(default=2.0, description="How long the 'saved' status is shown")

    # Requests
    max_request_body_size: int = Field(default=5 * 1024 * 1024, description="Largest accepted request body")

    # Map fallback camera (continental US)
    default_map_longitude: float = Field(default=-98.5795)
    default_map_latitude: float = Field(default=39.8283)
    default_map_zoom: float = Field(default=4)

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def user_client_key(self) -> str:
        """Key for clients acting as a user; the secret key if no anon key is set."""
        return self.supabase_anon_key or self.supabase_secret_key


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings; call get_settings.cache_clear() to re-read the environment."""
    return Settings()
