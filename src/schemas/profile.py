"""Profile Pydantic schemas for API request/response models."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SkillLevel(str, Enum):
    """Self-reported riding level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ProfileSport(str, Enum):
    """Sports a rider can list as their main discipline."""

    SKATEBOARDING = "skateboarding"
    SURFING = "surfing"
    MOUNTAIN_BIKING = "mountain_biking"
    SNOWBOARDING = "snowboarding"
    BMX = "bmx"
    ROCK_CLIMBING = "rock_climbing"
    PARKOUR = "parkour"
    WAKEBOARDING = "wakeboarding"
    KITESURFING = "kitesurfing"


class PrivacySettingsSchema(BaseModel):
    """Profile visibility switches."""

    model_config = ConfigDict(from_attributes=True)

    profile_public: bool = Field(default=True, description="Profile visible to other riders")
    show_email: bool = Field(default=False, description="Email shown on public profile")


class EmailPreferencesSchema(BaseModel):
    """Notification opt-ins."""

    model_config = ConfigDict(from_attributes=True)

    spot_notifications: bool = Field(default=True, description="New spots near the rider")
    session_invites: bool = Field(default=True, description="Invitations to sessions")
    community_updates: bool = Field(default=True, description="Community news")


class ProfileResponse(BaseModel):
    """Schema for profile API responses.

    Settings objects are always present; missing or null columns are
    filled with their defaults.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Profile id (same as the auth user id)")
    email: str | None = Field(default=None, description="Account email")
    name: str = Field(default="", description="Display name")
    sport: str | None = Field(default=None, description="Main sport")
    skill_level: SkillLevel = Field(default=SkillLevel.BEGINNER, description="Skill level")
    location: str | None = Field(default=None, description="Free-text home location")
    bio: str | None = Field(default=None, description="Short bio")
    profile_photo_url: str | None = Field(default=None, description="Public photo URL")
    instagram_handle: str | None = Field(default=None, description="Instagram handle")
    privacy_settings: PrivacySettingsSchema = Field(default_factory=PrivacySettingsSchema)
    email_preferences: EmailPreferencesSchema = Field(default_factory=EmailPreferencesSchema)
    spots_discovered: int = Field(default=0, description="Spots contributed by this rider")
    sessions_attended: int = Field(default=0, description="Sessions attended")
    created_at: datetime | None = Field(default=None, description="Profile creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")

    @field_validator("privacy_settings", "email_preferences", mode="before")
    @classmethod
    def fill_settings_defaults(cls, value: Any) -> Any:
        """Treat a NULL settings column as an empty object."""
        return value if value is not None else {}

    @field_validator("skill_level", mode="before")
    @classmethod
    def default_skill_level(cls, value: Any) -> Any:
        return value or SkillLevel.BEGINNER

    @field_validator("spots_discovered", "sessions_attended", mode="before")
    @classmethod
    def default_counter(cls, value: Any) -> Any:
        return value or 0


class FieldUpdateRequest(BaseModel):
    """A single profile field value sent by the editor."""

    value: Any = Field(default=None, description="New value for the field")


class FieldSaveResponse(BaseModel):
    """Result of persisting a single profile field."""

    field: str = Field(description="Field that was saved")
    value: Any = Field(default=None, description="Normalized value that was written")
    saved_at: datetime = Field(description="When the write completed")


class PhotoUploadResponse(BaseModel):
    """Result of a profile photo upload."""

    profile_photo_url: str = Field(description="Stored photo URL")
    display_url: str = Field(description="Cache-busted URL for rendering")
    uploaded_at: datetime = Field(description="Upload timestamp")
