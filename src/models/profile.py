"""Profile model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class PrivacySettings(TypedDict):
    """Visibility switches stored as JSONB on the profile row."""

    profile_public: bool
    show_email: bool


class EmailPreferences(TypedDict):
    """Notification opt-ins stored as JSONB on the profile row."""

    spot_notifications: bool
    session_invites: bool
    community_updates: bool


class Profile(TypedDict):
    """Profile table row representation.

    The row id is the Supabase auth user id. Optional scalar columns are
    NULL when blank, never empty strings.
    """

    id: UUID
    email: str
    name: str
    sport: str | None
    skill_level: str
    location: str | None
    bio: str | None
    profile_photo_url: str | None
    instagram_handle: str | None
    privacy_settings: PrivacySettings
    email_preferences: EmailPreferences
    spots_discovered: int
    sessions_attended: int
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(TypedDict, total=False):
    """Columns the editor is allowed to write."""

    name: str
    sport: str | None
    skill_level: str
    location: str | None
    bio: str | None
    profile_photo_url: str | None
    instagram_handle: str | None
    privacy_settings: PrivacySettings
    email_preferences: EmailPreferences
    updated_at: str
