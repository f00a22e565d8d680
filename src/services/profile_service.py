"""Profile business logic service."""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from supabase import Client

from src.core.supabase import get_supabase_client
from src.models.profile import Profile, ProfileUpdate
from src.services.profile_fields import (
    FieldValidationError,
    prepare_field_value,
    validate_field,
)

logger = logging.getLogger(__name__)


class ProfileServiceError(Exception):
    """Base exception for profile service errors."""

    pass


class ProfileFieldError(ProfileServiceError):
    """A field value failed its validation rule; nothing was written."""

    def __init__(self, error: FieldValidationError) -> None:
        self.error = error
        super().__init__(error.message)


class ProfileStoreError(ProfileServiceError):
    """The data store rejected or failed a profile write."""

    pass


class ProfileService:
    """Service for reading and updating rider profiles."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize profile service.

        Args:
            client: Supabase client to use. Pass a user-scoped client to
                have row-level security apply; defaults to the backend
                singleton.
        """
        self.client = client or get_supabase_client()

    async def get_profile(self, profile_id: UUID) -> Profile | None:
        """Get a profile by id.

        Args:
            profile_id: The profile's UUID (same as the auth user id).

        Returns:
            dict | None: The profile data or None if not found.
        """
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("id", str(profile_id))
            .maybe_single()
            .execute()
        )

        if response is None or not response.data:
            return None
        return response.data

    async def update_fields(
        self,
        profile_id: UUID,
        updates: ProfileUpdate,
    ) -> Profile | None:
        """Write already-validated columns to a profile.

        Args:
            profile_id: The profile's UUID.
            updates: Column values to write.

        Returns:
            dict | None: The updated row, or None if no row matched.

        Raises:
            ProfileStoreError: If the store call fails.
        """
        payload = {**updates, "updated_at": datetime.now(timezone.utc).isoformat()}

        try:
            response = (
                self.client.table("profiles")
                .update(payload)
                .eq("id", str(profile_id))
                .execute()
            )
        except Exception as e:
            logger.error("Profile update failed for %s: %s", profile_id, e)
            raise ProfileStoreError(f"Failed to save {', '.join(updates)}") from e

        return response.data[0] if response.data else None

    async def save_field(self, profile_id: UUID, field: str, raw_value: Any) -> Any:
        """Normalize, validate and persist one editable field.

        Args:
            profile_id: The profile's UUID.
            field: Column name.
            raw_value: Value as entered by the user.

        Returns:
            The normalized value that was written.

        Raises:
            ProfileFieldError: If the value fails validation.
            ProfileStoreError: If the write fails or no profile matched.
        """
        value = prepare_field_value(field, raw_value)

        error = validate_field(field, value)
        if error:
            raise ProfileFieldError(error)

        updated = await self.update_fields(profile_id, {field: value})
        if updated is None:
            raise ProfileStoreError(f"Failed to save {field}")

        logger.info("Saved profile field %s for %s", field, profile_id)
        return value

    async def increment_spots_discovered(self, profile_id: UUID) -> int | None:
        """Bump the creator's spot counter after a spot is created.

        Best-effort: reads the current count then writes count + 1 without a
        transaction, and never raises.

        Args:
            profile_id: The creator's profile UUID.

        Returns:
            int | None: The new count, or None if the update failed.
        """
        try:
            response = (
                self.client.table("profiles")
                .select("spots_discovered")
                .eq("id", str(profile_id))
                .maybe_single()
                .execute()
            )
            current = (response.data or {}).get("spots_discovered") if response else None
            new_count = (current or 0) + 1

            (
                self.client.table("profiles")
                .update({"spots_discovered": new_count})
                .eq("id", str(profile_id))
                .execute()
            )
        except Exception as e:
            logger.warning("Update spot count failed (non-critical): %s", e)
            return None

        logger.info("Updated spots_discovered for %s to %d", profile_id, new_count)
        return new_count
