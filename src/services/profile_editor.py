"""Auto-saving profile editor.

Holds the in-memory form for one profile and persists each field on its own,
without a page-level submit:

- text fields are saved when they lose focus, after a quiet period, and only
  when the normalized value differs from what is stored;
- selection fields (sport, skill level, toggles) are saved immediately;
- photo uploads are validated before any upload, then the resulting URL goes
  through the immediate-save path.

Every write is validated first. Failures are recorded per field and never
retried; the user re-triggers the edit. A single status flag
(idle/saving/saved/error) drives the save indicator.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol
from uuid import UUID

from src.core.config import get_settings
from src.services.photo_service import (
    PhotoServiceError,
    UploadedPhoto,
    cache_busted_url,
)
from src.services.profile_fields import (
    FIELD_RULES,
    SELECTION_FIELDS,
    TEXT_FIELDS,
    default_form_data,
    prepare_field_value,
    validate_field,
)
from src.services.profile_service import ProfileStoreError

logger = logging.getLogger(__name__)


class SaveStatus(str, Enum):
    """Global save indicator states."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class ProfileStore(Protocol):
    async def update_fields(self, profile_id: UUID, updates: dict[str, Any]) -> dict[str, Any] | None: ...


class PhotoUploader(Protocol):
    async def upload(
        self,
        profile_id: UUID,
        file_name: str,
        content: bytes,
        content_type: str | None,
    ) -> UploadedPhoto: ...


class ProfileEditor:
    """Form state and per-field persistence for one profile."""

    def __init__(
        self,
        profile: dict[str, Any],
        store: ProfileStore,
        photos: PhotoUploader | None = None,
        debounce_seconds: float | None = None,
        saved_status_seconds: float | None = None,
    ) -> None:
        """Initialize the editor from a stored profile row.

        Args:
            profile: Profile row as read from the store.
            store: Where field writes go (update-by-id).
            photos: Photo uploader; required only for upload_photo().
            debounce_seconds: Quiet period for text fields (default from settings).
            saved_status_seconds: How long "saved" is shown (default from settings).
        """
        settings = get_settings()
        self.profile_id = UUID(str(profile["id"]))
        self.store = store
        self.photos = photos
        self.debounce_seconds = (
            debounce_seconds if debounce_seconds is not None else settings.autosave_debounce_seconds
        )
        self.saved_status_seconds = (
            saved_status_seconds if saved_status_seconds is not None else settings.saved_status_seconds
        )

        self.form_data: dict[str, Any] = default_form_data(profile)
        self.status = SaveStatus.IDLE
        self.last_saved: datetime | None = None
        self.errors: dict[str, str] = {}

        self.uploading = False
        self.image_key = 0
        self.photo_message: str | None = None
        self.photo_error: str | None = None

        # Normalized values currently in the store; blur compares against these
        self._baseline: dict[str, Any] = {
            field: prepare_field_value(field, profile.get(field) or "") for field in TEXT_FIELDS
        }
        self._pending: dict[str, asyncio.Task[bool]] = {}
        self._inflight: set[asyncio.Task[bool]] = set()
        self._status_reset: asyncio.Task[None] | None = None

    @property
    def saving(self) -> bool:
        """Whether a write is talking to the store right now."""
        return self.status is SaveStatus.SAVING

    @property
    def pending_fields(self) -> set[str]:
        """Fields with a debounced save that has not fired yet."""
        return {field for field, task in self._pending.items() if not task.done()}

    @property
    def photo_display_url(self) -> str | None:
        """Photo URL with a cache-busting suffix once a new photo is uploaded."""
        url = self.form_data.get("profile_photo_url")
        if not url:
            return None
        return cache_busted_url(url, self.image_key) if self.image_key else url

    def change(self, field: str, value: Any) -> None:
        """Record a keystroke or selection in local state.

        Any error shown for the field is cleared straight away.

        Args:
            field: Editable field name.
            value: Raw value from the input.

        Raises:
            ValueError: If the field is not editable.
        """
        self._require_field(field)
        self.form_data[field] = value
        self.errors.pop(field, None)

    def blur(self, field: str) -> bool:
        """Handle a text field losing focus.

        Schedules a debounced save when the normalized value differs from
        the stored one, replacing any save already pending for the field.
        Reverting to the stored value drops the pending save instead.

        Args:
            field: Name of a text field.

        Returns:
            bool: True if a save was scheduled.

        Raises:
            ValueError: If the field is not a text field.
        """
        if field not in TEXT_FIELDS:
            raise ValueError(f"{field} is not a text field")

        value = prepare_field_value(field, self.form_data.get(field, ""))
        if value == self._baseline.get(field):
            pending = self._pending.pop(field, None)
            if pending and not pending.done():
                pending.cancel()
            return False

        self._schedule(field, value)
        return True

    async def select(self, field: str, value: Any) -> bool:
        """Change a selection field and persist it immediately.

        Args:
            field: Name of a selection field.
            value: Selected value; blank clears an optional selection.

        Returns:
            bool: True if the value was saved.
        """
        if field not in SELECTION_FIELDS:
            raise ValueError(f"{field} is not a selection field")

        self.change(field, value)
        return await self._persist(field, prepare_field_value(field, value))

    async def set_privacy(self, key: str, value: bool) -> bool:
        """Flip one privacy toggle and persist the whole settings object."""
        settings = {**self.form_data["privacy_settings"], key: value}
        return await self.select("privacy_settings", settings)

    async def set_email_preference(self, key: str, value: bool) -> bool:
        """Flip one email preference and persist the whole settings object."""
        preferences = {**self.form_data["email_preferences"], key: value}
        return await self.select("email_preferences", preferences)

    async def upload_photo(self, file_name: str, content: bytes, content_type: str | None) -> bool:
        """Upload a new profile photo and save its URL.

        Size and type are checked before anything is sent to storage.

        Args:
            file_name: Original file name, used for the extension.
            content: File bytes.
            content_type: MIME type reported by the browser.

        Returns:
            bool: True if the photo was uploaded and its URL saved.
        """
        if self.photos is None:
            raise RuntimeError("ProfileEditor has no photo uploader configured")

        self.photo_message = None
        self.photo_error = None
        self.uploading = True
        try:
            photo = await self.photos.upload(self.profile_id, file_name, content, content_type)
        except PhotoServiceError as e:
            logger.info("Profile photo rejected for %s: %s", self.profile_id, e)
            self.photo_error = str(e)
            return False
        finally:
            self.uploading = False

        saved = await self._persist("profile_photo_url", photo.public_url)

        self.form_data["profile_photo_url"] = photo.public_url
        self.image_key = photo.uploaded_at_ms
        if saved:
            self.photo_message = "Profile photo updated!"
        else:
            self.photo_error = self.errors.get("profile_photo_url")
        return saved

    async def flush(self) -> None:
        """Wait for every pending and in-flight save to finish."""
        while self._pending or self._inflight:
            tasks = [*self._pending.values(), *self._inflight]
            await asyncio.gather(*tasks, return_exceptions=True)

    async def close(self) -> None:
        """Drop pending debounced saves and the status timer.

        Saves already talking to the store are left to finish.
        """
        timers = list(self._pending.values())
        if self._status_reset:
            timers.append(self._status_reset)
        for task in timers:
            task.cancel()
        await asyncio.gather(*timers, return_exceptions=True)
        self._pending.clear()
        self._status_reset = None

    def _require_field(self, field: str) -> None:
        if field not in FIELD_RULES:
            raise ValueError(f"{field} is not an editable field")

    def _schedule(self, field: str, value: Any) -> None:
        previous = self._pending.get(field)
        if previous and not previous.done():
            previous.cancel()

        task = asyncio.create_task(self._debounced_persist(field, value))
        self._pending[field] = task

    async def _debounced_persist(self, field: str, value: Any) -> bool:
        await asyncio.sleep(self.debounce_seconds)

        # Past the quiet period: a newer edit must no longer cancel this write
        task = asyncio.current_task()
        if self._pending.get(field) is task:
            del self._pending[field]
        if task is not None:
            self._inflight.add(task)
        try:
            return await self._persist(field, value)
        finally:
            self._inflight.discard(task)

    async def _persist(self, field: str, value: Any) -> bool:
        self.status = SaveStatus.SAVING

        error = validate_field(field, value)
        if error:
            logger.info("Validation failed for %s: %s", field, error.message)
            self.errors[field] = error.message
            self.status = SaveStatus.ERROR
            return False

        self.errors.pop(field, None)

        try:
            updated = await self.store.update_fields(self.profile_id, {field: value})
        except ProfileStoreError as e:
            logger.error("Auto-save failed for %s: %s", field, e)
            updated = None

        if updated is None:
            self.errors[field] = f"Failed to save {field}"
            self.status = SaveStatus.ERROR
            return False

        if field in TEXT_FIELDS:
            self._baseline[field] = value
        self.last_saved = datetime.now(timezone.utc)
        self.status = SaveStatus.SAVED
        self._restart_status_timer()
        logger.debug("Auto-saved %s for %s", field, self.profile_id)
        return True

    def _restart_status_timer(self) -> None:
        if self._status_reset and not self._status_reset.done():
            self._status_reset.cancel()
        self._status_reset = asyncio.create_task(self._reset_status_later())

    async def _reset_status_later(self) -> None:
        await asyncio.sleep(self.saved_status_seconds)
        if self.status is SaveStatus.SAVED:
            self.status = SaveStatus.IDLE
