"""Profile photo upload to Supabase Storage."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from supabase import Client

from src.core.config import get_settings
from src.core.supabase import get_supabase_client

logger = logging.getLogger(__name__)


class PhotoServiceError(Exception):
    """Base exception for photo service errors."""

    pass


class PhotoValidationError(PhotoServiceError):
    """File rejected before upload (size or type)."""

    pass


class PhotoUploadError(PhotoServiceError):
    """Storage upload failed."""

    pass


@dataclass(frozen=True)
class UploadedPhoto:
    """Where an uploaded photo lives and how to display it."""

    storage_path: str
    public_url: str
    uploaded_at_ms: int

    @property
    def display_url(self) -> str:
        return cache_busted_url(self.public_url, self.uploaded_at_ms)

    @property
    def uploaded_at(self) -> datetime:
        return datetime.fromtimestamp(self.uploaded_at_ms / 1000, tz=timezone.utc)


def cache_busted_url(url: str, key: int) -> str:
    """Replace any query string with ?t=<key> so browsers refetch the image."""
    return f"{url.split('?')[0]}?t={key}"


def validate_photo(size: int, content_type: str | None, max_size: int | None = None) -> None:
    """Reject files that must never reach storage.

    Args:
        size: File size in bytes.
        content_type: Declared MIME type.
        max_size: Size limit in bytes; defaults to the configured limit.

    Raises:
        PhotoValidationError: If the file is too large or not an image.
    """
    limit = max_size if max_size is not None else get_settings().max_photo_size_bytes

    if size > limit:
        raise PhotoValidationError(f"File size must be less than {limit // (1024 * 1024)}MB")

    if not content_type or not content_type.startswith("image/"):
        raise PhotoValidationError("Please select an image file")


class ProfilePhotoService:
    """Uploads profile photos and resolves their public URLs."""

    def __init__(self, client: Client | None = None) -> None:
        self.client = client or get_supabase_client()
        settings = get_settings()
        self.bucket = settings.profile_photo_bucket
        self.max_size = settings.max_photo_size_bytes

    async def upload(
        self,
        profile_id: UUID,
        file_name: str,
        content: bytes,
        content_type: str | None,
    ) -> UploadedPhoto:
        """Validate and upload a profile photo.

        Each upload gets a fresh timestamped key under the profile's folder.

        Args:
            profile_id: Owner of the photo.
            file_name: Original file name (used for the extension).
            content: File bytes.
            content_type: Declared MIME type.

        Returns:
            UploadedPhoto: Storage path, public URL and upload time.

        Raises:
            PhotoValidationError: If the file fails validation; no upload is issued.
            PhotoUploadError: If the storage call fails.
        """
        validate_photo(len(content), content_type, self.max_size)

        timestamp = int(time.time() * 1000)
        extension = file_name.rsplit(".", 1)[-1] if "." in file_name else "jpg"
        storage_path = f"{profile_id}/profile-{timestamp}.{extension}"

        try:
            bucket = self.client.storage.from_(self.bucket)
            bucket.upload(
                path=storage_path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"},
            )
            public_url = bucket.get_public_url(storage_path)
        except Exception as e:
            logger.error("Profile photo upload failed for %s: %s", profile_id, e)
            raise PhotoUploadError(f"Error uploading photo: {e}") from e

        logger.info("Uploaded profile photo %s", storage_path)
        return UploadedPhoto(
            storage_path=storage_path,
            public_url=cache_busted_url(public_url, timestamp),
            uploaded_at_ms=timestamp,
        )
