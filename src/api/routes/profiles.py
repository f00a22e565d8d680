"""Profile API routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, File, UploadFile

from src.api.deps import CurrentUser
from src.api.middleware.error_handler import (
    BadRequestError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from src.core.supabase import create_user_client
from src.schemas.profile import (
    FieldSaveResponse,
    FieldUpdateRequest,
    PhotoUploadResponse,
    ProfileResponse,
)
from src.services.photo_service import (
    PhotoUploadError,
    PhotoValidationError,
    ProfilePhotoService,
)
from src.services.profile_service import (
    ProfileFieldError,
    ProfileService,
    ProfileStoreError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user's profile",
    description="Returns the authenticated user's profile with settings defaults filled in.",
)
async def get_my_profile(user: CurrentUser) -> ProfileResponse:
    """Get the authenticated user's profile.

    Raises:
        NotFoundError: 404 if the profile row does not exist.
    """
    service = ProfileService(create_user_client(user.access_token))
    profile = await service.get_profile(user.user_id)

    if not profile:
        raise NotFoundError("Profile not found")

    return ProfileResponse(**profile)


@router.patch(
    "/me/fields/{field}",
    response_model=FieldSaveResponse,
    summary="Save one profile field",
    description="Validates, normalizes and persists a single profile field.",
    responses={
        422: {"description": "Value failed the field's validation rule"},
        500: {"description": "Save failed"},
    },
)
async def save_profile_field(
    field: str,
    data: FieldUpdateRequest,
    user: CurrentUser,
) -> FieldSaveResponse:
    """Persist one field of the authenticated user's profile.

    Blank optional text is stored as null. A value that fails validation is
    never written and comes back as a field-scoped 422.
    """
    service = ProfileService(create_user_client(user.access_token))

    try:
        value = await service.save_field(user.user_id, field, data.value)
    except ProfileFieldError as e:
        raise ValidationError(e.error.message, details=[e.error.to_detail()]) from e
    except ProfileStoreError as e:
        raise StoreError(str(e)) from e

    return FieldSaveResponse(field=field, value=value, saved_at=datetime.now(timezone.utc))


@router.post(
    "/me/photo",
    response_model=PhotoUploadResponse,
    summary="Upload profile photo",
    responses={
        400: {"description": "Not an image or larger than 2MB"},
        500: {"description": "Upload or save failed"},
    },
)
async def upload_profile_photo(
    user: CurrentUser,
    file: UploadFile = File(..., description="Profile photo (image/*, max 2MB)"),
) -> PhotoUploadResponse:
    """Upload a new profile photo and save its URL on the profile.

    Size and type are checked before anything is sent to storage.
    """
    content = await file.read()

    try:
        photo = await ProfilePhotoService().upload(
            profile_id=user.user_id,
            file_name=file.filename or "photo",
            content=content,
            content_type=file.content_type,
        )
    except PhotoValidationError as e:
        raise BadRequestError(str(e)) from e
    except PhotoUploadError as e:
        raise StoreError(str(e)) from e

    service = ProfileService(create_user_client(user.access_token))
    try:
        await service.save_field(user.user_id, "profile_photo_url", photo.public_url)
    except (ProfileFieldError, ProfileStoreError) as e:
        logger.error("Photo %s uploaded but not saved on profile %s: %s", photo.storage_path, user.user_id, e)
        raise StoreError("Failed to save profile_photo_url") from e

    return PhotoUploadResponse(
        profile_photo_url=photo.public_url,
        display_url=photo.display_url,
        uploaded_at=photo.uploaded_at,
    )
