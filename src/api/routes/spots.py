"""Spot API routes."""

from fastapi import APIRouter, status

from src.api.deps import CurrentUser
from src.api.middleware.error_handler import BadRequestError, StoreError
from src.core.supabase import create_user_client
from src.schemas.spot import SpotCreate, SpotFeatureCollection, SpotResponse
from src.services.map_service import build_feature_collection
from src.services.spot_service import (
    SpotService,
    SpotStoreError,
    SpotValidationError,
)

router = APIRouter(prefix="/spots", tags=["spots"])


@router.get(
    "",
    response_model=list[SpotResponse],
    summary="List spots",
    description="Returns every spot, newest first.",
)
async def list_spots() -> list[SpotResponse]:
    """List all community spots ordered by creation time, newest first."""
    try:
        spots = await SpotService().list_spots()
    except SpotStoreError as e:
        raise StoreError(str(e)) from e

    return [SpotResponse(**spot) for spot in spots]


@router.post(
    "",
    response_model=SpotResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a spot",
    responses={
        201: {"description": "Spot created"},
        400: {"description": "Missing or invalid fields"},
        401: {"description": "Missing or invalid bearer token"},
        500: {"description": "Database error"},
    },
)
async def create_spot(data: SpotCreate, user: CurrentUser) -> SpotResponse:
    """Create a spot as the authenticated user.

    The insert runs with the caller's token so row-level security applies.
    On success the caller's spot counter is bumped on a best-effort basis.
    """
    service = SpotService(create_user_client(user.access_token))

    try:
        spot = await service.create_spot(user, data)
    except SpotValidationError as e:
        raise BadRequestError(str(e)) from e
    except SpotStoreError as e:
        raise StoreError(str(e)) from e

    return SpotResponse(**spot)


@router.get(
    "/map",
    response_model=SpotFeatureCollection,
    summary="Spot map markers",
    description="Every spot as a GeoJSON feature with marker colour and popup labels, plus a viewport.",
)
async def spot_map() -> SpotFeatureCollection:
    """Marker data for the map widget.

    Returns:
        SpotFeatureCollection: GeoJSON markers and a viewport framing them.

    Raises:
        StoreError: If the spots could not be read.
    """
    try:
        spots = await SpotService().list_spots()
    except SpotStoreError as e:
        raise StoreError(str(e)) from e

    return build_feature_collection(spots)
