"""Spot listing and creation service."""

import logging

from supabase import Client

from src.core.supabase import get_supabase_client
from src.models.spot import Spot, SpotInsert
from src.schemas.auth import UserContext
from src.schemas.spot import Difficulty, SpotCreate, SportType
from src.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

SPORT_TYPES = frozenset(s.value for s in SportType)
DIFFICULTIES = frozenset(d.value for d in Difficulty)


class SpotServiceError(Exception):
    """Base exception for spot service errors."""

    pass


class SpotValidationError(SpotServiceError):
    """Spot payload is missing fields or has invalid values."""

    pass


class SpotStoreError(SpotServiceError):
    """The data store rejected or failed a spot request."""

    pass


def build_spot_row(data: SpotCreate, created_by: str) -> SpotInsert:
    """Validate a create payload and shape it into a row to insert.

    Raises:
        SpotValidationError: If a required field is missing or a value is
            outside its enumeration or range.
    """
    name = (data.name or "").strip()
    if not name or not data.sport_type or data.latitude is None or data.longitude is None:
        raise SpotValidationError("Missing required fields")

    if data.sport_type not in SPORT_TYPES:
        raise SpotValidationError(f"Invalid sport_type: {data.sport_type}")

    difficulty = data.difficulty or Difficulty.BEGINNER.value
    if difficulty not in DIFFICULTIES:
        raise SpotValidationError(f"Invalid difficulty: {difficulty}")

    latitude = float(data.latitude)
    longitude = float(data.longitude)
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise SpotValidationError("Invalid coordinates")

    return {
        "name": name,
        "description": (data.description or "").strip() or None,
        "latitude": latitude,
        "longitude": longitude,
        "sport_type": data.sport_type,
        "difficulty": difficulty,
        "created_by": created_by,
    }


class SpotService:
    """Service for community spots."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize spot service.

        Args:
            client: Supabase client; pass a user-scoped client for writes so
                row-level security applies.
        """
        self.client = client or get_supabase_client()

    async def list_spots(self) -> list[Spot]:
        """Get every spot, newest first.

        Raises:
            SpotStoreError: If the query fails.
        """
        try:
            response = (
                self.client.table("spots")
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("GET spots error: %s", e)
            raise SpotStoreError(f"Database error: {e}") from e

        return response.data or []

    async def create_spot(self, user: UserContext, data: SpotCreate) -> Spot:
        """Create a spot for the authenticated user.

        After the insert succeeds, the creator's spot counter is bumped on a
        best-effort basis; a failed bump does not fail the request.

        Args:
            user: The authenticated caller.
            data: Spot fields.

        Returns:
            dict: The inserted spot row.

        Raises:
            SpotValidationError: If required fields are missing or invalid.
            SpotStoreError: If the insert fails.
        """
        row = build_spot_row(data, created_by=str(user.user_id))
        logger.info("Creating spot for user %s: %s", user.user_id, row["name"])

        try:
            response = self.client.table("spots").insert(row).execute()
        except Exception as e:
            logger.error("Insert error: %s", e)
            raise SpotStoreError(f"Database error: {e}") from e

        if not response.data:
            raise SpotStoreError("Database error: insert returned no row")

        spot = response.data[0]
        logger.info("Spot created: %s", spot.get("id"))

        await ProfileService(self.client).increment_spots_discovered(user.user_id)

        return spot
