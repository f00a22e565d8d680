"""Client side of the add-spot flow.

A SpotDraft collects the form fields and the coordinate picked on the map;
SpotSubmissionClient checks the draft locally and only then makes the single
authenticated create call.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from src.schemas.spot import Difficulty, SpotCreate

logger = logging.getLogger(__name__)

MISSING_LOCATION_MESSAGE = "Please click on the map to select a location"
MISSING_FIELDS_MESSAGE = "Please fill in all required fields"


class SpotSubmissionError(Exception):
    """The draft was rejected locally or by the API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class SpotDraft:
    """Add-spot form state."""

    name: str = ""
    sport_type: str = ""
    difficulty: str = Difficulty.BEGINNER.value
    description: str = ""
    latitude: float | None = None
    longitude: float | None = None

    def select_location(self, latitude: float, longitude: float) -> None:
        """Record the coordinate from a map click."""
        self.latitude = latitude
        self.longitude = longitude

    @property
    def has_location(self) -> bool:
        """Whether a map coordinate has been picked."""
        return self.latitude is not None and self.longitude is not None

    def validate(self) -> str | None:
        """Check the draft before anything is sent.

        Returns:
            str | None: The message to show, or None if the draft can be
                submitted.
        """
        if not self.has_location:
            return MISSING_LOCATION_MESSAGE
        if not self.name.strip() or not self.sport_type:
            return MISSING_FIELDS_MESSAGE
        return None

    def to_payload(self) -> SpotCreate:
        """Build the create request body.

        Raises:
            pydantic.ValidationError: If a field breaks the request schema.
        """
        return SpotCreate(
            name=self.name,
            sport_type=self.sport_type,
            difficulty=self.difficulty,
            description=self.description,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class SpotSubmissionClient:
    """Submits spot drafts to the spots endpoint."""

    def __init__(self, http_client: httpx.AsyncClient, spots_path: str = "/api/v1/spots") -> None:
        self.http = http_client
        self.spots_path = spots_path

    async def submit(self, draft: SpotDraft, access_token: str | None) -> dict[str, Any]:
        """Validate the draft and create the spot.

        Args:
            draft: Form state.
            access_token: The signed-in user's access token.

        Returns:
            dict: The created spot.

        Raises:
            SpotSubmissionError: If the draft is incomplete, the user is not
                signed in, or the API rejects the request.
        """
        message = draft.validate()
        if message:
            raise SpotSubmissionError(message)

        if not access_token:
            raise SpotSubmissionError("You must be logged in to add a spot")

        try:
            payload = draft.to_payload()
        except ValidationError as e:
            raise SpotSubmissionError(_first_error(e)) from e

        response = await self.http.post(
            self.spots_path,
            json=payload.model_dump(mode="json"),
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if response.is_error:
            message = _error_message(response)
            logger.warning("Spot submission failed: %s", message)
            raise SpotSubmissionError(message, status_code=response.status_code)

        result = response.json()
        logger.info("Spot created successfully: %s", result.get("id"))
        return result


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return f"{field}: {first['msg']}" if field else first["msg"]


def _error_message(response: httpx.Response) -> str:
    """Pull a readable message out of an error response.

    Proxies can answer with HTML, so a body that is not a JSON object falls
    back to the status code.
    """
    fallback = f"HTTP {response.status_code}: Failed to create spot"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if not isinstance(body, dict):
        return fallback
    return body.get("message") or body.get("detail") or fallback
