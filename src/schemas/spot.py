"""Spot Pydantic schemas for API request/response models."""

from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SportType(str, Enum):
    """Categories a spot can be filed under."""

    SKATEBOARDING = "skateboarding"
    SURFING = "surfing"
    MOUNTAIN_BIKING = "mountain_biking"
    SNOWBOARDING = "snowboarding"
    BMX = "bmx"
    ROCK_CLIMBING = "rock_climbing"


class Difficulty(str, Enum):
    """Spot difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SpotCreate(BaseModel):
    """Schema for creating a spot.

    Presence of the required fields is checked by the spot service so a
    missing field maps to a 400 rather than a schema error.
    """

    name: str | None = Field(default=None, max_length=255, description="Spot name")
    sport_type: str | None = Field(default=None, description="Spot category")
    latitude: float | None = Field(default=None, description="Latitude in decimal degrees")
    longitude: float | None = Field(default=None, description="Longitude in decimal degrees")
    difficulty: str = Field(default=Difficulty.BEGINNER.value, description="Difficulty level")
    description: str | None = Field(default=None, description="Optional description")


class SpotResponse(BaseModel):
    """Schema for spot API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Spot unique identifier")
    name: str = Field(description="Spot name")
    description: str | None = Field(default=None, description="Spot description")
    latitude: float = Field(description="Latitude")
    longitude: float = Field(description="Longitude")
    sport_type: SportType = Field(description="Spot category")
    difficulty: Difficulty = Field(default=Difficulty.BEGINNER, description="Difficulty level")
    rating: float = Field(default=0, description="Average rating")
    rating_count: int = Field(default=0, description="Number of ratings")
    verified: bool = Field(default=False, description="Verified by moderators")
    created_by: UUID = Field(description="Creator's user id")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")


# Map marker schemas (GeoJSON)


class PointGeometry(BaseModel):
    """GeoJSON point; coordinates are [longitude, latitude]."""

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]


class SpotMarkerProperties(BaseModel):
    """Data the map widget needs to draw a marker and its popup."""

    id: UUID
    name: str
    description: str | None = None
    sport_type: str
    sport_label: str
    difficulty: str
    difficulty_label: str
    color: str
    rating: float = 0


class SpotFeature(BaseModel):
    """A single spot marker."""

    type: Literal["Feature"] = "Feature"
    geometry: PointGeometry
    properties: SpotMarkerProperties


class MapViewport(BaseModel):
    """Initial camera for the map widget."""

    center: tuple[float, float] = Field(description="[longitude, latitude]")
    zoom: float | None = Field(default=None, description="Zoom level when not fitting bounds")
    bounds: tuple[tuple[float, float], tuple[float, float]] | None = Field(
        default=None,
        description="[[west, south], [east, north]] covering every spot",
    )


class SpotFeatureCollection(BaseModel):
    """All spot markers plus the viewport that frames them."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[SpotFeature] = Field(default_factory=list)
    viewport: MapViewport
