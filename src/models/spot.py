"""Spot model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class Spot(TypedDict):
    """Spot table row representation."""

    id: UUID
    name: str
    description: str | None
    latitude: float
    longitude: float
    sport_type: str
    difficulty: str
    rating: float
    rating_count: int
    created_by: UUID
    verified: bool
    created_at: datetime
    updated_at: datetime


class SpotInsert(TypedDict):
    """Data inserted when a spot is created.

    rating, rating_count and verified are filled in by column defaults.
    """

    name: str
    description: str | None
    latitude: float
    longitude: float
    sport_type: str
    difficulty: str
    created_by: str
