"""Community stats schemas."""

from pydantic import BaseModel, Field


class CommunityStats(BaseModel):
    """Figures shown on the dashboard stat cards."""

    your_spots: int = Field(default=0, description="Spots created by the caller")
    sessions_attended: int = Field(default=0, description="Sessions the caller attended")
    community_members: int = Field(default=0, description="Registered riders")
    total_spots: int = Field(default=0, description="Spots in the community")
