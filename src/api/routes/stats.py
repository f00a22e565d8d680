"""Community stats API routes."""

from fastapi import APIRouter

from src.api.deps import CurrentUser
from src.schemas.stats import CommunityStats
from src.services.stats_service import StatsService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get(
    "/community",
    response_model=CommunityStats,
    summary="Dashboard stats",
    description="Your spots, sessions attended, community size and total spots.",
)
async def community_stats(user: CurrentUser) -> CommunityStats:
    """Get the dashboard figures for the authenticated user.

    Args:
        user: Authenticated user context.

    Returns:
        CommunityStats: Spot, session and community counts.
    """
    return await StatsService().community_stats(user.user_id)
