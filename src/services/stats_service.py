"""Community dashboard statistics."""

import logging
from uuid import UUID

from supabase import Client

from src.core.supabase import get_supabase_client
from src.schemas.stats import CommunityStats

logger = logging.getLogger(__name__)


class StatsService:
    """Aggregate counts for the dashboard stat cards."""

    def __init__(self, client: Client | None = None) -> None:
        self.client = client or get_supabase_client()

    def _count(self, table: str, **filters: str) -> int:
        query = self.client.table(table).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        response = query.execute()
        return response.count or 0

    async def community_stats(self, user_id: UUID) -> CommunityStats:
        """Compute the caller's dashboard figures.

        The caller's spot count comes from the spots table rather than the
        profile counter, which is only maintained on a best-effort basis.
        """
        profile = (
            self.client.table("profiles")
            .select("sessions_attended")
            .eq("id", str(user_id))
            .maybe_single()
            .execute()
        )
        sessions = ((profile.data if profile else None) or {}).get("sessions_attended") or 0

        return CommunityStats(
            your_spots=self._count("spots", created_by=str(user_id)),
            sessions_attended=sessions,
            community_members=self._count("profiles"),
            total_spots=self._count("spots"),
        )
