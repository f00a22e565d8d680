"""Unit tests for community dashboard stats."""

from unittest.mock import MagicMock
from uuid import UUID

import pytest

from src.services.stats_service import StatsService

USER_ID = UUID("550e8400-e29b-41d4-a716-446655440000")


def make_supabase(spots_total: int, user_spots: int, members: int, sessions: int | None) -> MagicMock:
    spots = MagicMock()
    spots.select.return_value.execute.return_value = MagicMock(count=spots_total)
    spots.select.return_value.eq.return_value.execute.return_value = MagicMock(count=user_spots)

    profiles = MagicMock()
    profiles.select.return_value.execute.return_value = MagicMock(count=members)
    profiles.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = MagicMock(
        data={"sessions_attended": sessions}
    )

    supabase = MagicMock()
    supabase.table.side_effect = lambda name: {"spots": spots, "profiles": profiles}[name]
    return supabase


class TestCommunityStats:
    @pytest.mark.asyncio
    async def test_aggregates_counts(self) -> None:
        supabase = make_supabase(spots_total=42, user_spots=3, members=17, sessions=5)

        stats = await StatsService(supabase).community_stats(USER_ID)

        assert stats.your_spots == 3
        assert stats.total_spots == 42
        assert stats.community_members == 17
        assert stats.sessions_attended == 5

    @pytest.mark.asyncio
    async def test_filters_user_spots_by_creator(self) -> None:
        supabase = make_supabase(spots_total=1, user_spots=1, members=1, sessions=0)

        await StatsService(supabase).community_stats(USER_ID)

        spots = supabase.table("spots")
        spots.select.assert_called_with("id", count="exact")
        spots.select.return_value.eq.assert_called_with("created_by", str(USER_ID))

    @pytest.mark.asyncio
    async def test_missing_values_count_as_zero(self) -> None:
        supabase = make_supabase(spots_total=None, user_spots=None, members=None, sessions=None)

        stats = await StatsService(supabase).community_stats(USER_ID)

        assert stats.model_dump() == {
            "your_spots": 0,
            "sessions_attended": 0,
            "community_members": 0,
            "total_spots": 0,
        }
