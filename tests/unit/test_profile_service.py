"""Unit tests for ProfileService."""

from unittest.mock import MagicMock
from uuid import UUID

import pytest

from src.services.profile_service import (
    ProfileFieldError,
    ProfileService,
    ProfileStoreError,
)

PROFILE_ID = UUID("550e8400-e29b-41d4-a716-446655440000")


@pytest.fixture
def supabase() -> MagicMock:
    return MagicMock()


@pytest.fixture
def service(supabase: MagicMock) -> ProfileService:
    return ProfileService(supabase)


def profile_table(supabase: MagicMock) -> MagicMock:
    return supabase.table.return_value


class TestGetProfile:
    """Tests for get_profile."""

    @pytest.mark.asyncio
    async def test_returns_row(self, service: ProfileService, supabase: MagicMock) -> None:
        row = {"id": str(PROFILE_ID), "name": "Kai"}
        profile_table(supabase).select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = (
            MagicMock(data=row)
        )

        result = await service.get_profile(PROFILE_ID)

        assert result == row
        supabase.table.assert_called_with("profiles")
        profile_table(supabase).select.return_value.eq.assert_called_with("id", str(PROFILE_ID))

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, service: ProfileService, supabase: MagicMock) -> None:
        profile_table(supabase).select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = (
            None
        )

        assert await service.get_profile(PROFILE_ID) is None


class TestSaveField:
    """Tests for save_field."""

    @pytest.mark.asyncio
    async def test_writes_normalized_value(self, service: ProfileService, supabase: MagicMock) -> None:
        update = profile_table(supabase).update
        update.return_value.eq.return_value.execute.return_value = MagicMock(data=[{"id": str(PROFILE_ID)}])

        value = await service.save_field(PROFILE_ID, "location", "  Bali  ")

        assert value == "Bali"
        payload = update.call_args.args[0]
        assert payload["location"] == "Bali"
        assert "updated_at" in payload
        update.return_value.eq.assert_called_with("id", str(PROFILE_ID))

    @pytest.mark.asyncio
    async def test_blank_optional_stored_as_null(self, service: ProfileService, supabase: MagicMock) -> None:
        update = profile_table(supabase).update
        update.return_value.eq.return_value.execute.return_value = MagicMock(data=[{"id": str(PROFILE_ID)}])

        value = await service.save_field(PROFILE_ID, "bio", "   ")

        assert value is None
        assert update.call_args.args[0]["bio"] is None

    @pytest.mark.asyncio
    async def test_invalid_value_is_not_written(self, service: ProfileService, supabase: MagicMock) -> None:
        with pytest.raises(ProfileFieldError) as exc_info:
            await service.save_field(PROFILE_ID, "name", "  ")

        assert exc_info.value.error.field == "name"
        profile_table(supabase).update.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_failure(self, service: ProfileService, supabase: MagicMock) -> None:
        profile_table(supabase).update.return_value.eq.return_value.execute.side_effect = Exception("timeout")

        with pytest.raises(ProfileStoreError) as exc_info:
            await service.save_field(PROFILE_ID, "location", "Bali")

        assert "Failed to save location" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_no_matching_row(self, service: ProfileService, supabase: MagicMock) -> None:
        profile_table(supabase).update.return_value.eq.return_value.execute.return_value = MagicMock(data=[])

        with pytest.raises(ProfileStoreError):
            await service.save_field(PROFILE_ID, "location", "Bali")


class TestIncrementSpotsDiscovered:
    """Tests for the best-effort spot counter."""

    @pytest.mark.asyncio
    async def test_increments_current_count(self, service: ProfileService, supabase: MagicMock) -> None:
        table = profile_table(supabase)
        table.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = MagicMock(
            data={"spots_discovered": 4}
        )

        result = await service.increment_spots_discovered(PROFILE_ID)

        assert result == 5
        table.update.assert_called_once_with({"spots_discovered": 5})

    @pytest.mark.asyncio
    async def test_missing_count_starts_at_one(self, service: ProfileService, supabase: MagicMock) -> None:
        table = profile_table(supabase)
        table.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = MagicMock(
            data={"spots_discovered": None}
        )

        assert await service.increment_spots_discovered(PROFILE_ID) == 1

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, service: ProfileService, supabase: MagicMock) -> None:
        table = profile_table(supabase)
        table.select.return_value.eq.return_value.maybe_single.return_value.execute.side_effect = Exception("down")

        assert await service.increment_spots_discovered(PROFILE_ID) is None
        table.update.assert_not_called()
