"""
Unit tests for state/city resolution
"""

import uuid
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from ingestion.resolver import CityCache, LocationResolver
from models.location import City
from core.exceptions import LocationResolutionError


async def count_cities(db_session, name):
    result = await db_session.execute(
        select(func.count()).select_from(City).where(City.name == name)
    )
    return result.scalar()


class TestCityCache:

    def test_key_format(self):
        state_id = uuid.uuid4()
        assert CityCache.key(state_id, "Austin") == f"{state_id}:Austin"

    def test_put_and_get(self):
        cache = CityCache()
        state_id, city_id = uuid.uuid4(), uuid.uuid4()

        assert cache.get(state_id, "Austin") is None
        cache.put(state_id, "Austin", city_id)

        assert cache.get(state_id, "Austin") == city_id
        assert cache.get(state_id, "austin") is None
        assert len(cache) == 1


class TestLocationResolver:

    @pytest.mark.asyncio
    async def test_existing_city_is_found(self, db_session, houston):
        resolver = LocationResolver(db_session)

        city_id = await resolver.resolve("Texas", "Houston")

        assert city_id == houston.id
        assert resolver.cities_created == 0

    @pytest.mark.asyncio
    async def test_new_city_created_once(self, db_session, texas):
        """Resolving the same pair twice creates at most one city"""
        resolver = LocationResolver(db_session)

        with patch.object(resolver, "_try_create_city", wraps=resolver._try_create_city) as create:
            first = await resolver.resolve("Texas", "Austin")
            second = await resolver.resolve("Texas", "Austin")

        assert first == second
        assert create.call_count == 1
        assert resolver.cities_created == 1
        assert await count_cities(db_session, "Austin") == 1

    @pytest.mark.asyncio
    async def test_created_city_copies_state_code(self, db_session, texas):
        resolver = LocationResolver(db_session)
        city_id = await resolver.resolve("Texas", "Dallas")

        city = await db_session.get(City, city_id)
        assert city.state_id == texas.id
        assert city.state_code == "TX"

    @pytest.mark.asyncio
    async def test_unknown_state_returns_none(self, db_session, texas):
        resolver = LocationResolver(db_session)

        assert await resolver.resolve("Ontario", "Toronto") is None
        assert await count_cities(db_session, "Toronto") == 0

    @pytest.mark.asyncio
    async def test_state_names_match_exactly(self, db_session, texas):
        resolver = LocationResolver(db_session)
        assert await resolver.resolve("TX", "Austin") is None

    @pytest.mark.asyncio
    async def test_conflict_fetches_existing_city(self, db_session, houston):
        """An insert that loses the race returns the other writer's row"""
        houston_id = houston.id
        resolver = LocationResolver(db_session)

        # First lookup misses as if the row did not exist yet; the insert then
        # hits the unique (state_id, name) index
        with patch.object(
            resolver, "_find_city", AsyncMock(side_effect=[None, houston_id])
        ):
            city_id = await resolver.resolve("Texas", "Houston")

        assert city_id == houston_id
        assert resolver.cities_created == 0
        assert await count_cities(db_session, "Houston") == 1

    @pytest.mark.asyncio
    async def test_conflict_without_existing_row_raises(self, db_session, texas):
        resolver = LocationResolver(db_session)

        with patch.object(resolver, "_find_city", AsyncMock(return_value=None)), \
                patch.object(resolver, "_try_create_city", AsyncMock(return_value=None)):
            with pytest.raises(LocationResolutionError):
                await resolver.resolve("Texas", "Austin")

    @pytest.mark.asyncio
    async def test_lookup_failure_raises_resolution_error(self, texas):
        state_rows = MagicMock()
        state_rows.scalars.return_value.all.return_value = [texas]

        mock_session = AsyncMock()
        mock_session.execute = AsyncMock(
            side_effect=[state_rows, OperationalError("SELECT", {}, Exception("connection lost"))]
        )
        resolver = LocationResolver(mock_session)

        with pytest.raises(LocationResolutionError):
            await resolver.resolve("Texas", "Austin")

    @pytest.mark.asyncio
    async def test_city_exists(self, db_session, houston):
        resolver = LocationResolver(db_session)

        assert await resolver.city_exists(houston.id) is True
        assert await resolver.city_exists(uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_create_failure_rolls_back_and_raises(self, db_session, texas):
        """A non-conflict commit failure surfaces as LocationResolutionError"""
        resolver = LocationResolver(db_session)
        failing_commit = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")))

        with patch.object(db_session, "commit", failing_commit), \
                patch.object(db_session, "rollback", wraps=db_session.rollback) as rollback:
            with pytest.raises(LocationResolutionError) as exc_info:
                await resolver.resolve("Texas", "Austin")

        rollback.assert_called_once()
        assert not db_session.new
        assert "City insert failed" in exc_info.value.message
        assert exc_info.value.context["city_name"] == "Austin"
        assert resolver.cities_created == 0
        assert len(resolver.cache) == 0
        assert await count_cities(db_session, "Austin") == 0
