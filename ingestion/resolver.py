"""
Resolve (state name, city name) pairs to city ids, creating cities on first sight
"""

from typing import Dict, NamedTuple, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import select
from models.location import State, City
from core.exceptions import DatabaseError, LocationResolutionError
import logging
import uuid

logger = logging.getLogger(__name__)


class StateRef(NamedTuple):
    """Plain copy of a state row, safe to keep across commits and rollbacks"""
    id: UUID
    name: str
    state_code: str


class CityCache:
    """
    Per-run memo of resolved city ids keyed by "state_id:city_name".

    Owned by one import run; never shared between runs.
    """

    def __init__(self):
        self._ids: Dict[str, UUID] = {}

    @staticmethod
    def key(state_id: UUID, city_name: str) -> str:
        return f"{state_id}:{city_name}"

    def get(self, state_id: UUID, city_name: str) -> Optional[UUID]:
        return self._ids.get(self.key(state_id, city_name))

    def put(self, state_id: UUID, city_name: str, city_id: UUID):
        self._ids[self.key(state_id, city_name)] = city_id

    def __len__(self) -> int:
        return len(self._ids)


class LocationResolver:
    """
    Resolve and lazily create cities.

    Protocol per (state, city) pair:
    1. unknown state name -> None (caller skips the record)
    2. cache hit -> cached id
    3. existing (state_id, name) row -> its id
    4. try to create; on a uniqueness conflict fetch the row another
       writer created first
    Any other create failure raises LocationResolutionError.
    """

    def __init__(self, db_session: AsyncSession, cache: Optional[CityCache] = None):
        self.db = db_session
        self.cache = cache if cache is not None else CityCache()
        self.cities_created = 0
        self._states_by_name: Optional[Dict[str, StateRef]] = None

    async def load_states(self) -> Dict[str, StateRef]:
        """Load the state table once per run"""
        try:
            result = await self.db.execute(select(State).order_by(State.name))
            states = result.scalars().all()
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to load states",
                context={"operation": "SELECT", "table_name": "states"},
                original_exception=e
            )

        self._states_by_name = {
            s.name: StateRef(id=s.id, name=s.name, state_code=s.state_code)
            for s in states
        }
        logger.info(f"States loaded: {len(self._states_by_name)}")
        return self._states_by_name

    async def state_for(self, state_name: str) -> Optional[StateRef]:
        if self._states_by_name is None:
            await self.load_states()
        return self._states_by_name.get(state_name)

    async def resolve(self, state_name: str, city_name: str) -> Optional[UUID]:
        """
        Resolve a city id for an exact state name and city name.

        Returns:
            City id, or None when the state is unknown

        Raises:
            LocationResolutionError: city lookup or creation failed
        """
        state = await self.state_for(state_name)
        if state is None:
            logger.debug(f"Unknown state {state_name!r}, skipping city {city_name!r}")
            return None

        cached = self.cache.get(state.id, city_name)
        if cached is not None:
            return cached

        city_id = await self._find_city(state.id, city_name)
        if city_id is None:
            city_id = await self._try_create_city(state, city_name)

        if city_id is None:
            # Lost the insert race: the other writer's row must exist now
            city_id = await self._find_city(state.id, city_name)
            if city_id is None:
                raise LocationResolutionError(
                    "City insert conflicted but no existing city was found",
                    context={"state_id": state.id, "city_name": city_name}
                )

        self.cache.put(state.id, city_name, city_id)
        return city_id

    async def city_exists(self, city_id: UUID) -> bool:
        try:
            result = await self.db.execute(select(City.id).where(City.id == city_id))
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to look up city",
                context={"operation": "SELECT", "table_name": "cities", "city_id": city_id},
                original_exception=e
            )
        return result.scalar_one_or_none() is not None

    async def _find_city(self, state_id: UUID, city_name: str) -> Optional[UUID]:
        try:
            result = await self.db.execute(
                select(City.id)
                .where(City.state_id == state_id, City.name == city_name)
                .limit(1)
            )
        except SQLAlchemyError as e:
            raise LocationResolutionError(
                "City lookup failed",
                context={"state_id": state_id, "city_name": city_name},
                original_exception=e
            )
        return result.scalar_one_or_none()

    async def _try_create_city(self, state: StateRef, city_name: str) -> Optional[UUID]:
        """Insert the city; None means another writer inserted it first."""
        city_id = uuid.uuid4()
        self.db.add(City(id=city_id, name=city_name, state_id=state.id, state_code=state.state_code or ""))

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(
                f"City {city_name!r} in {state.name} was created concurrently, re-fetching"
            )
            logger.debug(f"Conflict detail: {e}")
            return None
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise LocationResolutionError(
                f"City insert failed: {e}",
                context={"state_id": state.id, "city_name": city_name},
                original_exception=e
            )

        self.cities_created += 1
        logger.info(f"Created city {city_name}, {state.state_code}")
        return city_id
