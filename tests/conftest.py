"""
Pytest configuration and fixtures
"""

import json
import uuid
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from models import Base, State, City, Billboard, BoardType, TrafficTier, PriceTier
from typing import AsyncGenerator


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,  # Disable connection pooling for tests
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables after test
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def texas(db_session) -> State:
    state = State(id=uuid.uuid4(), name="Texas", state_code="TX")
    db_session.add(state)
    await db_session.commit()
    return state


@pytest_asyncio.fixture
async def houston(db_session, texas) -> City:
    city = City(id=uuid.uuid4(), name="Houston", state_id=texas.id, state_code="TX")
    db_session.add(city)
    await db_session.commit()
    return city


def make_billboard(city_id, **overrides) -> Billboard:
    """Billboard row with sensible defaults for query tests"""
    values = {
        "id": uuid.uuid4(),
        "city_id": city_id,
        "name": "Test Board",
        "vendor": "Blip",
        "address": "100 Main St",
        "zipcode": "77002",
        "latitude": 29.76,
        "longitude": -95.36,
        "board_type": BoardType.DIGITAL,
        "traffic_tier": TrafficTier.HIGH,
        "price_tier": PriceTier.PREMIUM,
        "source": "blip_digital",
    }
    values.update(overrides)
    return Billboard(**values)


@pytest.fixture
def blip_record():
    """Single Blip digital feed record"""
    return {
        "id": 9001,
        "display_name": "I-45 @ Gulfgate",
        "address": "4400 Gulf Fwy",
        "city": "Houston",
        "province": "Texas",
        "postal_code": "77023",
        "lat": 29.7161,
        "lon": -95.3178,
        "daily_impressions": 75000,
        "cpm_range": {"low_cpm": 6.5, "high_cpm": 12.0},
        "photos": [
            {"url": "https://img.example.com/9001.jpg", "thumbnail_url": "https://img.example.com/9001_t.jpg"}
        ],
    }


@pytest.fixture
def geojson_feature():
    """Single municipal permit point feature"""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [-95.3698, 29.7604]},
        "properties": {
            "ID_NUMBER": "B-1024",
            "SIGN_CO": "Clear Channel",
            "MATCH_ADDR": "1200 Main St, Houston, TX",
            "ZIP": "77002",
        },
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a payload to a JSON file under tmp_path and return its path"""
    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
