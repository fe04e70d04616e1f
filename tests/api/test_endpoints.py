"""
API endpoint tests
"""

import runpy
import uuid
import pytest
import pytest_asyncio
from datetime import datetime
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock, patch
from sqlalchemy.exc import OperationalError
from api.main import app
from api.dependencies import get_db
from core.config import settings
from models import City, State, ImportRun, ImportStatus, BoardType, TrafficTier, PriceTier
from tests.conftest import make_billboard


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seeded(db_session, houston):
    """Three Houston billboards and an empty state"""
    empty_state = State(id=uuid.uuid4(), name="Vermont", state_code="VT")
    db_session.add_all([
        empty_state,
        make_billboard(houston.id, name="Digital High", zipcode="77002"),
        make_billboard(
            houston.id,
            name="Static Medium",
            zipcode="77019",
            board_type=BoardType.STATIC,
            traffic_tier=TrafficTier.MEDIUM,
            price_tier=PriceTier.MODERATE,
            source="houston_geojson",
        ),
        make_billboard(houston.id, name="Digital Budget", zipcode="77002", price_tier=PriceTier.BUDGET),
    ])
    await db_session.commit()
    return {"city_id": str(houston.id), "state_id": str(houston.state_id), "empty_state_id": str(empty_state.id)}


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["billboards"] == "/billboards"


@pytest.mark.asyncio
async def test_health_endpoint_reports_latest_runs(client, db_session):
    db_session.add_all([
        ImportRun(source="blip_digital", status=ImportStatus.FAILED, started_at=datetime(2025, 1, 1)),
        ImportRun(source="blip_digital", status=ImportStatus.SUCCESS, started_at=datetime(2025, 1, 2), records_inserted=10),
        ImportRun(source="houston_geojson", status=ImportStatus.SUCCESS, started_at=datetime(2025, 1, 2)),
    ])
    await db_session.commit()

    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["database_connected"] is True
    assert data["status"] == "healthy"
    assert data["total_sources"] == 2
    assert [run["source"] for run in data["imports"]] == ["blip_digital", "houston_geojson"]
    assert data["imports"][0]["status"] == "success"
    assert data["imports"][0]["records_inserted"] == 10


@pytest.mark.asyncio
async def test_billboards_item_shape(client, seeded):
    response = await client.get("/billboards", params={"city_id": seeded["city_id"]})

    assert response.status_code == 200
    data = response.json()
    assert data["totalCount"] == 3
    item = data["billboards"][0]
    for key in ["id", "name", "vendor", "address", "zipcode", "source_properties",
                "lat", "lng", "board_type", "traffic_tier", "price_tier", "image_url"]:
        assert key in item
    assert item["lat"] == 29.76
    assert item["lng"] == -95.36


@pytest.mark.asyncio
async def test_total_count_ignores_limit(client, seeded):
    response = await client.get("/billboards", params={"city_id": seeded["city_id"], "limit": "2"})

    data = response.json()
    assert len(data["billboards"]) == 2
    assert data["totalCount"] == 3


@pytest.mark.asyncio
async def test_invalid_limit_falls_back_to_default(client, seeded):
    response = await client.get("/billboards", params={"limit": "lots"})

    assert response.status_code == 200
    assert len(response.json()["billboards"]) == 3


@pytest.mark.asyncio
async def test_billboards_filters(client, seeded):
    response = await client.get("/billboards", params={
        "state_id": seeded["state_id"],
        "board_type": "digital",
        "price_tier": "$$$",
        "zipcodes": "77002,77019",
    })

    data = response.json()
    assert data["totalCount"] == 1
    assert data["billboards"][0]["name"] == "Digital High"
    assert data["billboards"][0]["price_tier"] == "$$$"


@pytest.mark.asyncio
async def test_zipcode_filter_matches_any(client, seeded):
    response = await client.get("/billboards", params={"zipcodes": "77019, 77019 ,bad"})

    data = response.json()
    assert data["totalCount"] == 1
    assert data["billboards"][0]["zipcode"] == "77019"


@pytest.mark.asyncio
async def test_empty_state_returns_empty_result(client, seeded):
    response = await client.get("/billboards", params={"state_id": seeded["empty_state_id"]})

    assert response.status_code == 200
    assert response.json() == {"billboards": [], "totalCount": 0}


@pytest.mark.asyncio
async def test_malformed_city_id_is_ignored(client, seeded):
    response = await client.get("/billboards", params={"city_id": "houston"})

    assert response.status_code == 200
    assert response.json()["totalCount"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("param,value", [
    ("board_type", "neon"),
    ("traffic_tier", "extreme"),
    ("price_tier", "$$$$$"),
])
async def test_invalid_enum_filter_returns_400(client, param, value):
    response = await client.get("/billboards", params={param: value})

    assert response.status_code == 400
    data = response.json()
    assert data["error"].startswith(f"Invalid {param}")
    assert data["detail"] == f"{param}={value}"


@pytest.mark.asyncio
async def test_store_failure_returns_500(client):
    failing_session = AsyncMock()
    failing_session.execute = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
    )

    async def override_get_db():
        yield failing_session

    app.dependency_overrides[get_db] = override_get_db
    response = await client.get("/billboards")

    assert response.status_code == 500
    assert "connection refused" in response.json()["error"]


@pytest.mark.asyncio
async def test_zipcodes_sorted_and_distinct(client, seeded):
    response = await client.get("/zipcodes", params={"city_id": seeded["city_id"]})

    assert response.status_code == 200
    assert response.json() == {"zipcodes": ["77002", "77019"]}


@pytest.mark.asyncio
async def test_zipcodes_without_scope_use_all_billboards(client, seeded, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_CITY_ID", None)

    response = await client.get("/zipcodes")

    assert response.json() == {"zipcodes": ["77002", "77019"]}


@pytest.mark.asyncio
async def test_zipcodes_without_scope_use_default_city(client, seeded, db_session, monkeypatch):
    other_city = City(id=uuid.uuid4(), name="Galveston", state_id=uuid.UUID(seeded["state_id"]), state_code="TX")
    db_session.add(other_city)
    db_session.add(make_billboard(other_city.id, zipcode="77550"))
    await db_session.commit()
    monkeypatch.setattr(settings, "DEFAULT_CITY_ID", str(other_city.id))

    response = await client.get("/zipcodes")

    assert response.json() == {"zipcodes": ["77550"]}


@pytest.mark.asyncio
async def test_states_ordered_by_name(client, seeded):
    response = await client.get("/states")

    assert response.status_code == 200
    assert [state["name"] for state in response.json()["states"]] == ["Texas", "Vermont"]
    assert response.json()["states"][0]["state_code"] == "TX"


@pytest.mark.asyncio
async def test_cities_for_state(client, seeded):
    response = await client.get("/cities", params={"state_id": seeded["state_id"]})

    assert response.status_code == 200
    assert response.json() == {"cities": [{"id": seeded["city_id"], "name": "Houston"}]}


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"state_id": "texas"}])
async def test_cities_requires_valid_state_id(client, params):
    response = await client.get("/cities", params=params)

    assert response.status_code == 400
    assert "state_id" in response.json()["error"]


@pytest.mark.asyncio
async def test_request_id_header(client):
    response = await client.get("/")

    assert "X-Request-ID" in response.headers
    assert "X-API-Latency-ms" in response.headers


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


@pytest.mark.asyncio
@pytest.mark.parametrize("incoming", ["", "   ", "x" * 129])
async def test_unusable_request_id_is_replaced(client, incoming):
    response = await client.get("/", headers={"X-Request-ID": incoming})

    generated = response.headers["X-Request-ID"]
    assert generated != incoming
    assert uuid.UUID(generated)


def test_module_entry_point_runs_uvicorn():
    with patch("uvicorn.run") as run:
        runpy.run_module("api.main", run_name="__main__")

    run.assert_called_once()
    assert run.call_args.args == ("api.main:app",)
    assert run.call_args.kwargs["host"] == settings.API_HOST
    assert run.call_args.kwargs["port"] == settings.API_PORT
