"""
State, city and zipcode lookup endpoints
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db
from api.queries import list_cities, list_states, list_zipcodes
from schemas.api import (
    CityItem,
    CityListResponse,
    ErrorResponse,
    StateItem,
    StateListResponse,
    ZipcodeListResponse,
)
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Locations"])


@router.get("/states", response_model=StateListResponse)
async def get_states(db: AsyncSession = Depends(get_db)):
    """All states ordered by name"""
    states = await list_states(db)
    return StateListResponse(states=[StateItem.model_validate(state) for state in states])


@router.get(
    "/cities",
    response_model=CityListResponse,
    responses={400: {"model": ErrorResponse}}
)
async def get_cities(
    state_id: Optional[str] = Query(None, description="State to list cities for"),
    db: AsyncSession = Depends(get_db)
):
    """Cities of one state ordered by name"""
    cities = await list_cities(db, state_id)
    return CityListResponse(cities=[CityItem.model_validate(city) for city in cities])


@router.get("/zipcodes", response_model=ZipcodeListResponse)
async def get_zipcodes(
    city_id: Optional[str] = Query(None, description="Restrict to one city"),
    state_id: Optional[str] = Query(None, description="Restrict to the cities of one state"),
    db: AsyncSession = Depends(get_db)
):
    """
    Distinct zipcodes among billboards in scope.

    Sorted numerically ascending; non-numeric values fall back to string
    comparison.
    """
    zipcodes = await list_zipcodes(db, city_id=city_id, state_id=state_id)
    logger.debug(f"Zipcodes returned: {len(zipcodes)}")
    return ZipcodeListResponse(zipcodes=zipcodes)
