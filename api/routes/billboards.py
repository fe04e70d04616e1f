"""
Billboard retrieval endpoint with location, tier and zipcode filters
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db
from api.queries import list_billboards
from schemas.api import BillboardListResponse, ErrorResponse
from typing import Optional
import time
import uuid
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Billboards"])


@router.get(
    "/billboards",
    response_model=BillboardListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def get_billboards(
    request: Request,
    city_id: Optional[str] = Query(None, description="Restrict to one city"),
    state_id: Optional[str] = Query(None, description="Restrict to the cities of one state"),
    board_type: Optional[str] = Query(None, description="static or digital"),
    traffic_tier: Optional[str] = Query(None, description="low, medium, high or prime"),
    price_tier: Optional[str] = Query(None, description="$, $$, $$$ or $$$$"),
    zipcodes: Optional[str] = Query(None, description="Comma separated 5-digit zipcodes"),
    limit: Optional[str] = Query(None, description="Maximum rows returned (default 50, max 2500)"),
    db: AsyncSession = Depends(get_db)
):
    """
    Retrieve billboards for the map and list views.

    Features:
    - City or state scope
    - Board type, traffic tier and price tier filters
    - Zipcode filter
    - Exact totalCount independent of limit
    """
    start_time = time.time()
    request_id = getattr(request.state, "request_id", f"req_{uuid.uuid4().hex[:12]}")

    logger.info(
        f"[{request_id}] GET /billboards - city_id={city_id}, state_id={state_id}, "
        f"board_type={board_type}, traffic_tier={traffic_tier}, price_tier={price_tier}, "
        f"zipcodes={zipcodes}, limit={limit}"
    )

    result = await list_billboards(
        db,
        city_id=city_id,
        state_id=state_id,
        board_type=board_type,
        traffic_tier=traffic_tier,
        price_tier=price_tier,
        zipcodes=zipcodes,
        limit=limit
    )

    api_latency_ms = (time.time() - start_time) * 1000
    logger.info(
        f"[{request_id}] Returned {len(result['billboards'])} billboards "
        f"of {result['totalCount']} (total: {api_latency_ms:.2f}ms)"
    )

    return BillboardListResponse(**result)
