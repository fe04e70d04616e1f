"""
Billboard and location queries behind the read-only API.

Filter parsing is lenient where a bad value can be ignored (ids, limit,
zipcodes) and strict for the enum-valued filters, which raise
QueryValidationError.
"""

from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Type
from uuid import UUID
import enum
import logging
import re

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import QueryValidationError
from models.base import BoardType, PriceTier, TrafficTier
from models.billboard import Billboard
from models.location import City, State
from schemas.api import BillboardListItem

logger = logging.getLogger(__name__)

ZIPCODE_PATTERN = re.compile(r"^\d{5}$", re.ASCII)
DIGITS_PATTERN = re.compile(r"\d+", re.ASCII)
LEADING_INT_PATTERN = re.compile(r"\s*([+-]?\d+)", re.ASCII)


# ============================================================================
# Parameter parsing
# ============================================================================

def parse_uuid(value: Optional[str]) -> Optional[UUID]:
    """UUID from a query string value; malformed or empty values give None."""
    if not value:
        return None
    try:
        return UUID(value.strip())
    except (ValueError, AttributeError):
        return None


def parse_limit(value: Optional[str]) -> int:
    """
    Positive integer limit capped at QUERY_MAX_LIMIT, else the default.

    Leading digits are used like parseInt: "12abc" is 12, "2.5" is 2.
    """
    match = LEADING_INT_PATTERN.match(value) if isinstance(value, str) else None
    if match is None:
        return settings.QUERY_DEFAULT_LIMIT

    limit = int(match.group(1))

    if limit <= 0:
        return settings.QUERY_DEFAULT_LIMIT
    return min(limit, settings.QUERY_MAX_LIMIT)


def parse_zipcodes(value: Optional[str]) -> List[str]:
    """Comma separated 5-digit zipcodes, deduplicated in first-seen order."""
    if not value:
        return []

    zipcodes = []
    for part in value.split(","):
        zipcode = part.strip()
        if ZIPCODE_PATTERN.match(zipcode) and zipcode not in zipcodes:
            zipcodes.append(zipcode)
    return zipcodes


def validate_enum(enum_cls: Type[enum.Enum], name: str, value: Optional[str]):
    """
    Enum member for a filter value; None when the filter is absent.

    Raises:
        QueryValidationError: value is not one of the enum's values
    """
    if value is None or value == "":
        return None

    try:
        return enum_cls(value)
    except ValueError:
        allowed = " or ".join(member.value for member in enum_cls)
        raise QueryValidationError(
            f"Invalid {name}; use {allowed}",
            context={"parameter": name, "value": value}
        )


def compare_zipcodes(a: str, b: str) -> int:
    """Integer order, falling back to string order if either side is not numeric."""
    if DIGITS_PATTERN.fullmatch(a) and DIGITS_PATTERN.fullmatch(b):
        left, right = int(a), int(b)
    else:
        left, right = a, b
    return (left > right) - (left < right)


def sort_zipcodes(zipcodes: List[str]) -> List[str]:
    return sorted(zipcodes, key=cmp_to_key(compare_zipcodes))


# ============================================================================
# Location scope
# ============================================================================

async def city_ids_for_state(db: AsyncSession, state_id: UUID) -> List[UUID]:
    result = await db.execute(select(City.id).where(City.state_id == state_id))
    return list(result.scalars().all())


async def resolve_scope(
    db: AsyncSession,
    city_id: Optional[UUID],
    state_id: Optional[UUID]
):
    """
    City id filter for a request.

    Returns None when the request is unscoped, otherwise a list of city
    ids (possibly empty) to match with IN.
    """
    if city_id is not None:
        return [city_id]
    if state_id is not None:
        return await city_ids_for_state(db, state_id)
    return None


# ============================================================================
# Billboards
# ============================================================================

async def list_billboards(
    db: AsyncSession,
    city_id: Optional[str] = None,
    state_id: Optional[str] = None,
    board_type: Optional[str] = None,
    traffic_tier: Optional[str] = None,
    price_tier: Optional[str] = None,
    zipcodes: Optional[str] = None,
    limit: Optional[str] = None
) -> Dict[str, Any]:
    """
    Filtered billboards plus the exact number of matches.

    Returns:
        {"billboards": [BillboardListItem, ...], "totalCount": int}

    Raises:
        QueryValidationError: invalid board_type, traffic_tier or price_tier
    """
    board_type_value = validate_enum(BoardType, "board_type", board_type)
    traffic_tier_value = validate_enum(TrafficTier, "traffic_tier", traffic_tier)
    price_tier_value = validate_enum(PriceTier, "price_tier", price_tier)
    zipcode_list = parse_zipcodes(zipcodes)
    page_size = parse_limit(limit)

    city_ids = await resolve_scope(db, parse_uuid(city_id), parse_uuid(state_id))
    if city_ids is not None and not city_ids:
        return {"billboards": [], "totalCount": 0}

    filters = []
    if city_ids is not None:
        filters.append(Billboard.city_id.in_(city_ids))
    if board_type_value is not None:
        filters.append(Billboard.board_type == board_type_value)
    if traffic_tier_value is not None:
        filters.append(Billboard.traffic_tier == traffic_tier_value)
    if price_tier_value is not None:
        filters.append(Billboard.price_tier == price_tier_value)
    if zipcode_list:
        filters.append(Billboard.zipcode.in_(zipcode_list))

    query = select(Billboard)
    count_query = select(func.count()).select_from(Billboard)
    if filters:
        query = query.where(and_(*filters))
        count_query = count_query.where(and_(*filters))

    result = await db.execute(query.limit(page_size))
    rows = result.scalars().all()

    count_result = await db.execute(count_query)
    total_count = count_result.scalar() or 0

    logger.debug(f"Billboards returned: {len(rows)} of {total_count}")

    return {
        "billboards": [BillboardListItem.from_orm_row(row) for row in rows],
        "totalCount": total_count,
    }


# ============================================================================
# Zipcodes
# ============================================================================

async def list_zipcodes(
    db: AsyncSession,
    city_id: Optional[str] = None,
    state_id: Optional[str] = None
) -> List[str]:
    """Distinct zipcodes in scope, numerically sorted."""
    city_uuid = parse_uuid(city_id)
    state_uuid = parse_uuid(state_id)

    if city_uuid is None and state_uuid is None and settings.DEFAULT_CITY_ID:
        city_uuid = parse_uuid(settings.DEFAULT_CITY_ID)

    city_ids = await resolve_scope(db, city_uuid, state_uuid)
    if city_ids is not None and not city_ids:
        return []

    query = select(Billboard.zipcode).where(Billboard.zipcode.is_not(None)).distinct()
    if city_ids is not None:
        query = query.where(Billboard.city_id.in_(city_ids))

    result = await db.execute(query)
    zipcodes = set()
    for value in result.scalars().all():
        value = value.strip()
        if value:
            zipcodes.add(value)

    return sort_zipcodes(list(zipcodes))


# ============================================================================
# States and cities
# ============================================================================

async def list_states(db: AsyncSession) -> List[State]:
    result = await db.execute(select(State).order_by(State.name))
    return list(result.scalars().all())


async def list_cities(db: AsyncSession, state_id: Optional[str]) -> List[City]:
    """
    Cities of a state ordered by name.

    Raises:
        QueryValidationError: state_id missing or not a UUID
    """
    state_uuid = parse_uuid(state_id)
    if state_uuid is None:
        raise QueryValidationError(
            "state_id is required and must be a UUID",
            context={"parameter": "state_id", "value": state_id}
        )

    result = await db.execute(
        select(City).where(City.state_id == state_uuid).order_by(City.name)
    )
    return list(result.scalars().all())
