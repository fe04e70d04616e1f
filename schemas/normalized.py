"""
Pydantic schema for the canonical billboard row produced by every normalizer
"""

import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Dict, Any
from uuid import UUID
from models.base import BoardType, TrafficTier, PriceTier


class BillboardCreate(BaseModel):
    """
    Canonical billboard row, independent of the source format.

    Ensures:
    - city and coordinates are present
    - coordinates are finite numbers
    - tiers are valid enum members
    """

    city_id: UUID

    # Display fields
    name: Optional[str] = None
    vendor: Optional[str] = None
    address: Optional[str] = None
    zipcode: Optional[str] = None
    image_url: Optional[str] = None

    latitude: float
    longitude: float

    board_type: BoardType
    traffic_tier: TrafficTier
    price_tier: PriceTier

    source: str = Field(..., min_length=1, max_length=100)
    source_properties: Optional[Dict[str, Any]] = None

    # Reserved for future pricing and traffic data
    traffic: Optional[int] = None
    price_cents: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("latitude", "longitude")
    @classmethod
    def finite_coordinate(cls, v):
        if not math.isfinite(v):
            raise ValueError("coordinate must be a finite number")
        return v
