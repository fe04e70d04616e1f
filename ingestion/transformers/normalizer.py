"""
Transform raw source records into canonical billboard rows.

One normalizer per source format. Each maps a raw record plus an already
resolved city id to a validated BillboardCreate, or raises
InvalidRecordError when the record has no usable coordinates.
"""

import math
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Tuple
from uuid import UUID
from pydantic import ValidationError as PydanticValidationError
from schemas.normalized import BillboardCreate
from models.base import BoardType, TrafficTier, PriceTier, SourceTag
from core.exceptions import InvalidRecordError
import logging

logger = logging.getLogger(__name__)

BLIP_VENDOR = "Blip"

# Upper bounds (exclusive) for each tier; anything above the last is the top tier
TRAFFIC_THRESHOLDS = (
    (10_000, TrafficTier.LOW),
    (50_000, TrafficTier.MEDIUM),
    (200_000, TrafficTier.HIGH),
)
CPM_THRESHOLDS = (
    (5, PriceTier.BUDGET),
    (10, PriceTier.MODERATE),
    (20, PriceTier.PREMIUM),
)
MIN_PRICE_THRESHOLDS = (
    (0.10, PriceTier.BUDGET),
    (0.30, PriceTier.MODERATE),
    (0.70, PriceTier.PREMIUM),
)


def clean_string(value: Any) -> Optional[str]:
    """Trimmed string, or None for non-strings and blank strings"""
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def is_number(value: Any) -> bool:
    """True for finite ints and floats that fit a float (bools are not numbers here)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _bucket(value: float, thresholds, top):
    for upper, tier in thresholds:
        if value < upper:
            return tier
    return top


def traffic_tier_from_impressions(daily_impressions: Any) -> TrafficTier:
    """Step function of daily impressions; unknown traffic is medium."""
    if not is_number(daily_impressions):
        return TrafficTier.MEDIUM
    return _bucket(daily_impressions, TRAFFIC_THRESHOLDS, TrafficTier.PRIME)


def price_tier_from_record(record: Dict[str, Any]) -> PriceTier:
    """
    Price tier from CPM when present, otherwise from the minimum price,
    otherwise $$.

    high_cpm wins over low_cpm whenever it is present at all, even if it
    then turns out not to be numeric.
    """
    cpm_range = record.get("cpm_range")
    if isinstance(cpm_range, dict):
        cpm = cpm_range.get("high_cpm")
        if cpm is None:
            cpm = cpm_range.get("low_cpm")
        if is_number(cpm):
            return _bucket(cpm, CPM_THRESHOLDS, PriceTier.LUXURY)

    min_price = record.get("max_minimum_price")
    if is_number(min_price):
        return _bucket(min_price, MIN_PRICE_THRESHOLDS, PriceTier.LUXURY)

    return PriceTier.MODERATE


class BillboardNormalizer(ABC):
    """
    Base class for source-specific normalizers.

    Subclasses implement coordinates() and fields(); normalize() assembles
    and validates the canonical row.
    """

    def __init__(self, source_tag: str):
        self.source_tag = source_tag

    @abstractmethod
    def coordinates(self, record: Dict[str, Any]) -> Optional[Tuple[float, float]]:
        """(latitude, longitude), or None when the record has none"""

    @abstractmethod
    def fields(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Every canonical field except city, coordinates and source"""

    @abstractmethod
    def record_label(self, record: Dict[str, Any]) -> str:
        """Short identifier used in log lines"""

    def normalize(self, record: Dict[str, Any], city_id: UUID) -> BillboardCreate:
        """
        Normalize a raw record into the canonical billboard row.

        Raises:
            InvalidRecordError: no usable coordinates, or the row fails validation
        """
        coords = self.coordinates(record)
        if coords is None:
            raise InvalidRecordError(
                "invalid record - no usable coordinates",
                context={
                    "source": self.source_tag,
                    "record_id": self.record_label(record),
                    "reason": "coordinates"
                }
            )

        latitude, longitude = coords
        try:
            return BillboardCreate(
                city_id=city_id,
                latitude=latitude,
                longitude=longitude,
                source=self.source_tag,
                **self.fields(record)
            )
        except PydanticValidationError as e:
            raise InvalidRecordError(
                "record failed billboard validation",
                context={
                    "source": self.source_tag,
                    "record_id": self.record_label(record),
                    "reason": "validation"
                },
                original_exception=e
            )


class GeoJSONNormalizer(BillboardNormalizer):
    """
    Municipal billboard permits published as GeoJSON point features.

    Nothing in the permit data differentiates boards, so every row is a
    static, medium-traffic, $$ board.
    """

    def __init__(self, source_tag: str = SourceTag.HOUSTON_GEOJSON.value):
        super().__init__(source_tag)

    def coordinates(self, record):
        geometry = record.get("geometry")
        if not isinstance(geometry, dict) or geometry.get("type") != "Point":
            return None

        coords = geometry.get("coordinates")
        if not isinstance(coords, list) or len(coords) < 2:
            return None

        longitude, latitude = coords[0], coords[1]
        if not (is_number(latitude) and is_number(longitude)):
            return None
        return float(latitude), float(longitude)

    @staticmethod
    def properties(record: Dict[str, Any]) -> Dict[str, Any]:
        props = record.get("properties")
        return props if isinstance(props, dict) else {}

    @staticmethod
    def address(props: Dict[str, Any]) -> Optional[str]:
        match_addr = clean_string(props.get("MATCH_ADDR"))
        permitted = clean_string(props.get("PERMITTED"))
        number = clean_string(props.get("ACTUAL_ADD"))
        street = clean_string(props.get("STREET_NAM"))

        combined = f"{number} {street}".strip() if number and street else None
        return match_addr or permitted or combined or number or street

    def fields(self, record):
        props = self.properties(record)
        address = self.address(props)

        return {
            "name": clean_string(props.get("ID_NUMBER")) or clean_string(props.get("KEY")) or address,
            "vendor": clean_string(props.get("SIGN_CO")),
            "address": address,
            "zipcode": clean_string(props.get("ZIP")),
            "image_url": None,
            "board_type": BoardType.STATIC,
            "traffic_tier": TrafficTier.MEDIUM,
            "price_tier": PriceTier.MODERATE,
            "source_properties": props if isinstance(record.get("properties"), dict) else None,
        }

    def record_label(self, record):
        props = self.properties(record)
        return str(props.get("ID_NUMBER") or props.get("KEY") or record.get("id") or "?")


class BlipNormalizer(BillboardNormalizer):
    """Blip digital billboard feed: one JSON object per screen"""

    def __init__(self, source_tag: str = SourceTag.BLIP_DIGITAL.value):
        super().__init__(source_tag)

    def coordinates(self, record):
        latitude, longitude = record.get("lat"), record.get("lon")
        if not (is_number(latitude) and is_number(longitude)):
            return None
        return float(latitude), float(longitude)

    @staticmethod
    def image_url(record: Dict[str, Any]) -> Optional[str]:
        photos = record.get("photos")
        if not isinstance(photos, list) or not photos:
            return None

        first = photos[0]
        if not isinstance(first, dict):
            return None
        return clean_string(first.get("thumbnail_url")) or clean_string(first.get("url"))

    def fields(self, record):
        return {
            "name": clean_string(record.get("display_name")) or clean_string(record.get("name")),
            "vendor": BLIP_VENDOR,
            "address": clean_string(record.get("address")),
            "zipcode": clean_string(record.get("postal_code")),
            "image_url": self.image_url(record),
            "board_type": BoardType.DIGITAL,
            "traffic_tier": traffic_tier_from_impressions(record.get("daily_impressions")),
            "price_tier": price_tier_from_record(record),
            "source_properties": record,
        }

    def record_label(self, record):
        return str(record.get("id") or record.get("display_name") or "?")
