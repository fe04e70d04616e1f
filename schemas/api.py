"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from uuid import UUID
from models.base import ImportStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Health Check Schemas
# ============================================================================

class ImportRunInfo(BaseModel):
    """Latest import run for one source tag"""
    source: str
    status: ImportStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    records_inserted: int = 0
    records_skipped: int = 0
    error_message: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field("healthy", description="Overall system status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=_utcnow)
    database_connected: bool
    imports: List[ImportRunInfo] = Field(default_factory=list)
    total_sources: int = 0
    failed_sources: int = 0

    @model_validator(mode="after")
    def determine_status(self):
        """Determine overall health status"""
        if not self.database_connected:
            self.status = "unhealthy"
        elif self.total_sources == 0 or self.failed_sources == 0:
            self.status = "healthy"
        elif self.failed_sources < self.total_sources:
            self.status = "degraded"
        else:
            self.status = "unhealthy"
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-01-15T10:30:00Z",
                "database_connected": True,
                "total_sources": 2,
                "failed_sources": 0,
                "imports": [
                    {
                        "source": "blip_digital",
                        "status": "success",
                        "started_at": "2025-01-15T10:00:00Z",
                        "completed_at": "2025-01-15T10:00:12Z",
                        "records_inserted": 412,
                        "records_skipped": 3
                    }
                ]
            }
        }
    )


# ============================================================================
# Billboard Schemas
# ============================================================================

class BillboardListItem(BaseModel):
    """Billboard as rendered by the map, list and detail panel"""
    id: UUID
    name: Optional[str] = None
    vendor: Optional[str] = None
    address: Optional[str] = None
    zipcode: Optional[str] = None
    source_properties: Optional[Dict[str, Any]] = None
    lat: float
    lng: float
    board_type: str
    traffic_tier: str
    price_tier: str
    image_url: Optional[str] = None

    @classmethod
    def from_orm_row(cls, row):
        """Map ORM column names onto the map-facing lat/lng names"""
        return cls(
            id=row.id,
            name=row.name,
            vendor=row.vendor,
            address=row.address,
            zipcode=row.zipcode,
            source_properties=row.source_properties,
            lat=row.latitude,
            lng=row.longitude,
            board_type=row.board_type.value,
            traffic_tier=row.traffic_tier.value,
            price_tier=row.price_tier.value,
            image_url=row.image_url,
        )


class BillboardListResponse(BaseModel):
    """Filtered billboards plus the exact, un-limited match count"""
    billboards: List[BillboardListItem]
    totalCount: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "billboards": [
                    {
                        "id": "6f1c2d4e-8a9b-4c3d-9e1f-2a3b4c5d6e7f",
                        "name": "I-45 @ Gulfgate",
                        "vendor": "Blip",
                        "address": "4400 Gulf Fwy",
                        "zipcode": "77023",
                        "lat": 29.7161,
                        "lng": -95.3178,
                        "board_type": "digital",
                        "traffic_tier": "high",
                        "price_tier": "$$$",
                        "image_url": None
                    }
                ],
                "totalCount": 412
            }
        }
    )


class ZipcodeListResponse(BaseModel):
    zipcodes: List[str]


# ============================================================================
# Location Schemas
# ============================================================================

class StateItem(BaseModel):
    id: UUID
    name: str
    state_code: str

    model_config = ConfigDict(from_attributes=True)


class StateListResponse(BaseModel):
    states: List[StateItem]


class CityItem(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class CityListResponse(BaseModel):
    cities: List[CityItem]


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Invalid board_type; use static or digital",
                "detail": "board_type=neon",
                "timestamp": "2025-01-15T10:30:00Z"
            }
        }
    )
