"""
Pydantic schemas for data validation and serialization.

Schemas:
    normalized: BillboardCreate, the canonical row every normalizer emits
    api: Response models for the read endpoints and the error envelope

Usage:
    from schemas.normalized import BillboardCreate
    from schemas.api import BillboardListResponse, ErrorResponse
"""

__all__ = [
    "BillboardCreate",
    "BillboardListItem",
    "BillboardListResponse",
    "ZipcodeListResponse",
    "StateListResponse",
    "CityListResponse",
    "HealthCheckResponse",
    "ErrorResponse",
]
