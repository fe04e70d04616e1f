"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class, JSON column type and shared enums
        (BoardType, TrafficTier, PriceTier, SourceTag, ImportStatus)
    location: State and City lookup tables
    billboard: Canonical billboard rows from every source
    import_run: Import job tracking

Relationships:
    - State → City (one-to-many)
    - City → Billboard (one-to-many)
    - ImportRun is keyed by source tag only

Importing this package registers every table on Base.metadata.
"""

from models.base import Base, BoardType, TrafficTier, PriceTier, SourceTag, ImportStatus
from models.location import State, City
from models.billboard import Billboard
from models.import_run import ImportRun

__all__ = [
    "Base",
    "BoardType",
    "TrafficTier",
    "PriceTier",
    "SourceTag",
    "ImportStatus",
    "State",
    "City",
    "Billboard",
    "ImportRun",
]
