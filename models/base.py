from sqlalchemy import JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.dialects.postgresql import JSONB
import enum

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (local SQLite test databases)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def enum_values(enum_cls):
    """Persist enum values ("$$", "static") rather than member names."""
    return [member.value for member in enum_cls]


# ============================================================================
# ENUMS
# ============================================================================

class BoardType(str, enum.Enum):
    """Billboard display technology"""
    STATIC = "static"
    DIGITAL = "digital"


class TrafficTier(str, enum.Enum):
    """Ordinal traffic bucket derived from daily impressions"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    PRIME = "prime"


class PriceTier(str, enum.Enum):
    """Ordinal price bucket derived from CPM or minimum price"""
    BUDGET = "$"
    MODERATE = "$$"
    PREMIUM = "$$$"
    LUXURY = "$$$$"


class SourceTag(str, enum.Enum):
    """Known ingestion origins; each is replaced as a whole on re-import"""
    HOUSTON_GEOJSON = "houston_geojson"
    BLIP_DIGITAL = "blip_digital"
    SEED = "seed"


class ImportStatus(str, enum.Enum):
    """Import run status"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
