from sqlalchemy import Column, String, Text, Enum, Float, Integer, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from models.base import Base, JSONType, BoardType, TrafficTier, PriceTier, enum_values


class Billboard(Base):
    """
    Canonical billboard row shared by every ingestion source.

    Field Mapping Strategy:

    Houston GeoJSON (source = "houston_geojson"):
    - geometry.coordinates [lon, lat] -> longitude, latitude
    - MATCH_ADDR / PERMITTED / ACTUAL_ADD + STREET_NAM -> address
    - ID_NUMBER / KEY / address -> name
    - SIGN_CO -> vendor
    - ZIP -> zipcode
    - properties -> source_properties

    Blip digital feed (source = "blip_digital"):
    - lat, lon -> latitude, longitude
    - display_name / name -> name
    - address, postal_code -> address, zipcode
    - photos[0].thumbnail_url / photos[0].url -> image_url
    - daily_impressions -> traffic_tier
    - cpm_range / max_minimum_price -> price_tier
    - whole record -> source_properties

    traffic and price_cents are reserved and always null for now.
    """
    __tablename__ = "billboards"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    city_id = Column(Uuid, ForeignKey("cities.id"), nullable=False, index=True)

    # Display fields
    name = Column(Text, nullable=True)
    vendor = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    zipcode = Column(Text, nullable=True, index=True)
    image_url = Column(Text, nullable=True)

    # Coordinates
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Classification
    board_type = Column(
        Enum(BoardType, name="board_type", values_callable=enum_values),
        nullable=False, index=True
    )
    traffic_tier = Column(
        Enum(TrafficTier, name="traffic_tier", values_callable=enum_values),
        nullable=False, index=True
    )
    price_tier = Column(
        Enum(PriceTier, name="price_tier", values_callable=enum_values),
        nullable=False, index=True
    )

    # Lineage
    source = Column(String(100), nullable=False, index=True)
    source_properties = Column(JSONType, nullable=True)

    # Reserved
    traffic = Column(Integer, nullable=True)
    price_cents = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    city = relationship("City", back_populates="billboards")

    __table_args__ = (
        Index("idx_billboard_source_city", "source", "city_id"),
    )
