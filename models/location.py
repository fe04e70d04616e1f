from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from models.base import Base


class State(Base):
    """
    US state lookup table.

    Loaded once per import run and matched by exact name against the
    vendor feed's province field.
    """
    __tablename__ = "states"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True)
    state_code = Column(String(2), nullable=False, unique=True)

    cities = relationship("City", back_populates="state")


class City(Base):
    """
    City inside a state.

    Design:
    - created lazily by the import jobs, never updated or deleted by them
    - state_code is a denormalized copy of the parent state's code
    - (state_id, name) is unique so concurrent imports cannot duplicate a city
    """
    __tablename__ = "cities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    state_id = Column(Uuid, ForeignKey("states.id"), nullable=False)
    state_code = Column(String(2), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    state = relationship("State", back_populates="cities")
    billboards = relationship("Billboard", back_populates="city")

    __table_args__ = (
        Index("idx_city_state_name", "state_id", "name", unique=True),
    )
