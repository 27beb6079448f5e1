import uuid

from sqlalchemy import Column, Float, String, DateTime, CheckConstraint
from sqlalchemy.sql import func
from .database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Sighting(Base):
    __tablename__ = "sightings"

    id = Column(String(32), primary_key=True, default=_new_id)
    animal = Column(String, nullable=False)
    status = Column(String, nullable=False, default="live")  # 'live' | 'dead'
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("status in ('live','dead')", name="sightings_status_check"),
    )
