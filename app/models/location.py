from datetime import datetime

from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from app.models.base import Base, new_uuid


class Location(Base):
    """GPS point recorded during one walk. Rows are only ever appended."""
    __tablename__ = "locations"

    id = Column(String(36), primary_key=True, default=new_uuid)
    walk_id = Column(String(36), ForeignKey("walks.id"), nullable=False, index=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    created_at = Column(DateTime, default=datetime.utcnow)
