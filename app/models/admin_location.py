from datetime import datetime

from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey
from app.models.base import Base, new_uuid


class AdminLocation(Base):
    """Walker's live position, one row per walker."""
    __tablename__ = "admin_locations"

    id = Column(String(36), primary_key=True, default=new_uuid)
    admin_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, unique=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    created_at = Column(DateTime, default=datetime.utcnow)
