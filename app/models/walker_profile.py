from datetime import datetime

from sqlalchemy import Column, String, Integer, Float, Boolean, Text, DateTime, JSON, ForeignKey
from app.models.base import Base, new_uuid


class WalkerProfile(Base):
    """Public service listing of a walker."""
    __tablename__ = "walker_profiles"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, unique=True)

    is_available = Column(Boolean, default=True, nullable=False)
    service_radius = Column(Integer, default=10, nullable=False)
    hourly_rate = Column(Float)
    specialties = Column(JSON, default=list)
    bio = Column(Text)
    city = Column(String(100))
    state = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
