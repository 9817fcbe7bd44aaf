from datetime import datetime
import enum

from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey
from app.models.base import Base, new_uuid, enum_values


class WalkStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Walk(Base):
    __tablename__ = "walks"

    id = Column(String(36), primary_key=True, default=new_uuid)
    client_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)
    walker_id = Column(String(128), ForeignKey("profiles.id"), index=True)

    dog_name = Column(String(100), nullable=False)
    status = Column(
        Enum(WalkStatus, name="walk_status", values_callable=enum_values),
        nullable=False,
        default=WalkStatus.PENDING,
    )
    notes = Column(Text)

    start_time = Column(DateTime)
    end_time = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
