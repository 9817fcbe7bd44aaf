from datetime import datetime
import enum

from sqlalchemy import Column, String, Integer, Text, Date, Time, DateTime, Enum, ForeignKey
from app.models.base import Base, new_uuid, enum_values


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class WalkRequest(Base):
    __tablename__ = "walk_requests"

    id = Column(String(36), primary_key=True, default=new_uuid)
    client_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)
    walker_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)

    requested_date = Column(Date, nullable=False)
    requested_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    number_of_dogs = Column(Integer, nullable=False, default=1)
    special_notes = Column(Text)

    status = Column(
        Enum(RequestStatus, name="request_status", values_callable=enum_values),
        nullable=False,
        default=RequestStatus.PENDING,
    )
    response_notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
