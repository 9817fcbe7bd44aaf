from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from app.models.base import Base, new_uuid


class WalkerGroup(Base):
    __tablename__ = "walker_groups"

    id = Column(String(36), primary_key=True, default=new_uuid)
    walker_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)

    name = Column(String(50), nullable=False)
    description = Column(String(200))
    color = Column(String(7), nullable=False, default="#3B82F6")
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class GroupMember(Base):
    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "client_id", name="uq_group_members_group_client"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    group_id = Column(String(36), ForeignKey("walker_groups.id"), nullable=False, index=True)
    client_id = Column(String(128), ForeignKey("profiles.id"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
