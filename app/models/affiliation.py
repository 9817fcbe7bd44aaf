from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from app.models.base import Base, new_uuid


class Affiliation(Base):
    __tablename__ = "affiliations"
    __table_args__ = (
        UniqueConstraint("user_id", "admin_id", name="uq_affiliations_user_admin"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    # client
    user_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)
    # walker
    admin_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)

    is_active = Column(Boolean, default=True, nullable=False)
    affiliated_at = Column(DateTime, default=datetime.utcnow)
