from datetime import datetime
import enum

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey
from app.models.base import Base, new_uuid, enum_values


class AppRole(str, enum.Enum):
    # walkers are modeled as "admin"
    USER = "user"
    ADMIN = "admin"


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, unique=True)
    role = Column(
        Enum(AppRole, name="app_role", values_callable=enum_values),
        nullable=False,
        default=AppRole.USER,
    )
    created_at = Column(DateTime, default=datetime.utcnow)
