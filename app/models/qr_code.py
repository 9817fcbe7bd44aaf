from datetime import datetime
import enum

from sqlalchemy import Column, String, Boolean, DateTime, Enum, ForeignKey
from app.models.base import Base, new_uuid, enum_values


class QrCodeType(str, enum.Enum):
    AFFILIATION = "affiliation"
    WALK = "walk"


class QrCode(Base):
    """One-time pairing token, either for an affiliation or for a walk."""
    __tablename__ = "qr_codes"

    id = Column(String(36), primary_key=True, default=new_uuid)
    code = Column(String(64), nullable=False, unique=True)
    code_type = Column(
        Enum(QrCodeType, name="qr_code_type", values_callable=enum_values),
        nullable=False,
        default=QrCodeType.WALK,
    )

    walk_id = Column(String(36), ForeignKey("walks.id"))
    admin_id = Column(String(128), ForeignKey("profiles.id"))
    created_by = Column(String(128), ForeignKey("profiles.id"))

    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)


class AdminQrCode(Base):
    """Walker's reusable affiliation code."""
    __tablename__ = "admin_qr_codes"

    id = Column(String(36), primary_key=True, default=new_uuid)
    admin_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, unique=True)
    code = Column(String(64), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)
