from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.qr_code import QrCode, QrCodeType, AdminQrCode


class QrRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # Walker reusable code
    # -------------------------------
    def get_admin_qr(self, admin_id: str) -> Optional[AdminQrCode]:
        return (
            self.db.query(AdminQrCode)
            .filter(AdminQrCode.admin_id == admin_id)
            .first()
        )

    def get_admin_qr_by_code(self, code: str) -> Optional[AdminQrCode]:
        return (
            self.db.query(AdminQrCode)
            .filter(AdminQrCode.code == code)
            .first()
        )

    def replace_admin_qr(self, admin_id: str, code: str) -> AdminQrCode:
        existing = self.get_admin_qr(admin_id)
        if existing is not None:
            existing.code = code
            existing.created_at = datetime.utcnow()
            self.db.flush()
            return existing

        row = AdminQrCode(admin_id=admin_id, code=code)
        self.db.add(row)
        self.db.flush()
        return row

    # -------------------------------
    # One-time codes
    # -------------------------------
    def create_code(
        self,
        code: str,
        code_type: QrCodeType,
        created_by: str,
        expires_at: Optional[datetime],
        walk_id: Optional[str] = None,
        admin_id: Optional[str] = None,
    ) -> QrCode:
        row = QrCode(
            code=code,
            code_type=code_type,
            walk_id=walk_id,
            admin_id=admin_id,
            created_by=created_by,
            expires_at=expires_at,
            is_active=True,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def get_active_code(self, code: str, code_type: QrCodeType, now: Optional[datetime] = None) -> Optional[QrCode]:
        now = now or datetime.utcnow()
        return (
            self.db.query(QrCode)
            .filter(
                QrCode.code == code,
                QrCode.code_type == code_type,
                QrCode.is_active.is_(True),
                or_(QrCode.expires_at.is_(None), QrCode.expires_at > now),
            )
            .first()
        )

    def get_code_for_walk(self, walk_id: str) -> Optional[QrCode]:
        return (
            self.db.query(QrCode)
            .filter(QrCode.walk_id == walk_id)
            .order_by(QrCode.created_at.desc())
            .first()
        )

    def deactivate(self, qr: QrCode) -> QrCode:
        qr.is_active = False
        self.db.flush()
        return qr
