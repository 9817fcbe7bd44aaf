import logging
import time
from datetime import datetime

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.domains.affiliations.codes import walker_code, one_time_code, code_expiry
from app.domains.affiliations.exception import affiliation_error
from app.domains.affiliations.repository.affiliation_repository import AffiliationRepository
from app.domains.affiliations.repository.qr_repository import QrRepository
from app.domains.notifications.service.notification_service import NotificationService
from app.domains.tracking.repository.location_repository import LocationRepository
from app.domains.users.repository.user_repository import UserRepository
from app.domains.users.service.user_service import profile_brief
from app.models.qr_code import QrCodeType

logger = logging.getLogger(__name__)

WALKER_FALLBACK_NAME = "Paseador"


class AffiliationService:

    def __init__(self, db: Session):
        self.db = db
        self.aff_repo = AffiliationRepository(db)
        self.qr_repo = QrRepository(db)

    def _qr_response(self, path: str, code: str, code_type: QrCodeType, expires_at=None, status: int = 200):
        response = {
            "success": True,
            "status": status,
            "qr": {
                "code": code,
                "code_type": code_type.value,
                "expires_at": expires_at,
            },
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=status, content=jsonable_encoder(response))

    def _already_affiliated(self, path: str, walker_id: str):
        response = {
            "success": True,
            "status": 200,
            "walker_id": walker_id,
            "already_affiliated": True,
            "message": "Ya estás afiliado a este paseador",
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    # ============================================================
    # Walker side: codes
    # ============================================================
    def get_walker_qr(self, request: Request, session: SessionContext):
        path = request.url.path

        row = self.qr_repo.get_admin_qr(session.user_id)
        if row is not None:
            return self._qr_response(path, row.code, QrCodeType.AFFILIATION)

        return self.regenerate_walker_qr(request, session)

    def regenerate_walker_qr(self, request: Request, session: SessionContext):
        path = request.url.path

        current = self.qr_repo.get_admin_qr(session.user_id)
        code = walker_code(session.user_id)
        while current is not None and code == current.code:
            # same millisecond as the previous code
            time.sleep(0.001)
            code = walker_code(session.user_id)

        try:
            row = self.qr_repo.replace_admin_qr(session.user_id, code)
            self.db.commit()
        except Exception as e:
            logger.error("WALKER_QR_ERROR: %s", e)
            self.db.rollback()
            return affiliation_error("AFF_QR_500_1", path)

        return self._qr_response(path, row.code, QrCodeType.AFFILIATION)

    def create_affiliation_code(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            qr = self.qr_repo.create_code(
                code=one_time_code(),
                code_type=QrCodeType.AFFILIATION,
                created_by=session.user_id,
                admin_id=session.user_id,
                expires_at=code_expiry(),
            )
            self.db.commit()
        except Exception as e:
            logger.error("AFFILIATION_CODE_ERROR: %s", e)
            self.db.rollback()
            return affiliation_error("AFF_QR_500_1", path)

        return self._qr_response(path, qr.code, QrCodeType.AFFILIATION, qr.expires_at, status=201)

    # ============================================================
    # Client side: scan
    # ============================================================
    def scan(self, request: Request, session: SessionContext, code: str):
        path = request.url.path

        one_time = self.qr_repo.get_active_code(code, QrCodeType.AFFILIATION)
        if one_time is not None and one_time.admin_id:
            walker_id = one_time.admin_id
        else:
            one_time = None
            reusable = self.qr_repo.get_admin_qr_by_code(code)
            if reusable is None:
                return affiliation_error("AFF_SCAN_404_1", path)
            walker_id = reusable.admin_id

        existing = self.aff_repo.get(session.user_id, walker_id)
        if existing is not None and existing.is_active:
            return self._already_affiliated(path, walker_id)

        try:
            self.aff_repo.ensure_active(session.user_id, walker_id)
            if one_time is not None:
                self.qr_repo.deactivate(one_time)
            # link and code consumption land together or not at all
            self.db.commit()
        except IntegrityError:
            # a concurrent scan inserted the same link first
            self.db.rollback()
            logger.info("AFFILIATION_RACE: user=%s walker=%s", session.user_id, walker_id)
            return self._already_affiliated(path, walker_id)
        except Exception as e:
            logger.error("AFFILIATION_ERROR: %s", e)
            self.db.rollback()
            return affiliation_error("AFF_SCAN_500_1", path)

        NotificationService(self.db).notify(
            [walker_id],
            "new_client",
            "Nuevo cliente",
            f"{session.profile.name or 'Un cliente'} se afilió contigo",
            {"client_id": session.user_id},
        )

        response = {
            "success": True,
            "status": 201,
            "walker_id": walker_id,
            "already_affiliated": False,
            "message": "¡Afiliación exitosa! Ahora puedes ver la ubicación en tiempo real",
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=201, content=jsonable_encoder(response))

    # ============================================================
    # Client side: my walkers
    # ============================================================
    def list_my_walkers(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            affiliations = self.aff_repo.list_for_client(session.user_id)
            walker_ids = [a.admin_id for a in affiliations]
            profiles = UserRepository(self.db).get_profiles_by_ids(walker_ids)
            live = LocationRepository(self.db).active_admin_ids(walker_ids)
        except Exception as e:
            logger.error("MY_WALKERS_ERROR: %s", e)
            return affiliation_error("AFF_LIST_500_1", path)

        items = [
            {
                "walker": profile_brief(profiles.get(a.admin_id), WALKER_FALLBACK_NAME),
                "affiliated_at": a.affiliated_at,
                "is_active": bool(a.is_active),
                "has_active_location": a.admin_id in live,
            }
            for a in affiliations
        ]
        # stable: walkers sharing their location first, otherwise newest link first
        items.sort(key=lambda item: not item["has_active_location"])

        response = {
            "success": True,
            "status": 200,
            "walkers": items,
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def remove(self, request: Request, session: SessionContext, walker_id: str):
        path = request.url.path

        aff = self.aff_repo.get(session.user_id, walker_id)
        if aff is None or not aff.is_active:
            return affiliation_error("AFF_DELETE_404_1", path)

        try:
            self.aff_repo.deactivate(aff)
            self.db.commit()
        except Exception as e:
            logger.error("AFFILIATION_DELETE_ERROR: %s", e)
            self.db.rollback()
            return affiliation_error("AFF_DELETE_500_1", path)

        return JSONResponse(
            status_code=200,
            content={"success": True, "status": 200, "message": "Afiliación eliminada"},
        )
