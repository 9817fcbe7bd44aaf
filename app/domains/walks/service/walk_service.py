import logging
from datetime import datetime
from typing import Dict, Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.core.realtime import feed, channel_for
from app.domains.affiliations.codes import one_time_code, code_expiry
from app.domains.affiliations.repository.qr_repository import QrRepository
from app.domains.notifications.service.notification_service import NotificationService
from app.domains.tracking.repository.location_repository import LocationRepository
from app.domains.users.repository.user_repository import UserRepository
from app.domains.walks.exception import walk_error
from app.domains.walks.repository.walk_repository import WalkRepository
from app.models.location import Location
from app.models.qr_code import QrCode, QrCodeType
from app.models.walk import Walk, WalkStatus
from app.schemas.walks.walk_schema import WalkCreateRequest, LocationPointRequest

logger = logging.getLogger(__name__)

LOCATIONS_TABLE = "locations"

# status -> statuses it may move to
WALK_TRANSITIONS = {
    WalkStatus.PENDING: {WalkStatus.ACTIVE, WalkStatus.CANCELLED},
    WalkStatus.ACTIVE: {WalkStatus.COMPLETED, WalkStatus.CANCELLED},
    WalkStatus.COMPLETED: set(),
    WalkStatus.CANCELLED: set(),
}


def can_transition(current: WalkStatus, target: WalkStatus) -> bool:
    return target in WALK_TRANSITIONS.get(current, set())


def walk_to_dict(walk: Walk) -> Dict[str, Any]:
    return {
        "id": walk.id,
        "client_id": walk.client_id,
        "walker_id": walk.walker_id,
        "dog_name": walk.dog_name,
        "status": walk.status,
        "notes": walk.notes,
        "start_time": walk.start_time,
        "end_time": walk.end_time,
        "created_at": walk.created_at,
    }


def location_to_dict(loc: Location) -> Dict[str, Any]:
    return {
        "id": loc.id,
        "walk_id": loc.walk_id,
        "latitude": loc.latitude,
        "longitude": loc.longitude,
        "timestamp": loc.timestamp,
    }


def qr_to_dict(qr: Optional[QrCode]) -> Optional[Dict[str, Any]]:
    if qr is None:
        return None
    return {"code": qr.code, "expires_at": qr.expires_at, "is_active": bool(qr.is_active)}


class WalkService:

    def __init__(self, db: Session):
        self.db = db
        self.walk_repo = WalkRepository(db)
        self.qr_repo = QrRepository(db)

    def _walk_response(self, path: str, walk: Walk, qr: Optional[QrCode] = None, status: int = 200):
        response = {
            "success": True,
            "status": status,
            "walk": walk_to_dict(walk),
            "qr": qr_to_dict(qr),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=status, content=jsonable_encoder(response))

    def _load_for_participant(self, walk_id: str, session: SessionContext, path: str):
        """Returns (walk, None) or (None, error_response)."""
        walk = self.walk_repo.get(walk_id)
        if walk is None:
            return None, walk_error("WALK_GET_404_1", path)
        if session.user_id not in (walk.client_id, walk.walker_id):
            return None, walk_error("WALK_GET_403_1", path)
        return walk, None

    # ============================================================
    # Create (client) + walk QR
    # ============================================================
    def create(self, request: Request, session: SessionContext, body: WalkCreateRequest):
        path = request.url.path

        try:
            walk = self.walk_repo.create(session.user_id, body.dog_name, body.notes)
            qr = self.qr_repo.create_code(
                code=one_time_code(),
                code_type=QrCodeType.WALK,
                created_by=session.user_id,
                walk_id=walk.id,
                expires_at=code_expiry(),
            )
            self.db.commit()
            self.db.refresh(walk)
        except Exception as e:
            logger.error("WALK_CREATE_ERROR: %s", e)
            self.db.rollback()
            return walk_error("WALK_CREATE_500_1", path)

        return self._walk_response(path, walk, qr, status=201)

    # ============================================================
    # Scan (walker): bind + start
    # ============================================================
    def scan(self, request: Request, session: SessionContext, code: str):
        path = request.url.path

        qr = self.qr_repo.get_active_code(code, QrCodeType.WALK)
        if qr is None or not qr.walk_id:
            return walk_error("WALK_SCAN_404_1", path)

        walk = self.walk_repo.get(qr.walk_id)
        if walk is None:
            return walk_error("WALK_SCAN_404_1", path)
        if not can_transition(walk.status, WalkStatus.ACTIVE):
            return walk_error("WALK_SCAN_409_1", path)

        try:
            self.walk_repo.start(walk, session.user_id)
            self.qr_repo.deactivate(qr)
            self.db.commit()
            self.db.refresh(walk)
        except Exception as e:
            logger.error("WALK_SCAN_ERROR: %s", e)
            self.db.rollback()
            return walk_error("WALK_SCAN_500_1", path)

        NotificationService(self.db).notify(
            [walk.client_id],
            "walk_started",
            "¡Tu paseo comenzó!",
            f"{session.profile.name or 'Tu paseador'} inició el paseo de {walk.dog_name}",
            {"walk_id": walk.id},
        )

        return self._walk_response(path, walk, qr)

    # ============================================================
    # Read
    # ============================================================
    def list_mine(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            walks = self.walk_repo.list_for_user(session.user_id)
        except Exception as e:
            logger.error("WALK_LIST_ERROR: %s", e)
            return walk_error("WALK_LIST_500_1", path)

        response = {
            "success": True,
            "status": 200,
            "walks": [walk_to_dict(w) for w in walks],
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def get(self, request: Request, session: SessionContext, walk_id: str):
        path = request.url.path

        walk, error = self._load_for_participant(walk_id, session, path)
        if error is not None:
            return error

        qr = None
        if walk.client_id == session.user_id and walk.status == WalkStatus.PENDING:
            # the owner still needs the code to show it to the walker
            qr = self.qr_repo.get_code_for_walk(walk.id)

        return self._walk_response(path, walk, qr)

    # ============================================================
    # Status
    # ============================================================
    def update_status(self, request: Request, session: SessionContext, walk_id: str, target: WalkStatus):
        path = request.url.path

        walk, error = self._load_for_participant(walk_id, session, path)
        if error is not None:
            return error

        # a walk starts only when the walker scans its QR
        if target == WalkStatus.ACTIVE:
            return walk_error("WALK_STATUS_409_2", path)
        if not can_transition(walk.status, target):
            return walk_error("WALK_STATUS_409_1", path)

        # finishing belongs to the walker; either side may cancel
        if target == WalkStatus.COMPLETED and not session.is_walker:
            return walk_error("WALK_STATUS_403_1", path)

        try:
            self.walk_repo.set_status(walk, target)

            if target == WalkStatus.COMPLETED and walk.walker_id:
                UserRepository(self.db).increment_completed_walks(walk.walker_id)

            qr = self.qr_repo.get_code_for_walk(walk.id)
            if qr is not None and qr.is_active:
                self.qr_repo.deactivate(qr)

            self.db.commit()
            self.db.refresh(walk)
        except Exception as e:
            logger.error("WALK_STATUS_ERROR: %s", e)
            self.db.rollback()
            return walk_error("WALK_STATUS_500_1", path)

        counterpart = walk.client_id if session.user_id != walk.client_id else walk.walker_id
        if counterpart:
            NotificationService(self.db).notify(
                [counterpart],
                f"walk_{target.value}",
                "Actualización de paseo",
                f"El paseo de {walk.dog_name} ahora está: {target.value}",
                {"walk_id": walk.id},
            )

        return self._walk_response(path, walk)

    # ============================================================
    # Per-walk track
    # ============================================================
    def add_location(self, request: Request, session: SessionContext, walk_id: str, body: LocationPointRequest):
        path = request.url.path

        walk, error = self._load_for_participant(walk_id, session, path)
        if error is not None:
            return error
        if walk.walker_id != session.user_id:
            return walk_error("WALK_LOCATION_403_1", path)
        if walk.status != WalkStatus.ACTIVE:
            return walk_error("WALK_LOCATION_409_1", path)

        try:
            loc = LocationRepository(self.db).append_location(
                walk.id, body.latitude, body.longitude, body.timestamp
            )
            self.db.commit()
            self.db.refresh(loc)
        except Exception as e:
            logger.error("WALK_LOCATION_ERROR: %s", e)
            self.db.rollback()
            return walk_error("WALK_LOCATION_500_1", path)

        row = location_to_dict(loc)
        feed.publish(channel_for(LOCATIONS_TABLE, walk.id), LOCATIONS_TABLE, row)

        response = {
            "success": True,
            "status": 201,
            "location": row,
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=201, content=jsonable_encoder(response))

    def list_locations(self, request: Request, session: SessionContext, walk_id: str):
        path = request.url.path

        walk, error = self._load_for_participant(walk_id, session, path)
        if error is not None:
            return error

        rows = LocationRepository(self.db).list_locations(walk.id)
        response = {
            "success": True,
            "status": 200,
            "locations": [location_to_dict(r) for r in rows],
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))
