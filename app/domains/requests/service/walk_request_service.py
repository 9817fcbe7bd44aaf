import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.core.realtime import feed, channel_for
from app.domains.affiliations.repository.affiliation_repository import AffiliationRepository
from app.domains.auth.repository.auth_repository import AuthRepository
from app.domains.notifications.service.notification_service import NotificationService
from app.domains.requests.exception import request_error
from app.domains.requests.repository.walk_request_repository import WalkRequestRepository
from app.domains.users.repository.user_repository import UserRepository
from app.domains.users.service.user_service import profile_brief
from app.models.profile import Profile
from app.models.user_role import AppRole
from app.models.walk_request import WalkRequest, RequestStatus
from app.schemas.requests.walk_request_schema import WalkRequestCreate, WalkRequestRespond

logger = logging.getLogger(__name__)

WALK_REQUESTS_TABLE = "walk_requests"

HISTORY_STATUSES = (RequestStatus.REJECTED, RequestStatus.CANCELLED, RequestStatus.COMPLETED)


def walk_request_to_dict(row: WalkRequest, counterpart: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "id": row.id,
        "client_id": row.client_id,
        "walker_id": row.walker_id,
        "requested_date": row.requested_date,
        "requested_time": row.requested_time,
        "duration_minutes": row.duration_minutes,
        "number_of_dogs": row.number_of_dogs,
        "special_notes": row.special_notes,
        "status": row.status,
        "response_notes": row.response_notes,
        "created_at": row.created_at,
        "counterpart": counterpart,
    }


def bucket_requests(items: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """pending / accepted / history (rejected, cancelled, completed)."""
    buckets = {"pending": [], "accepted": [], "history": []}
    for item in items:
        status = item["status"]
        if status == RequestStatus.PENDING:
            buckets["pending"].append(item)
        elif status == RequestStatus.ACCEPTED:
            buckets["accepted"].append(item)
        elif status in HISTORY_STATUSES:
            buckets["history"].append(item)
    return buckets


class WalkRequestService:

    def __init__(self, db: Session):
        self.db = db
        self.repo = WalkRequestRepository(db)

    def _request_response(self, path: str, row: WalkRequest, status: int = 200):
        response = {
            "success": True,
            "status": status,
            "request": walk_request_to_dict(row),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=status, content=jsonable_encoder(response))

    def _list_response(self, path: str, rows: List[WalkRequest], counterpart_ids: List[str], fallback_name: str):
        profiles: Dict[str, Profile] = UserRepository(self.db).get_profiles_by_ids(counterpart_ids)
        items = [
            walk_request_to_dict(row, profile_brief(profiles.get(cid), fallback_name))
            for row, cid in zip(rows, counterpart_ids)
        ]
        response = {
            "success": True,
            "status": 200,
            "requests": bucket_requests(items),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    # ============================================================
    # Client
    # ============================================================
    def create(self, request: Request, session: SessionContext, body: WalkRequestCreate):
        path = request.url.path

        auth_repo = AuthRepository(self.db)
        walker = auth_repo.get_profile(body.walker_id)
        if walker is None or auth_repo.get_role(walker.id) != AppRole.ADMIN:
            return request_error("REQ_CREATE_404_1", path)

        try:
            row = self.repo.create(
                client_id=session.user_id,
                walker_id=walker.id,
                requested_date=body.requested_date,
                requested_time=body.requested_time,
                duration_minutes=body.duration_minutes,
                number_of_dogs=body.number_of_dogs,
                special_notes=body.special_notes,
            )
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            logger.error("WALK_REQUEST_CREATE_ERROR: %s", e)
            self.db.rollback()
            return request_error("REQ_CREATE_500_1", path)

        feed.publish(
            channel_for(WALK_REQUESTS_TABLE, walker.id),
            WALK_REQUESTS_TABLE,
            walk_request_to_dict(row),
        )
        NotificationService(self.db).notify(
            [walker.id],
            "walk_request",
            "Nueva solicitud de paseo",
            f"{session.profile.name or 'Un cliente'} solicitó un paseo para el {row.requested_date.isoformat()}",
            {"request_id": row.id},
        )

        return self._request_response(path, row, status=201)

    def list_mine(self, request: Request, session: SessionContext):
        path = request.url.path
        try:
            rows = self.repo.list_for_client(session.user_id)
            return self._list_response(path, rows, [r.walker_id for r in rows], "Paseador")
        except Exception as e:
            logger.error("WALK_REQUEST_LIST_ERROR: %s", e)
            return request_error("REQ_LIST_500_1", path)

    def cancel(self, request: Request, session: SessionContext, request_id: str):
        path = request.url.path

        row = self.repo.get(request_id)
        if row is None or row.client_id != session.user_id:
            return request_error("REQ_404_1", path)
        if row.status != RequestStatus.PENDING:
            return request_error("REQ_409_1", path)

        try:
            self.repo.set_status(row, RequestStatus.CANCELLED)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            logger.error("WALK_REQUEST_CANCEL_ERROR: %s", e)
            self.db.rollback()
            return request_error("REQ_CANCEL_500_1", path)

        return self._request_response(path, row)

    # ============================================================
    # Walker
    # ============================================================
    def list_incoming(self, request: Request, session: SessionContext):
        path = request.url.path
        try:
            rows = self.repo.list_for_walker(session.user_id)
            return self._list_response(path, rows, [r.client_id for r in rows], "Cliente")
        except Exception as e:
            logger.error("WALK_REQUEST_LIST_ERROR: %s", e)
            return request_error("REQ_LIST_500_1", path)

    def respond(self, request: Request, session: SessionContext, request_id: str, body: WalkRequestRespond):
        path = request.url.path

        row = self.repo.get(request_id)
        if row is None or row.walker_id != session.user_id:
            return request_error("REQ_404_1", path)
        if row.status != RequestStatus.PENDING:
            return request_error("REQ_409_1", path)

        new_status = RequestStatus.ACCEPTED if body.accept else RequestStatus.REJECTED

        try:
            self.repo.set_status(row, new_status, body.response_notes)
            if body.accept:
                # an accepted client can follow the walker right away
                AffiliationRepository(self.db).ensure_active(row.client_id, row.walker_id)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            logger.error("WALK_REQUEST_RESPOND_ERROR: %s", e)
            self.db.rollback()
            return request_error("REQ_RESPOND_500_1", path)

        walker_name = session.profile.name or "Tu paseador"
        if body.accept:
            title, text = "Solicitud aceptada", f"{walker_name} aceptó tu solicitud de paseo"
        else:
            title, text = "Solicitud rechazada", f"{walker_name} no puede atender tu solicitud"
        NotificationService(self.db).notify(
            [row.client_id],
            f"walk_request_{new_status.value}",
            title,
            text,
            {"request_id": row.id},
        )

        return self._request_response(path, row)

    def complete(self, request: Request, session: SessionContext, request_id: str):
        path = request.url.path

        row = self.repo.get(request_id)
        if row is None or row.walker_id != session.user_id:
            return request_error("REQ_404_1", path)
        if row.status != RequestStatus.ACCEPTED:
            return request_error("REQ_409_2", path)

        try:
            self.repo.set_status(row, RequestStatus.COMPLETED)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            logger.error("WALK_REQUEST_COMPLETE_ERROR: %s", e)
            self.db.rollback()
            return request_error("REQ_COMPLETE_500_1", path)

        return self._request_response(path, row)
