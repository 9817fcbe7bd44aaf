import logging
from datetime import datetime
from typing import Dict, Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.core.realtime import feed, channel_for
from app.domains.affiliations.repository.affiliation_repository import AffiliationRepository
from app.domains.groups.repository.group_repository import GroupRepository
from app.domains.notifications.service.notification_service import NotificationService
from app.domains.tracking.exception import tracking_error
from app.domains.tracking.repository.location_repository import LocationRepository
from app.models.admin_location import AdminLocation
from app.schemas.tracking.tracking_schema import BroadcastMode, WalkStartRequest

logger = logging.getLogger(__name__)

ADMIN_LOCATIONS_TABLE = "admin_locations"


def admin_location_to_dict(row: Optional[AdminLocation]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {
        "admin_id": row.admin_id,
        "latitude": row.latitude,
        "longitude": row.longitude,
        "is_active": bool(row.is_active),
        "timestamp": row.timestamp,
    }


class TrackingService:

    def __init__(self, db: Session):
        self.db = db
        self.repo = LocationRepository(db)

    def _status_response(self, path: str, row: Optional[AdminLocation]):
        response = {
            "success": True,
            "status": 200,
            "active": row is not None,
            "location": admin_location_to_dict(row),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def _store_position(self, walker_id: str, latitude: float, longitude: float) -> AdminLocation:
        """Upsert + commit + publish. Raises on persistence errors."""
        row = self.repo.upsert_admin_location(walker_id, latitude, longitude)
        self.db.commit()
        self.db.refresh(row)

        feed.publish(
            channel_for(ADMIN_LOCATIONS_TABLE, walker_id),
            ADMIN_LOCATIONS_TABLE,
            admin_location_to_dict(row),
        )
        return row

    # ============================================================
    # Walker side
    # ============================================================
    def update_location(self, request: Request, session: SessionContext, latitude: float, longitude: float):
        path = request.url.path

        try:
            row = self._store_position(session.user_id, latitude, longitude)
        except Exception as e:
            logger.error("[TRACKING] Location update failed for %s: %s", session.user_id, e)
            self.db.rollback()
            return tracking_error("TRACK_LOCATION_500_1", path)

        logger.debug("[TRACKING] %s at (%s, %s)", session.user_id, latitude, longitude)
        return self._status_response(path, row)

    def stop(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            count = self.repo.deactivate_admin_locations(session.user_id)
            self.db.commit()
        except Exception as e:
            logger.error("[TRACKING] Stop failed for %s: %s", session.user_id, e)
            self.db.rollback()
            return tracking_error("TRACK_STOP_500_1", path)

        logger.info("[TRACKING] %s stopped sharing (%d rows deactivated)", session.user_id, count)
        return self._status_response(path, None)

    def status(self, request: Request, session: SessionContext):
        return self._status_response(
            request.url.path,
            self.repo.get_active_admin_location(session.user_id),
        )

    # ============================================================
    # Client side
    # ============================================================
    def can_view_walker(self, session: SessionContext, walker_id: str) -> bool:
        if session.user_id == walker_id:
            return True
        return AffiliationRepository(self.db).is_affiliated(session.user_id, walker_id)

    def walker_location(self, request: Request, session: SessionContext, walker_id: str):
        path = request.url.path

        if not self.can_view_walker(session, walker_id):
            return tracking_error("TRACK_READ_403_1", path)

        return self._status_response(path, self.repo.get_active_admin_location(walker_id))

    # ============================================================
    # Selective walk start
    # ============================================================
    def start_walk(self, request: Request, session: SessionContext, body: WalkStartRequest):
        path = request.url.path

        affiliated = AffiliationRepository(self.db).active_client_ids(session.user_id)

        if body.mode == BroadcastMode.GROUP:
            group_repo = GroupRepository(self.db)
            group = group_repo.get_active(body.group_id, session.user_id)
            if group is None:
                return tracking_error("TRACK_START_404_1", path)
            allowed = set(affiliated)
            # members whose affiliation was removed are skipped
            targets = [c for c in group_repo.member_ids(group.id) if c in allowed]
        elif body.mode == BroadcastMode.MANUAL:
            if not set(body.client_ids).issubset(affiliated):
                return tracking_error("TRACK_START_400_2", path)
            targets = list(dict.fromkeys(body.client_ids))
        else:
            targets = affiliated

        if not targets:
            return tracking_error("TRACK_START_400_1", path)

        row = None
        if body.latitude is not None and body.longitude is not None:
            try:
                row = self._store_position(session.user_id, body.latitude, body.longitude)
            except Exception as e:
                logger.error("[TRACKING] First fix failed for %s: %s", session.user_id, e)
                self.db.rollback()
                return tracking_error("TRACK_START_500_1", path)

        walker_name = session.profile.name or "Tu paseador"
        notified = NotificationService(self.db).notify(
            targets,
            "walk_start",
            "¡Tu paseador comenzó el paseo!",
            body.notes or f"{walker_name} está en camino. Sigue su ubicación en tiempo real.",
            {"walker_id": session.user_id, "mode": body.mode.value},
        )
        logger.info("[TRACKING] %s started a walk, %d clients notified (%s)", session.user_id, notified, body.mode.value)

        response = {
            "success": True,
            "status": 200,
            "mode": body.mode,
            "target_client_ids": targets,
            "notified": notified,
            "location": admin_location_to_dict(row),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))
