import logging
from datetime import datetime, timedelta
from typing import Dict, Any, Optional, Tuple

import pytz
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.core.config import settings
from app.domains.affiliations.repository.affiliation_repository import AffiliationRepository
from app.domains.tracking.repository.location_repository import LocationRepository
from app.domains.users.repository.user_repository import UserRepository
from app.domains.users.service.user_service import profile_brief
from app.domains.walkers.exception import walker_error
from app.domains.walkers.repository.walker_repository import WalkerRepository
from app.domains.walks.repository.walk_repository import WalkRepository
from app.models.subscription import SubscriptionPlan
from app.models.walk import WalkStatus
from app.models.walker_profile import WalkerProfile
from app.schemas.walkers.walker_schema import WalkerProfileUpdate

logger = logging.getLogger(__name__)

WALKER_FALLBACK_NAME = "Paseador"
CLIENT_FALLBACK_NAME = "Cliente"


def default_plan() -> Dict[str, Any]:
    """Plan used when the walker has no active subscription."""
    limit = settings.FREE_PLAN_MAX_CLIENTS
    return {
        "id": "default",
        "name": "free",
        "display_name": "Gratuito",
        "max_clients": limit,
        "features": [f"Hasta {limit} clientes", "Tracking básico", "1 grupo"],
    }


def plan_to_dict(plan: Optional[SubscriptionPlan]) -> Dict[str, Any]:
    if plan is None:
        return default_plan()
    return {
        "id": plan.id,
        "name": plan.name,
        "display_name": plan.display_name,
        "max_clients": plan.max_clients,
        "features": plan.features or [],
    }


def plan_usage(client_count: int, client_limit: int) -> Dict[str, Any]:
    return {
        "client_count": client_count,
        "client_limit": client_limit,
        "is_at_limit": client_count >= client_limit,
        "is_near_limit": client_count >= client_limit - 1,
        "remaining_slots": max(0, client_limit - client_count),
    }


def today_bounds_utc(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Start/end of the current local day, as naive UTC datetimes."""
    tz = pytz.timezone(settings.TIMEZONE)
    now_local = now.astimezone(tz) if now else datetime.now(tz)

    start_local = tz.localize(datetime(now_local.year, now_local.month, now_local.day))
    end_local = tz.localize(datetime.combine(start_local.date() + timedelta(days=1), datetime.min.time()))

    return (
        start_local.astimezone(pytz.UTC).replace(tzinfo=None),
        end_local.astimezone(pytz.UTC).replace(tzinfo=None),
    )


def walker_profile_to_dict(row: WalkerProfile) -> Dict[str, Any]:
    return {
        "user_id": row.user_id,
        "is_available": bool(row.is_available),
        "service_radius": row.service_radius,
        "hourly_rate": row.hourly_rate,
        "specialties": row.specialties or [],
        "bio": row.bio,
        "city": row.city,
        "state": row.state,
    }


def matches_query(listing: Dict[str, Any], query: str) -> bool:
    q = query.lower()
    fields = [listing.get("name"), listing.get("city"), listing.get("state")]
    if any(f and q in f.lower() for f in fields):
        return True
    return any(q in s.lower() for s in listing.get("specialties") or [])


class WalkerService:

    def __init__(self, db: Session):
        self.db = db
        self.repo = WalkerRepository(db)

    # ============================================================
    # Service listing
    # ============================================================
    def get_my_profile(self, request: Request, session: SessionContext):
        path = request.url.path

        row = self.repo.get_profile(session.user_id)
        profile = walker_profile_to_dict(row) if row else {
            "user_id": session.user_id,
            "is_available": False,
            "service_radius": 10,
            "hourly_rate": None,
            "specialties": [],
            "bio": None,
            "city": None,
            "state": None,
        }

        response = {
            "success": True,
            "status": 200,
            "profile": profile,
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def save_my_profile(self, request: Request, session: SessionContext, body: WalkerProfileUpdate):
        path = request.url.path

        try:
            row = self.repo.upsert_profile(
                session.user_id,
                is_available=body.is_available,
                service_radius=body.service_radius,
                hourly_rate=body.hourly_rate,
                specialties=body.specialties,
                bio=body.bio,
                city=body.city,
                state=body.state,
            )
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            logger.error("WALKER_PROFILE_SAVE_ERROR: %s", e)
            self.db.rollback()
            return walker_error("WALKER_PROFILE_500_1", path)

        response = {
            "success": True,
            "status": 200,
            "profile": walker_profile_to_dict(row),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    # ============================================================
    # Discovery
    # ============================================================
    def search(self, request: Request, query: Optional[str]):
        path = request.url.path

        try:
            rows = self.repo.list_available()
            profiles = UserRepository(self.db).get_profiles_by_ids([r.user_id for r in rows])
        except Exception as e:
            logger.error("WALKER_LIST_ERROR: %s", e)
            return walker_error("WALKER_LIST_500_1", path)

        listings = []
        for row in rows:
            profile = profiles.get(row.user_id)
            listing = walker_profile_to_dict(row)
            listing.update(
                name=(profile.name if profile and profile.name else WALKER_FALLBACK_NAME),
                avatar_url=profile.avatar_url if profile else None,
                completed_walks_count=(profile.completed_walks_count or 0) if profile else 0,
            )
            listings.append(listing)

        query = (query or "").strip()
        if query:
            listings = [item for item in listings if matches_query(item, query)]

        response = {
            "success": True,
            "status": 200,
            "walkers": listings,
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    # ============================================================
    # Dashboard
    # ============================================================
    def list_clients(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            affiliations = AffiliationRepository(self.db).list_for_walker(session.user_id)
            profiles = UserRepository(self.db).get_profiles_by_ids([a.user_id for a in affiliations])
        except Exception as e:
            logger.error("WALKER_CLIENTS_ERROR: %s", e)
            return walker_error("WALKER_CLIENTS_500_1", path)

        response = {
            "success": True,
            "status": 200,
            "clients": [
                {
                    "client": profile_brief(profiles.get(a.user_id), CLIENT_FALLBACK_NAME),
                    "affiliated_at": a.affiliated_at,
                }
                for a in affiliations
            ],
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def metrics(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            walk_repo = WalkRepository(self.db)
            day_start, day_end = today_bounds_utc()

            active_clients = AffiliationRepository(self.db).count_active(session.user_id)
            active_walks = walk_repo.count_for_walker(session.user_id, statuses=[WalkStatus.ACTIVE])
            walks_today = walk_repo.count_for_walker(
                session.user_id, created_from=day_start, created_until=day_end
            )
            sharing_location = LocationRepository(self.db).count_active_admin_locations(session.user_id) > 0
        except Exception as e:
            logger.error("WALKER_METRICS_ERROR: %s", e)
            return walker_error("WALKER_METRICS_500_1", path)

        response = {
            "success": True,
            "status": 200,
            "metrics": {
                "active_clients": active_clients,
                "active_walks": active_walks,
                "walks_today": walks_today,
                "total_walks": session.profile.completed_walks_count or 0,
                "is_walk_active": active_walks > 0 or sharing_location,
            },
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def plan(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            plan = plan_to_dict(self.repo.get_active_plan(session.user_id))
            client_count = AffiliationRepository(self.db).count_active(session.user_id)
        except Exception as e:
            logger.error("WALKER_PLAN_ERROR: %s", e)
            return walker_error("WALKER_PLAN_500_1", path)

        response = {
            "success": True,
            "status": 200,
            "plan": plan,
            **plan_usage(client_count, plan["max_clients"] or settings.FREE_PLAN_MAX_CLIENTS),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))
