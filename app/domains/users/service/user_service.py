import logging
from datetime import datetime
from typing import Optional, Dict, Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.domains.users.exception import user_error
from app.domains.users.repository.user_repository import UserRepository
from app.models.profile import Profile
from app.schemas.users.user_update_schema import UserUpdateRequest

logger = logging.getLogger(__name__)


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "email": profile.email,
        "phone": profile.phone,
        "avatar_url": profile.avatar_url,
        "completed_walks_count": profile.completed_walks_count or 0,
    }


def profile_brief(profile: Optional[Profile], fallback_name: str) -> Dict[str, Any]:
    """Counterpart card shown next to requests, clients and walkers."""
    if profile is None:
        return {"id": None, "name": fallback_name, "phone": None, "avatar_url": None}
    return {
        "id": profile.id,
        "name": profile.name or fallback_name,
        "phone": profile.phone,
        "avatar_url": profile.avatar_url,
    }


class UserService:

    @staticmethod
    def get_me(request: Request, session: SessionContext):
        response = {
            "success": True,
            "status": 200,
            "user": profile_to_dict(session.profile),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": request.url.path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    @staticmethod
    def update_me(request: Request, session: SessionContext, body: UserUpdateRequest, db: Session):
        path = request.url.path

        if body is None or (body.name is None and body.phone is None and body.avatar_url is None):
            return user_error("USER_EDIT_400_1", path)

        repo = UserRepository(db)
        try:
            profile = repo.update_profile(
                session.profile,
                name=body.name.strip() if body.name else None,
                phone=body.phone,
                avatar_url=body.avatar_url,
            )
            db.commit()
            db.refresh(profile)
        except Exception as e:
            logger.error("PROFILE_UPDATE_ERROR: %s", e)
            db.rollback()
            return user_error("USER_EDIT_500_1", path)

        response = {
            "success": True,
            "status": 200,
            "user": profile_to_dict(profile),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    @staticmethod
    def update_fcm_token(request: Request, session: SessionContext, fcm_token: str, db: Session):
        path = request.url.path

        repo = UserRepository(db)
        try:
            repo.set_fcm_token(session.profile, fcm_token)
            db.commit()
        except Exception as e:
            logger.error("[FCM] Failed to store token: %s", e)
            db.rollback()
            return user_error("FCM_500_1", path)

        return JSONResponse(
            status_code=200,
            content={"success": True, "status": 200, "message": "Token FCM actualizado"},
        )
