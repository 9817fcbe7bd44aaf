import logging
from datetime import datetime
from typing import Dict, Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.domains.auth.exception import auth_error
from app.domains.auth.repository.auth_repository import AuthRepository
from app.domains.users.service.user_service import profile_to_dict
from app.models.user_role import AppRole
from app.schemas.auth.auth_schema import SignupRequest

logger = logging.getLogger(__name__)


def home_route_for(role: AppRole) -> str:
    return "/walker-dashboard" if role == AppRole.ADMIN else "/dashboard"


class AuthService:

    @staticmethod
    def signup(request: Request, claims: Dict[str, Any], body: SignupRequest, db: Session):
        path = request.url.path
        repo = AuthRepository(db)
        uid = claims["uid"]

        # 1) role is assigned once, at sign-up
        if repo.get_profile(uid) is not None:
            return auth_error("AUTH_SIGNUP_409_1", path)

        email = claims.get("email") or body.email
        if not email:
            return auth_error("AUTH_SIGNUP_400_1", path)

        # 2) profile + role (+ unlisted walker profile for walkers)
        try:
            profile = repo.create_profile(
                user_id=uid,
                name=body.name.strip(),
                email=email,
                phone=body.phone,
            )
            repo.create_role(uid, body.role)

            if body.role == AppRole.ADMIN:
                repo.create_walker_placeholder(uid)

            db.commit()
            db.refresh(profile)
        except Exception as e:
            logger.error("SIGNUP_ERROR: %s", e)
            db.rollback()
            return auth_error("AUTH_SIGNUP_500_1", path)

        response = {
            "success": True,
            "status": 201,
            "user": profile_to_dict(profile),
            "role": body.role.value,
            "is_walker": body.role == AppRole.ADMIN,
            "home_route": home_route_for(body.role),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=201, content=jsonable_encoder(response))

    @staticmethod
    def me(request: Request, session: SessionContext):
        response = {
            "success": True,
            "status": 200,
            "user": profile_to_dict(session.profile),
            "role": session.role.value,
            "is_walker": session.is_walker,
            "home_route": home_route_for(session.role),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": request.url.path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))
