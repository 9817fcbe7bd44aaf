from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.firebase import verify_firebase_token
from app.db import get_db
from app.domains.auth.exception import auth_exception
from app.domains.auth.repository.auth_repository import AuthRepository
from app.models.profile import Profile
from app.models.user_role import AppRole


@dataclass
class SessionContext:
    """Authenticated caller, resolved once per request."""
    profile: Profile
    role: AppRole
    claims: Dict[str, Any] = field(default_factory=dict)

    @property
    def user_id(self) -> str:
        return self.profile.id

    @property
    def is_walker(self) -> bool:
        # walkers are stored with the "admin" role
        return self.role == AppRole.ADMIN


def parse_bearer_token(authorization: Optional[str]) -> str:
    if authorization is None:
        raise auth_exception("AUTH_401_1")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise auth_exception("AUTH_401_2")

    return parts[1]


def get_token_claims(
    authorization: Optional[str] = Header(None, description="Firebase ID token"),
) -> Dict[str, Any]:
    id_token = parse_bearer_token(authorization)

    decoded = verify_firebase_token(id_token)
    if decoded is None or not decoded.get("uid"):
        raise auth_exception("AUTH_401_3")

    return decoded


def load_session(db: Session, claims: Dict[str, Any]) -> Optional[SessionContext]:
    repo = AuthRepository(db)
    profile = repo.get_profile(claims["uid"])
    if profile is None:
        return None

    return SessionContext(profile=profile, role=repo.get_role(profile.id), claims=claims)


def get_session(
    claims: Dict[str, Any] = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> SessionContext:
    session = load_session(db, claims)
    if session is None:
        raise auth_exception("AUTH_404_1")
    return session


def require_walker(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.is_walker:
        raise auth_exception("AUTH_403_1")
    return session


def require_client(session: SessionContext = Depends(get_session)) -> SessionContext:
    if session.is_walker:
        raise auth_exception("AUTH_403_2")
    return session


def resolve_token_session(db: Session, token: Optional[str]) -> Optional[SessionContext]:
    """Used by WebSocket endpoints, which carry the token as a query parameter."""
    if not token:
        return None

    decoded = verify_firebase_token(token)
    if decoded is None or not decoded.get("uid"):
        return None

    return load_session(db, decoded)
