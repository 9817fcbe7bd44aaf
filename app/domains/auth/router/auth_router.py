from typing import Dict, Any

from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, get_session, get_token_claims
from app.db import get_db
from app.domains.auth.service.auth_service import AuthService
from app.domains.auth.exception import AUTH_SIGNUP_RESPONSES, AUTH_ME_RESPONSES
from app.schemas.auth.auth_schema import SignupRequest, SessionResponse

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post(
    "/signup",
    summary="Registro",
    description="Crea el perfil y asigna el rol (cliente o paseador) a una cuenta de Firebase recién creada.",
    status_code=201,
    response_model=SessionResponse,
    responses=AUTH_SIGNUP_RESPONSES,
)
def signup(
    request: Request,
    body: SignupRequest,
    claims: Dict[str, Any] = Depends(get_token_claims),
    db: Session = Depends(get_db),
):
    """
    - el rol es inmutable: un segundo registro devuelve 409
    - los paseadores reciben un perfil de servicio no disponible
    """
    return AuthService.signup(request, claims, body, db)


@router.get(
    "/me",
    summary="Sesión actual",
    description="Devuelve el perfil, el rol y la ruta de inicio del usuario autenticado.",
    status_code=200,
    response_model=SessionResponse,
    responses=AUTH_ME_RESPONSES,
)
def me(
    request: Request,
    session: SessionContext = Depends(get_session),
):
    return AuthService.me(request, session)
