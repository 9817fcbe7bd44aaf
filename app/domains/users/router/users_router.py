from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, get_session
from app.db import get_db
from app.domains.users.service.user_service import UserService
from app.domains.users.exception import USER_GET_RESPONSES, USER_EDIT_RESPONSES, FCM_UPDATE_RESPONSES
from app.schemas.users.user_update_schema import (
    UserUpdateRequest,
    FcmTokenUpdateRequest,
    FcmTokenUpdateResponse,
)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get(
    "/me",
    summary="Mi perfil",
    description="Devuelve el perfil del usuario autenticado.",
    status_code=200,
    responses=USER_GET_RESPONSES,
)
def get_me(
    request: Request,
    session: SessionContext = Depends(get_session),
):
    return UserService.get_me(request, session)


@router.patch(
    "/me",
    summary="Actualizar mi perfil",
    description="Actualiza nombre, teléfono o avatar.",
    status_code=200,
    responses=USER_EDIT_RESPONSES,
)
def update_me(
    request: Request,
    body: UserUpdateRequest,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return UserService.update_me(request, session, body, db)


@router.put(
    "/me/fcm-token",
    summary="Actualizar token FCM",
    description="Guarda el token de notificaciones push del dispositivo.",
    status_code=200,
    response_model=FcmTokenUpdateResponse,
    responses=FCM_UPDATE_RESPONSES,
)
def update_fcm_token(
    request: Request,
    body: FcmTokenUpdateRequest,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    """
    Called when the app starts or the FCM token is refreshed.
    """
    return UserService.update_fcm_token(request, session, body.fcm_token, db)
