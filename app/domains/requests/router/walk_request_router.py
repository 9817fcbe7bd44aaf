from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, require_walker, require_client
from app.db import get_db
from app.domains.requests.service.walk_request_service import WalkRequestService
from app.domains.requests.exception import (
    REQ_CREATE_RESPONSES,
    REQ_CLIENT_LIST_RESPONSES,
    REQ_WALKER_LIST_RESPONSES,
    REQ_CLIENT_ACTION_RESPONSES,
    REQ_WALKER_ACTION_RESPONSES,
)
from app.schemas.requests.walk_request_schema import (
    WalkRequestCreate,
    WalkRequestRespond,
    WalkRequestResponse,
    WalkRequestListResponse,
)

router = APIRouter(prefix="/api/v1/requests", tags=["Walk Requests"])


@router.post(
    "",
    summary="Solicitar paseo",
    description="El cliente envía una solicitud de paseo a un paseador.",
    status_code=201,
    response_model=WalkRequestResponse,
    responses=REQ_CREATE_RESPONSES,
)
def create_request(
    request: Request,
    body: WalkRequestCreate,
    session: SessionContext = Depends(require_client),
    db: Session = Depends(get_db),
):
    """
    - duración 30-480 minutos, 1-10 perros, notas de hasta 500 caracteres
    - el paseador recibe la solicitud en tiempo real y por push
    """
    return WalkRequestService(db).create(request, session, body)


@router.get(
    "/mine",
    summary="Mis solicitudes",
    description="Solicitudes enviadas por el cliente, agrupadas en pendientes, aceptadas e historial.",
    status_code=200,
    response_model=WalkRequestListResponse,
    responses=REQ_CLIENT_LIST_RESPONSES,
)
def list_my_requests(
    request: Request,
    session: SessionContext = Depends(require_client),
    db: Session = Depends(get_db),
):
    return WalkRequestService(db).list_mine(request, session)


@router.get(
    "/incoming",
    summary="Solicitudes recibidas",
    description="Solicitudes dirigidas al paseador, agrupadas en pendientes, aceptadas e historial.",
    status_code=200,
    response_model=WalkRequestListResponse,
    responses=REQ_WALKER_LIST_RESPONSES,
)
def list_incoming_requests(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkRequestService(db).list_incoming(request, session)


@router.post(
    "/{request_id}/cancel",
    summary="Cancelar solicitud",
    status_code=200,
    response_model=WalkRequestResponse,
    responses=REQ_CLIENT_ACTION_RESPONSES,
)
def cancel_request(
    request_id: str,
    request: Request,
    session: SessionContext = Depends(require_client),
    db: Session = Depends(get_db),
):
    return WalkRequestService(db).cancel(request, session, request_id)


@router.post(
    "/{request_id}/respond",
    summary="Responder solicitud",
    description="Acepta o rechaza una solicitud pendiente. Al aceptar, el cliente queda afiliado.",
    status_code=200,
    response_model=WalkRequestResponse,
    responses=REQ_WALKER_ACTION_RESPONSES,
)
def respond_request(
    request_id: str,
    request: Request,
    body: WalkRequestRespond,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkRequestService(db).respond(request, session, request_id, body)


@router.post(
    "/{request_id}/complete",
    summary="Completar solicitud",
    status_code=200,
    response_model=WalkRequestResponse,
    responses=REQ_WALKER_ACTION_RESPONSES,
)
def complete_request(
    request_id: str,
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkRequestService(db).complete(request, session, request_id)
