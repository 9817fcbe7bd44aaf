from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, get_session, require_walker, require_client
from app.db import get_db
from app.domains.walks.service.walk_service import WalkService
from app.domains.walks.exception import (
    WALK_CREATE_RESPONSES,
    WALK_SCAN_RESPONSES,
    WALK_GET_RESPONSES,
    WALK_STATUS_RESPONSES,
)
from app.schemas.affiliations.affiliation_schema import ScanCodeRequest
from app.schemas.walks.walk_schema import (
    WalkCreateRequest,
    WalkStatusUpdateRequest,
    LocationPointRequest,
    WalkResponse,
    WalkListResponse,
    LocationListResponse,
)

router = APIRouter(prefix="/api/v1/walks", tags=["Walks"])


@router.post(
    "",
    summary="Crear paseo",
    description="Crea un paseo pendiente y su código QR (válido 24 horas) para que el paseador lo escanee.",
    status_code=201,
    response_model=WalkResponse,
    responses=WALK_CREATE_RESPONSES,
)
def create_walk(
    request: Request,
    body: WalkCreateRequest,
    session: SessionContext = Depends(require_client),
    db: Session = Depends(get_db),
):
    return WalkService(db).create(request, session, body)


@router.post(
    "/scan",
    summary="Escanear QR de paseo",
    description="El paseador escanea el QR del cliente: el paseo pasa a activo y el código se desactiva.",
    status_code=200,
    response_model=WalkResponse,
    responses=WALK_SCAN_RESPONSES,
)
def scan_walk(
    request: Request,
    body: ScanCodeRequest,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkService(db).scan(request, session, body.code)


@router.get(
    "",
    summary="Mis paseos",
    description="Paseos del usuario como cliente o como paseador, del más reciente al más antiguo.",
    status_code=200,
    response_model=WalkListResponse,
    responses=WALK_GET_RESPONSES,
)
def list_walks(
    request: Request,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return WalkService(db).list_mine(request, session)


@router.get(
    "/{walk_id}",
    summary="Detalle de paseo",
    status_code=200,
    response_model=WalkResponse,
    responses=WALK_GET_RESPONSES,
)
def get_walk(
    walk_id: str,
    request: Request,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return WalkService(db).get(request, session, walk_id)


@router.patch(
    "/{walk_id}/status",
    summary="Cambiar estado del paseo",
    description="pending → cancelled, active → completed | cancelled. El paseo solo se inicia con /walks/scan; cualquier otra transición devuelve 409.",
    status_code=200,
    response_model=WalkResponse,
    responses=WALK_STATUS_RESPONSES,
)
def update_walk_status(
    walk_id: str,
    request: Request,
    body: WalkStatusUpdateRequest,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return WalkService(db).update_status(request, session, walk_id, body.status)


@router.post(
    "/{walk_id}/locations",
    summary="Registrar ubicación del paseo",
    description="Agrega un punto al recorrido de un paseo activo.",
    status_code=201,
    responses=WALK_STATUS_RESPONSES,
)
def add_walk_location(
    walk_id: str,
    request: Request,
    body: LocationPointRequest,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkService(db).add_location(request, session, walk_id, body)


@router.get(
    "/{walk_id}/locations",
    summary="Recorrido del paseo",
    description="Puntos del recorrido, del más reciente al más antiguo.",
    status_code=200,
    response_model=LocationListResponse,
    responses=WALK_GET_RESPONSES,
)
def list_walk_locations(
    walk_id: str,
    request: Request,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return WalkService(db).list_locations(request, session, walk_id)
