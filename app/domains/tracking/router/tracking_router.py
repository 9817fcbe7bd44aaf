from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, get_session, require_walker
from app.db import get_db
from app.domains.tracking.service.tracking_service import TrackingService
from app.domains.tracking.exception import (
    TRACK_WRITE_RESPONSES,
    TRACK_START_RESPONSES,
    TRACK_READ_RESPONSES,
)
from app.schemas.tracking.tracking_schema import (
    LocationUpdateRequest,
    TrackingStatusResponse,
    WalkStartRequest,
    WalkStartResponse,
)

router = APIRouter(prefix="/api/v1/tracking", tags=["Tracking"])


@router.post(
    "/location",
    summary="Publicar mi ubicación",
    description="Guarda la posición actual del paseador (una sola fila por paseador) y la marca como activa.",
    status_code=200,
    response_model=TrackingStatusResponse,
    responses=TRACK_WRITE_RESPONSES,
)
def update_location(
    request: Request,
    body: LocationUpdateRequest,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return TrackingService(db).update_location(request, session, body.latitude, body.longitude)


@router.post(
    "/stop",
    summary="Detener seguimiento",
    description="Marca como inactivas todas las ubicaciones del paseador.",
    status_code=200,
    response_model=TrackingStatusResponse,
    responses=TRACK_WRITE_RESPONSES,
)
def stop_tracking(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return TrackingService(db).stop(request, session)


@router.get(
    "/status",
    summary="Estado del seguimiento",
    description="Ubicación activa del paseador, para reanudar el seguimiento al abrir la app.",
    status_code=200,
    response_model=TrackingStatusResponse,
    responses=TRACK_WRITE_RESPONSES,
)
def tracking_status(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return TrackingService(db).status(request, session)


@router.get(
    "/walkers/{walker_id}/location",
    summary="Ubicación de mi paseador",
    description="Última ubicación activa de un paseador afiliado. active=false si no está compartiendo.",
    status_code=200,
    response_model=TrackingStatusResponse,
    responses=TRACK_READ_RESPONSES,
)
def walker_location(
    walker_id: str,
    request: Request,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return TrackingService(db).walker_location(request, session, walker_id)


@router.post(
    "/start",
    summary="Iniciar paseo y avisar",
    description="Resuelve los destinatarios (todos, un grupo o selección manual), guarda la primera ubicación y notifica.",
    status_code=200,
    response_model=WalkStartResponse,
    responses=TRACK_START_RESPONSES,
)
def start_walk(
    request: Request,
    body: WalkStartRequest,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return TrackingService(db).start_walk(request, session, body)
