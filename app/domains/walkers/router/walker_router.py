from typing import Optional

from fastapi import APIRouter, Request, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, get_session, require_walker
from app.db import get_db
from app.domains.walkers.service.walker_service import WalkerService
from app.domains.walkers.exception import (
    WALKER_LIST_RESPONSES,
    WALKER_ME_RESPONSES,
    WALKER_PROFILE_RESPONSES,
)
from app.schemas.walkers.walker_schema import (
    WalkerProfileUpdate,
    WalkerProfileResponse,
    WalkerListResponse,
    WalkerClientsResponse,
    WalkerMetricsResponse,
    WalkerPlanResponse,
)

router = APIRouter(prefix="/api/v1/walkers", tags=["Walkers"])


@router.get(
    "",
    summary="Buscar paseadores",
    description="Paseadores disponibles. q filtra por nombre, ciudad, estado o especialidad (sin distinguir mayúsculas).",
    status_code=200,
    response_model=WalkerListResponse,
    responses=WALKER_LIST_RESPONSES,
)
def search_walkers(
    request: Request,
    q: Optional[str] = Query(None, max_length=100, description="Texto de búsqueda"),
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return WalkerService(db).search(request, q)


@router.get(
    "/me/profile",
    summary="Mi perfil de paseador",
    status_code=200,
    response_model=WalkerProfileResponse,
    responses=WALKER_ME_RESPONSES,
)
def get_my_walker_profile(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkerService(db).get_my_profile(request, session)


@router.put(
    "/me/profile",
    summary="Guardar perfil de paseador",
    description="Crea o actualiza la ficha de servicio (radio 1-50 km, tarifa, especialidades, descripción).",
    status_code=200,
    response_model=WalkerProfileResponse,
    responses=WALKER_PROFILE_RESPONSES,
)
def save_my_walker_profile(
    request: Request,
    body: WalkerProfileUpdate,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkerService(db).save_my_profile(request, session, body)


@router.get(
    "/me/clients",
    summary="Mis clientes",
    description="Clientes afiliados activos, del más reciente al más antiguo.",
    status_code=200,
    response_model=WalkerClientsResponse,
    responses=WALKER_ME_RESPONSES,
)
def list_my_clients(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkerService(db).list_clients(request, session)


@router.get(
    "/me/metrics",
    summary="Métricas del paseador",
    status_code=200,
    response_model=WalkerMetricsResponse,
    responses=WALKER_ME_RESPONSES,
)
def my_metrics(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkerService(db).metrics(request, session)


@router.get(
    "/me/plan",
    summary="Mi plan",
    description="Plan de suscripción activo (o el gratuito) y uso de cupos de clientes.",
    status_code=200,
    response_model=WalkerPlanResponse,
    responses=WALKER_ME_RESPONSES,
)
def my_plan(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return WalkerService(db).plan(request, session)
