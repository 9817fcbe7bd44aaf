from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, require_walker, require_client
from app.db import get_db
from app.domains.affiliations.service.affiliation_service import AffiliationService
from app.domains.affiliations.exception import (
    AFF_QR_RESPONSES,
    AFF_SCAN_RESPONSES,
    AFF_LIST_RESPONSES,
    AFF_DELETE_RESPONSES,
)
from app.schemas.affiliations.affiliation_schema import (
    ScanCodeRequest,
    QrCodeResponse,
    ScanResult,
    MyWalkersResponse,
)

router = APIRouter(prefix="/api/v1/affiliations", tags=["Affiliations"])


@router.get(
    "/qr",
    summary="Mi código QR de paseador",
    description="Devuelve el código reutilizable del paseador; lo genera si aún no existe.",
    status_code=200,
    response_model=QrCodeResponse,
    responses=AFF_QR_RESPONSES,
)
def get_walker_qr(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return AffiliationService(db).get_walker_qr(request, session)


@router.post(
    "/qr",
    summary="Regenerar código QR",
    description="Reemplaza el código reutilizable del paseador. El código anterior deja de funcionar.",
    status_code=200,
    response_model=QrCodeResponse,
    responses=AFF_QR_RESPONSES,
)
def regenerate_walker_qr(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return AffiliationService(db).regenerate_walker_qr(request, session)


@router.post(
    "/codes",
    summary="Crear código de un solo uso",
    description="Crea un código de afiliación que caduca a las 24 horas y se desactiva al usarse.",
    status_code=201,
    response_model=QrCodeResponse,
    responses=AFF_QR_RESPONSES,
)
def create_affiliation_code(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return AffiliationService(db).create_affiliation_code(request, session)


@router.post(
    "/scan",
    summary="Escanear código de paseador",
    description="Afilia al cliente con el paseador dueño del código.",
    status_code=201,
    response_model=ScanResult,
    responses=AFF_SCAN_RESPONSES,
)
def scan(
    request: Request,
    body: ScanCodeRequest,
    session: SessionContext = Depends(require_client),
    db: Session = Depends(get_db),
):
    """
    - código de un solo uso: se desactiva en la misma transacción que crea la afiliación
    - si la afiliación ya existe no se inserta nada (already_affiliated=true)
    """
    return AffiliationService(db).scan(request, session, body.code)


@router.get(
    "/walkers",
    summary="Mis paseadores",
    description="Paseadores afiliados, primero los que están compartiendo ubicación.",
    status_code=200,
    response_model=MyWalkersResponse,
    responses=AFF_LIST_RESPONSES,
)
def list_my_walkers(
    request: Request,
    session: SessionContext = Depends(require_client),
    db: Session = Depends(get_db),
):
    return AffiliationService(db).list_my_walkers(request, session)


@router.delete(
    "/{walker_id}",
    summary="Dejar de seguir a un paseador",
    description="Desactiva la afiliación (borrado lógico).",
    status_code=200,
    responses=AFF_DELETE_RESPONSES,
)
def remove_affiliation(
    walker_id: str,
    request: Request,
    session: SessionContext = Depends(require_client),
    db: Session = Depends(get_db),
):
    return AffiliationService(db).remove(request, session, walker_id)
