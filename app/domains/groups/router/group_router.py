from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from app.core.auth import SessionContext, require_walker
from app.db import get_db
from app.domains.groups.service.group_service import GroupService
from app.domains.groups.exception import GROUP_LIST_RESPONSES, GROUP_SAVE_RESPONSES
from app.schemas.groups.group_schema import (
    GroupCreateRequest,
    GroupUpdateRequest,
    GroupMembersRequest,
    GroupListResponse,
    GroupResponse,
    GroupMembersResponse,
)

router = APIRouter(prefix="/api/v1/groups", tags=["Groups"])


@router.get(
    "",
    summary="Mis grupos",
    description="Grupos activos del paseador con su número de miembros.",
    status_code=200,
    response_model=GroupListResponse,
    responses=GROUP_LIST_RESPONSES,
)
def list_groups(
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return GroupService(db).list_groups(request, session)


@router.post(
    "",
    summary="Crear grupo",
    status_code=201,
    response_model=GroupResponse,
    responses=GROUP_SAVE_RESPONSES,
)
def create_group(
    request: Request,
    body: GroupCreateRequest,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return GroupService(db).create_group(request, session, body)


@router.patch(
    "/{group_id}",
    summary="Editar grupo",
    status_code=200,
    response_model=GroupResponse,
    responses=GROUP_SAVE_RESPONSES,
)
def update_group(
    group_id: str,
    request: Request,
    body: GroupUpdateRequest,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return GroupService(db).update_group(request, session, group_id, body)


@router.delete(
    "/{group_id}",
    summary="Eliminar grupo",
    description="Borrado lógico: el grupo deja de aparecer pero sus filas se conservan.",
    status_code=200,
    responses=GROUP_SAVE_RESPONSES,
)
def delete_group(
    group_id: str,
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return GroupService(db).delete_group(request, session, group_id)


@router.get(
    "/{group_id}/members",
    summary="Miembros del grupo",
    status_code=200,
    response_model=GroupMembersResponse,
    responses=GROUP_SAVE_RESPONSES,
)
def get_members(
    group_id: str,
    request: Request,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return GroupService(db).get_members(request, session, group_id)


@router.put(
    "/{group_id}/members",
    summary="Guardar miembros",
    description="Reemplaza el conjunto de miembros: quita los sobrantes y agrega los faltantes en una sola transacción.",
    status_code=200,
    response_model=GroupMembersResponse,
    responses=GROUP_SAVE_RESPONSES,
)
def save_members(
    group_id: str,
    request: Request,
    body: GroupMembersRequest,
    session: SessionContext = Depends(require_walker),
    db: Session = Depends(get_db),
):
    return GroupService(db).save_members(request, session, group_id, body.client_ids)
