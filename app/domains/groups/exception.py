from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response
from app.domains.auth.exception import WALKER_ONLY_RESPONSES
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class GroupError:
    status: int
    code: str
    reason: str


GROUP_ERRORS: Dict[str, GroupError] = {
    "GROUP_404_1": GroupError(404, "GROUP_404_1", "Grupo no encontrado."),
    "GROUP_SAVE_500_1": GroupError(500, "GROUP_SAVE_500_1", "Error al guardar el grupo."),
    "GROUP_DELETE_500_1": GroupError(500, "GROUP_DELETE_500_1", "Error al eliminar el grupo."),
    "GROUP_LIST_500_1": GroupError(500, "GROUP_LIST_500_1", "Error al cargar los grupos."),

    # members
    "GROUP_MEMBERS_400_1": GroupError(400, "GROUP_MEMBERS_400_1", "Solo puedes agregar clientes afiliados."),
    "GROUP_MEMBERS_500_1": GroupError(500, "GROUP_MEMBERS_500_1", "Error al actualizar los miembros."),
}


def group_error(code: str, path: str):
    err = GROUP_ERRORS.get(code)
    if not err:
        return error_response(500, "GROUP_SAVE_500_1", "Error al guardar el grupo.", path)
    return error_response(err.status, err.code, err.reason, path)


GROUP_LIST_RESPONSES = {
    **WALKER_ONLY_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}

GROUP_SAVE_RESPONSES = {
    **WALKER_ONLY_RESPONSES,
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}
GROUP_SAVE_RESPONSES[404] = {"model": ErrorResponse, "description": "Grupo no encontrado"}
