from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class UserError:
    status: int
    code: str
    reason: str


USER_ERRORS: Dict[str, UserError] = {
    "USER_EDIT_400_1": UserError(400, "USER_EDIT_400_1", "No hay campos para actualizar."),
    "USER_EDIT_500_1": UserError(500, "USER_EDIT_500_1", "Error al guardar el perfil."),
    "FCM_500_1": UserError(500, "FCM_500_1", "Error al guardar el token de notificaciones."),
}


def user_error(code: str, path: str):
    err = USER_ERRORS.get(code)
    if not err:
        return error_response(500, "USER_EDIT_500_1", "Error al guardar el perfil.", path)
    return error_response(err.status, err.code, err.reason, path)


USER_GET_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Autenticación fallida"},
    404: {"model": ErrorResponse, "description": "Perfil no encontrado"},
}

USER_EDIT_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    401: {"model": ErrorResponse, "description": "Autenticación fallida"},
    404: {"model": ErrorResponse, "description": "Perfil no encontrado"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}

FCM_UPDATE_RESPONSES = USER_EDIT_RESPONSES
