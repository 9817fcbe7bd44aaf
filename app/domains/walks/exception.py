from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response
from app.domains.auth.exception import SESSION_RESPONSES, WALKER_ONLY_RESPONSES, CLIENT_ONLY_RESPONSES
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class WalkError:
    status: int
    code: str
    reason: str


WALK_ERRORS: Dict[str, WalkError] = {
    # create
    "WALK_CREATE_500_1": WalkError(500, "WALK_CREATE_500_1", "Error al crear el paseo."),

    # scan
    "WALK_SCAN_404_1": WalkError(404, "WALK_SCAN_404_1", "Código QR inválido o expirado."),
    "WALK_SCAN_409_1": WalkError(409, "WALK_SCAN_409_1", "Este paseo ya fue iniciado."),
    "WALK_SCAN_500_1": WalkError(500, "WALK_SCAN_500_1", "Error al iniciar el paseo."),

    # read
    "WALK_GET_403_1": WalkError(403, "WALK_GET_403_1", "No tienes acceso a este paseo."),
    "WALK_GET_404_1": WalkError(404, "WALK_GET_404_1", "Paseo no encontrado."),
    "WALK_LIST_500_1": WalkError(500, "WALK_LIST_500_1", "Error al cargar los paseos."),

    # status
    "WALK_STATUS_403_1": WalkError(403, "WALK_STATUS_403_1", "Solo el paseador puede completar el paseo."),
    "WALK_STATUS_409_1": WalkError(409, "WALK_STATUS_409_1", "Transición de estado no permitida."),
    "WALK_STATUS_409_2": WalkError(409, "WALK_STATUS_409_2", "El paseo se inicia escaneando su código QR."),
    "WALK_STATUS_500_1": WalkError(500, "WALK_STATUS_500_1", "Error al actualizar el paseo."),

    # locations
    "WALK_LOCATION_403_1": WalkError(403, "WALK_LOCATION_403_1", "Solo el paseador del paseo puede registrar ubicaciones."),
    "WALK_LOCATION_409_1": WalkError(409, "WALK_LOCATION_409_1", "El paseo no está activo."),
    "WALK_LOCATION_500_1": WalkError(500, "WALK_LOCATION_500_1", "Error al guardar la ubicación."),
}


def walk_error(code: str, path: str):
    err = WALK_ERRORS.get(code)
    if not err:
        return error_response(500, "WALK_STATUS_500_1", "Error al actualizar el paseo.", path)
    return error_response(err.status, err.code, err.reason, path)


WALK_CREATE_RESPONSES = {
    **CLIENT_ONLY_RESPONSES,
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}

WALK_SCAN_RESPONSES = {
    **WALKER_ONLY_RESPONSES,
    409: {"model": ErrorResponse, "description": "Paseo ya iniciado"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}
WALK_SCAN_RESPONSES[404] = {"model": ErrorResponse, "description": "Código inválido o expirado"}

WALK_GET_RESPONSES = {
    **SESSION_RESPONSES,
    403: {"model": ErrorResponse, "description": "Sin acceso"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}
WALK_GET_RESPONSES[404] = {"model": ErrorResponse, "description": "Paseo no encontrado"}

WALK_STATUS_RESPONSES = {
    **WALK_GET_RESPONSES,
    409: {"model": ErrorResponse, "description": "Transición no permitida"},
}
