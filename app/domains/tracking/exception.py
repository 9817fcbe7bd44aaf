from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response
from app.domains.auth.exception import SESSION_RESPONSES, WALKER_ONLY_RESPONSES
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class TrackingError:
    status: int
    code: str
    reason: str


TRACKING_ERRORS: Dict[str, TrackingError] = {
    # location upsert / stop
    "TRACK_LOCATION_500_1": TrackingError(500, "TRACK_LOCATION_500_1", "Error al actualizar la ubicación."),
    "TRACK_STOP_500_1": TrackingError(500, "TRACK_STOP_500_1", "Error al detener el seguimiento."),

    # client read
    "TRACK_READ_403_1": TrackingError(403, "TRACK_READ_403_1", "No estás afiliado a este paseador."),

    # selective start
    "TRACK_START_400_1": TrackingError(400, "TRACK_START_400_1", "Selecciona al menos un cliente."),
    "TRACK_START_400_2": TrackingError(400, "TRACK_START_400_2", "Solo puedes notificar a clientes afiliados."),
    "TRACK_START_404_1": TrackingError(404, "TRACK_START_404_1", "Grupo no encontrado."),
    "TRACK_START_500_1": TrackingError(500, "TRACK_START_500_1", "Error al iniciar el paseo."),
}


def tracking_error(code: str, path: str):
    err = TRACKING_ERRORS.get(code)
    if not err:
        return error_response(500, "TRACK_LOCATION_500_1", "Error al actualizar la ubicación.", path)
    return error_response(err.status, err.code, err.reason, path)


TRACK_WRITE_RESPONSES = {
    **WALKER_ONLY_RESPONSES,
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}

TRACK_START_RESPONSES = {
    **TRACK_WRITE_RESPONSES,
}
TRACK_START_RESPONSES[404] = {"model": ErrorResponse, "description": "Grupo no encontrado"}

TRACK_READ_RESPONSES = {
    **SESSION_RESPONSES,
    403: {"model": ErrorResponse, "description": "Sin afiliación"},
}
