from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response
from app.domains.auth.exception import WALKER_ONLY_RESPONSES, CLIENT_ONLY_RESPONSES
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class RequestError:
    status: int
    code: str
    reason: str


REQUEST_ERRORS: Dict[str, RequestError] = {
    # create
    "REQ_CREATE_404_1": RequestError(404, "REQ_CREATE_404_1", "Paseador no encontrado."),
    "REQ_CREATE_500_1": RequestError(500, "REQ_CREATE_500_1", "Error al enviar solicitud."),

    # list
    "REQ_LIST_500_1": RequestError(500, "REQ_LIST_500_1", "Error al cargar solicitudes."),

    # state changes
    "REQ_404_1": RequestError(404, "REQ_404_1", "Solicitud no encontrada."),
    "REQ_409_1": RequestError(409, "REQ_409_1", "La solicitud ya no está pendiente."),
    "REQ_409_2": RequestError(409, "REQ_409_2", "Solo se pueden completar solicitudes aceptadas."),
    "REQ_CANCEL_500_1": RequestError(500, "REQ_CANCEL_500_1", "Error al cancelar."),
    "REQ_RESPOND_500_1": RequestError(500, "REQ_RESPOND_500_1", "Error al responder."),
    "REQ_COMPLETE_500_1": RequestError(500, "REQ_COMPLETE_500_1", "Error al completar la solicitud."),
}


def request_error(code: str, path: str):
    err = REQUEST_ERRORS.get(code)
    if not err:
        return error_response(500, "REQ_CREATE_500_1", "Error al enviar solicitud.", path)
    return error_response(err.status, err.code, err.reason, path)


REQ_CREATE_RESPONSES = {
    **CLIENT_ONLY_RESPONSES,
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}
REQ_CREATE_RESPONSES[404] = {"model": ErrorResponse, "description": "Paseador no encontrado"}

REQ_CLIENT_LIST_RESPONSES = {
    **CLIENT_ONLY_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}

REQ_WALKER_LIST_RESPONSES = {
    **WALKER_ONLY_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}

REQ_CLIENT_ACTION_RESPONSES = {
    **REQ_CLIENT_LIST_RESPONSES,
    409: {"model": ErrorResponse, "description": "Estado no válido"},
}
REQ_CLIENT_ACTION_RESPONSES[404] = {"model": ErrorResponse, "description": "Solicitud no encontrada"}

REQ_WALKER_ACTION_RESPONSES = {
    **REQ_WALKER_LIST_RESPONSES,
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    409: {"model": ErrorResponse, "description": "Estado no válido"},
}
REQ_WALKER_ACTION_RESPONSES[404] = {"model": ErrorResponse, "description": "Solicitud no encontrada"}
