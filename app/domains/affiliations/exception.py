from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response
from app.domains.auth.exception import SESSION_RESPONSES, WALKER_ONLY_RESPONSES, CLIENT_ONLY_RESPONSES
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class AffiliationError:
    status: int
    code: str
    reason: str


AFFILIATION_ERRORS: Dict[str, AffiliationError] = {
    # walker QR
    "AFF_QR_500_1": AffiliationError(500, "AFF_QR_500_1", "Error al generar el código QR."),

    # scan
    "AFF_SCAN_404_1": AffiliationError(404, "AFF_SCAN_404_1", "Código QR inválido o expirado."),
    "AFF_SCAN_500_1": AffiliationError(500, "AFF_SCAN_500_1", "Error al procesar la afiliación."),

    # my walkers
    "AFF_LIST_500_1": AffiliationError(500, "AFF_LIST_500_1", "Error al cargar tus paseadores."),

    # remove
    "AFF_DELETE_404_1": AffiliationError(404, "AFF_DELETE_404_1", "No estás afiliado a este paseador."),
    "AFF_DELETE_500_1": AffiliationError(500, "AFF_DELETE_500_1", "Error al eliminar la afiliación."),
}


def affiliation_error(code: str, path: str):
    err = AFFILIATION_ERRORS.get(code)
    if not err:
        return error_response(500, "AFF_SCAN_500_1", "Error al procesar la afiliación.", path)
    return error_response(err.status, err.code, err.reason, path)


AFF_QR_RESPONSES = {
    **WALKER_ONLY_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}

AFF_SCAN_RESPONSES = {
    **CLIENT_ONLY_RESPONSES,
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}
AFF_SCAN_RESPONSES[404] = {"model": ErrorResponse, "description": "Código inválido o expirado"}

AFF_LIST_RESPONSES = {
    **SESSION_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}

AFF_DELETE_RESPONSES = {
    **CLIENT_ONLY_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}
AFF_DELETE_RESPONSES[404] = {"model": ErrorResponse, "description": "Afiliación no encontrada"}
