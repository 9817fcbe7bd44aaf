from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response
from app.domains.auth.exception import SESSION_RESPONSES, WALKER_ONLY_RESPONSES
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class WalkerError:
    status: int
    code: str
    reason: str


WALKER_ERRORS: Dict[str, WalkerError] = {
    "WALKER_PROFILE_500_1": WalkerError(500, "WALKER_PROFILE_500_1", "Error al guardar."),
    "WALKER_LIST_500_1": WalkerError(500, "WALKER_LIST_500_1", "Error al cargar paseadores."),
    "WALKER_CLIENTS_500_1": WalkerError(500, "WALKER_CLIENTS_500_1", "Error al cargar clientes."),
    "WALKER_METRICS_500_1": WalkerError(500, "WALKER_METRICS_500_1", "Error al cargar las métricas."),
    "WALKER_PLAN_500_1": WalkerError(500, "WALKER_PLAN_500_1", "Error al cargar el plan."),
}


def walker_error(code: str, path: str):
    err = WALKER_ERRORS.get(code)
    if not err:
        return error_response(500, "WALKER_LIST_500_1", "Error al cargar paseadores.", path)
    return error_response(err.status, err.code, err.reason, path)


WALKER_LIST_RESPONSES = {
    **SESSION_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}

WALKER_ME_RESPONSES = {
    **WALKER_ONLY_RESPONSES,
    500: {"model": ErrorResponse, "description": "Error interno"},
}

WALKER_PROFILE_RESPONSES = {
    **WALKER_ME_RESPONSES,
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
}
