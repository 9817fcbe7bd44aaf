from dataclasses import dataclass
from typing import Dict

from app.core.error_handler import error_response, ApiError
from app.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class AuthError:
    status: int
    code: str
    reason: str

    def to_dict(self, path: str) -> Dict:
        """dict used for Swagger examples."""
        return {
            "success": False,
            "status": self.status,
            "code": self.code,
            "reason": self.reason,
            "timeStamp": "...",
            "path": path,
        }


AUTH_ERRORS: Dict[str, AuthError] = {
    # session (raised by app.core.auth)
    "AUTH_401_1": AuthError(401, "AUTH_401_1", "Se requiere el encabezado Authorization."),
    "AUTH_401_2": AuthError(401, "AUTH_401_2", "El encabezado Authorization debe tener el formato 'Bearer <token>'."),
    "AUTH_401_3": AuthError(401, "AUTH_401_3", "Token inválido o expirado."),
    "AUTH_403_1": AuthError(403, "AUTH_403_1", "Solo los paseadores pueden realizar esta acción."),
    "AUTH_403_2": AuthError(403, "AUTH_403_2", "Solo los clientes pueden realizar esta acción."),
    "AUTH_404_1": AuthError(404, "AUTH_404_1", "No se encontró el perfil del usuario."),

    # signup
    "AUTH_SIGNUP_400_1": AuthError(400, "AUTH_SIGNUP_400_1", "El email es requerido."),
    "AUTH_SIGNUP_409_1": AuthError(409, "AUTH_SIGNUP_409_1", "Este email ya está registrado. Intenta iniciar sesión."),
    "AUTH_SIGNUP_500_1": AuthError(500, "AUTH_SIGNUP_500_1", "Error en la autenticación."),
}


def auth_error(code: str, path: str):
    """Standard error response for a known Auth error code."""
    err = AUTH_ERRORS.get(code)
    if not err:
        return error_response(500, "AUTH_SIGNUP_500_1", "Error en la autenticación.", path)
    return error_response(err.status, err.code, err.reason, path)


def auth_exception(code: str) -> ApiError:
    """Same table, for dependencies that must raise instead of return."""
    err = AUTH_ERRORS[code]
    return ApiError(err.status, err.code, err.reason)


SESSION_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Autenticación fallida"},
    404: {"model": ErrorResponse, "description": "Perfil no encontrado"},
}

WALKER_ONLY_RESPONSES = {
    **SESSION_RESPONSES,
    403: {"model": ErrorResponse, "description": "Solo paseadores"},
}

CLIENT_ONLY_RESPONSES = {
    **SESSION_RESPONSES,
    403: {"model": ErrorResponse, "description": "Solo clientes"},
}

AUTH_SIGNUP_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Solicitud inválida"},
    401: {"model": ErrorResponse, "description": "Autenticación fallida"},
    409: {"model": ErrorResponse, "description": "Cuenta ya registrada"},
    500: {"model": ErrorResponse, "description": "Error interno"},
}

AUTH_ME_RESPONSES = SESSION_RESPONSES
