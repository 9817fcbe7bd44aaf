from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi

from app.core.error_handler import ApiError, api_error_handler, validation_error_handler
from app.core.logging_config import setup_logging
from app.domains.auth.router.auth_router import router as auth_router
from app.domains.users.router.users_router import router as user_router
from app.domains.walkers.router.walker_router import router as walker_router
from app.domains.affiliations.router.affiliation_router import router as affiliation_router
from app.domains.walks.router.walk_router import router as walk_router
from app.domains.tracking.router.tracking_router import router as tracking_router
from app.domains.requests.router.walk_request_router import router as walk_request_router
from app.domains.groups.router.group_router import router as group_router
from app.domains.support.router.support_router import router as support_router
from app.domains.realtime.router.realtime_router import router as realtime_router


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="Doggy Walking API 🐾",
        version="1.0.0",
        description="Backend API for the Doggy Walking mobile app",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=[
            {"name": "Auth", "description": "Registro y sesión (Firebase)"},
            {"name": "Users", "description": "Perfil y token de notificaciones"},
            {"name": "Walkers", "description": "Búsqueda de paseadores, perfil de servicio, métricas y plan"},
            {"name": "Affiliations", "description": "Afiliación cliente-paseador por código QR"},
            {"name": "Walks", "description": "Paseos, QR de paseo y recorrido"},
            {"name": "Tracking", "description": "Ubicación en vivo del paseador"},
            {"name": "Walk Requests", "description": "Solicitudes de paseo"},
            {"name": "Groups", "description": "Grupos de clientes del paseador"},
            {"name": "Support", "description": "Contacto con soporte"},
        ]
    )

    # error envelope for dependency errors and request validation
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # routers
    app.include_router(auth_router)
    app.include_router(user_router)

    # Walker side
    app.include_router(walker_router)
    app.include_router(group_router)
    app.include_router(tracking_router)

    # Pairing + walks
    app.include_router(affiliation_router)
    app.include_router(walk_router)
    app.include_router(walk_request_router)

    app.include_router(support_router)

    # Realtime
    app.include_router(realtime_router)

    @app.get("/")
    def root():
        return {"message": "🐾 Doggy Walking API is running successfully"}

    return app


app = create_app()


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title="Doggy Walking API 🐾",
        version="1.0.0",
        description="""
        ## Doggy Walking API

        Backend para conectar dueños de perros con paseadores.

        ### Funciones
        - 🔐 Autenticación con Firebase
        - 📷 Afiliación cliente-paseador por código QR
        - 📍 Ubicación del paseador en tiempo real (WebSocket)
        - 📅 Solicitudes de paseo y respuesta del paseador
        - 👥 Grupos de clientes y aviso selectivo al iniciar un paseo

        ### Autenticación
        Las APIs requieren el token de Firebase en el encabezado Authorization.
        Los WebSockets lo reciben como ?token=<token>.
        """,
        routes=app.routes,
    )

    # Swagger BearerAuth
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Token de Firebase en formato Bearer. Ej: Bearer <token>"
        }
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# local entry point
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
