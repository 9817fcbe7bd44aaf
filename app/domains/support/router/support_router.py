from fastapi import APIRouter, Request

from app.domains.support.service.support_service import SupportService

router = APIRouter(prefix="/api/v1/support", tags=["Support"])


@router.get(
    "/whatsapp",
    summary="Contacto por WhatsApp",
    description="Enlace de WhatsApp del equipo de soporte con un mensaje predefinido.",
    status_code=200,
)
def whatsapp(request: Request):
    return SupportService.whatsapp(request)
