from datetime import datetime
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings


def whatsapp_link(phone: str, message: str) -> str:
    return f"https://wa.me/{phone}?text={quote(message)}"


class SupportService:

    @staticmethod
    def whatsapp(request: Request):
        response = {
            "success": True,
            "status": 200,
            "url": whatsapp_link(settings.SUPPORT_WHATSAPP_PHONE, settings.SUPPORT_WHATSAPP_MESSAGE),
            "phone": settings.SUPPORT_WHATSAPP_PHONE,
            "timeStamp": datetime.utcnow().isoformat(),
            "path": request.url.path,
        }
        return JSONResponse(status_code=200, content=response)
