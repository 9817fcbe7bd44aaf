from pydantic import BaseModel, Field
from typing import Optional


class UserUpdateRequest(BaseModel):
    """Profile update"""
    name: Optional[str] = Field(None, min_length=2, max_length=100, description="Nombre")
    phone: Optional[str] = Field(None, max_length=20, description="Teléfono")
    avatar_url: Optional[str] = Field(None, max_length=500, description="URL del avatar")


class FcmTokenUpdateRequest(BaseModel):
    fcm_token: str = Field(..., min_length=1, max_length=255, description="Token FCM del dispositivo")


class FcmTokenUpdateResponse(BaseModel):
    success: bool
    status: int
    message: str
