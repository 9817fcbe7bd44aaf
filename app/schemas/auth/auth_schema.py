from pydantic import BaseModel, Field
from typing import Optional

from app.models.user_role import AppRole


class SignupRequest(BaseModel):
    """Sign-up data completing the Firebase account"""
    name: str = Field(..., min_length=2, max_length=100, description="Nombre")
    phone: Optional[str] = Field(None, max_length=20, description="Teléfono")
    email: Optional[str] = Field(None, max_length=255, description="Email (si el token no lo incluye)")
    role: AppRole = Field(AppRole.USER, description="user (cliente) o admin (paseador)")


class ProfileInfo(BaseModel):
    id: str = Field(..., description="Firebase UID")
    name: str = Field(..., description="Nombre")
    email: str = Field(..., description="Email")
    phone: Optional[str] = Field(None, description="Teléfono")
    avatar_url: Optional[str] = Field(None, description="URL del avatar")
    completed_walks_count: int = Field(0, description="Paseos completados")


class SessionResponse(BaseModel):
    """Resolved session"""
    success: bool = Field(True)
    status: int = Field(200)
    user: ProfileInfo
    role: AppRole = Field(..., description="Rol del usuario")
    is_walker: bool = Field(..., description="True si el usuario es paseador")
    home_route: str = Field(..., description="Ruta de inicio según el rol")
    timeStamp: str
    path: str
