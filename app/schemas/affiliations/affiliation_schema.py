from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator


class ScanCodeRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64, description="Código leído del QR")

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("El código es requerido")
        return v


class QrCodeInfo(BaseModel):
    code: str
    code_type: str = Field(..., description="affiliation (paseador) o walk")
    expires_at: Optional[datetime] = Field(None, description="None para el código reutilizable del paseador")


class QrCodeResponse(BaseModel):
    success: bool = True
    status: int = 200
    qr: QrCodeInfo
    timeStamp: str
    path: str


class ScanResult(BaseModel):
    success: bool = True
    status: int
    walker_id: str
    already_affiliated: bool = Field(..., description="True si ya existía la afiliación (no se insertó nada)")
    message: str
    timeStamp: str
    path: str


class WalkerCard(BaseModel):
    id: Optional[str]
    name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class MyWalkerItem(BaseModel):
    walker: WalkerCard
    affiliated_at: Optional[datetime]
    is_active: bool
    has_active_location: bool


class MyWalkersResponse(BaseModel):
    success: bool = True
    status: int = 200
    walkers: List[MyWalkerItem]
    timeStamp: str
    path: str
