from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

from app.models.walk import WalkStatus


class WalkCreateRequest(BaseModel):
    dog_name: str = Field(..., max_length=100, description="Nombre del perro")
    notes: Optional[str] = Field(None, max_length=500, description="Notas para el paseador")

    @field_validator("dog_name")
    @classmethod
    def strip_dog_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("El nombre del perro es requerido")
        return v


class WalkStatusUpdateRequest(BaseModel):
    status: WalkStatus = Field(..., description="Nuevo estado del paseo")


class LocationPointRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timestamp: Optional[datetime] = Field(None, description="Hora de la lectura; por defecto, ahora")


class WalkInfo(BaseModel):
    id: str
    client_id: str
    walker_id: Optional[str] = None
    dog_name: str
    status: WalkStatus
    notes: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    created_at: Optional[datetime] = None


class WalkQrInfo(BaseModel):
    code: str
    expires_at: Optional[datetime] = None
    is_active: bool


class WalkResponse(BaseModel):
    success: bool = True
    status: int = 200
    walk: WalkInfo
    qr: Optional[WalkQrInfo] = None
    timeStamp: str
    path: str


class WalkListResponse(BaseModel):
    success: bool = True
    status: int = 200
    walks: List[WalkInfo]
    timeStamp: str
    path: str


class LocationPoint(BaseModel):
    id: str
    walk_id: str
    latitude: float
    longitude: float
    timestamp: datetime


class LocationListResponse(BaseModel):
    success: bool = True
    status: int = 200
    locations: List[LocationPoint]
    timeStamp: str
    path: str
