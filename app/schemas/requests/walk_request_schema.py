from datetime import date, time, datetime
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

from app.models.walk_request import RequestStatus


class WalkRequestCreate(BaseModel):
    """Booking sent by a client to a walker"""
    walker_id: str = Field(..., min_length=1, description="Paseador destino")
    requested_date: date = Field(..., description="Fecha (YYYY-MM-DD)")
    requested_time: time = Field(..., description="Hora (HH:MM)")
    duration_minutes: int = Field(60, description="Duración en minutos (30-480)")
    number_of_dogs: int = Field(1, description="Número de perros (1-10)")
    special_notes: Optional[str] = Field(None, description="Notas especiales (máx. 500)")

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        if v < 30 or v > 480:
            raise ValueError("La duración debe estar entre 30 y 480 minutos")
        return v

    @field_validator("number_of_dogs")
    @classmethod
    def validate_dogs(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("El número de perros debe estar entre 1 y 10")
        return v

    @field_validator("special_notes")
    @classmethod
    def validate_notes(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) > 500:
            raise ValueError("Las notas deben tener máximo 500 caracteres")
        return v or None


class WalkRequestRespond(BaseModel):
    accept: bool = Field(..., description="True para aceptar, False para rechazar")
    response_notes: Optional[str] = Field(None, description="Respuesta al cliente (máx. 300)")

    @field_validator("response_notes")
    @classmethod
    def validate_response_notes(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) > 300:
            raise ValueError("La respuesta debe tener máximo 300 caracteres")
        return v or None


class CounterpartInfo(BaseModel):
    id: Optional[str]
    name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class WalkRequestItem(BaseModel):
    id: str
    client_id: str
    walker_id: str
    requested_date: date
    requested_time: time
    duration_minutes: int
    number_of_dogs: int
    special_notes: Optional[str] = None
    status: RequestStatus
    response_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    counterpart: Optional[CounterpartInfo] = None


class WalkRequestResponse(BaseModel):
    success: bool = True
    status: int = 200
    request: WalkRequestItem
    timeStamp: str
    path: str


class WalkRequestBuckets(BaseModel):
    pending: List[WalkRequestItem]
    accepted: List[WalkRequestItem]
    history: List[WalkRequestItem]


class WalkRequestListResponse(BaseModel):
    success: bool = True
    status: int = 200
    requests: WalkRequestBuckets
    timeStamp: str
    path: str
