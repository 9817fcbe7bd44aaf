from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator


class WalkerProfileUpdate(BaseModel):
    """Walker service listing"""
    is_available: bool = Field(True, description="Visible en la búsqueda de paseadores")
    service_radius: int = Field(10, description="Radio de servicio en km (1-50)")
    hourly_rate: Optional[float] = Field(None, description="Tarifa por hora")
    specialties: List[str] = Field(default_factory=list, description="Especialidades")
    bio: Optional[str] = Field(None, description="Descripción (máx. 500)")
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)

    @field_validator("service_radius")
    @classmethod
    def validate_radius(cls, v: int) -> int:
        if v < 1 or v > 50:
            raise ValueError("El radio de servicio debe estar entre 1 y 50 km")
        return v

    @field_validator("hourly_rate")
    @classmethod
    def validate_rate(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("La tarifa no puede ser negativa")
        return v

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) > 500:
            raise ValueError("La descripción debe tener máximo 500 caracteres")
        return v

    @field_validator("specialties")
    @classmethod
    def clean_specialties(cls, v: List[str]) -> List[str]:
        # trimmed, no blanks, first occurrence wins
        cleaned = [s.strip() for s in v if s and s.strip()]
        return list(dict.fromkeys(cleaned))


class WalkerProfileInfo(BaseModel):
    user_id: str
    is_available: bool
    service_radius: int
    hourly_rate: Optional[float] = None
    specialties: List[str] = []
    bio: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


class WalkerProfileResponse(BaseModel):
    success: bool = True
    status: int = 200
    profile: WalkerProfileInfo
    timeStamp: str
    path: str


class WalkerListing(WalkerProfileInfo):
    name: str
    avatar_url: Optional[str] = None
    completed_walks_count: int = 0


class WalkerListResponse(BaseModel):
    success: bool = True
    status: int = 200
    walkers: List[WalkerListing]
    timeStamp: str
    path: str


class ClientCard(BaseModel):
    id: Optional[str]
    name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class WalkerClientItem(BaseModel):
    client: ClientCard
    affiliated_at: Optional[datetime] = None


class WalkerClientsResponse(BaseModel):
    success: bool = True
    status: int = 200
    clients: List[WalkerClientItem]
    timeStamp: str
    path: str


class WalkerMetrics(BaseModel):
    active_clients: int
    active_walks: int
    walks_today: int
    total_walks: int
    is_walk_active: bool


class WalkerMetricsResponse(BaseModel):
    success: bool = True
    status: int = 200
    metrics: WalkerMetrics
    timeStamp: str
    path: str


class PlanInfo(BaseModel):
    id: str
    name: str
    display_name: str
    max_clients: int
    features: List[str] = []


class WalkerPlanResponse(BaseModel):
    success: bool = True
    status: int = 200
    plan: PlanInfo
    client_count: int
    client_limit: int
    is_at_limit: bool
    is_near_limit: bool
    remaining_slots: int
    timeStamp: str
    path: str
