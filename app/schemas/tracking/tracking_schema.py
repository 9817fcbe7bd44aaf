from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, model_validator


class LocationUpdateRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitud")
    longitude: float = Field(..., ge=-180, le=180, description="Longitud")


class WalkerLocation(BaseModel):
    admin_id: str
    latitude: float
    longitude: float
    is_active: bool
    timestamp: Optional[datetime] = None


class TrackingStatusResponse(BaseModel):
    success: bool = True
    status: int = 200
    active: bool = Field(..., description="True si hay una ubicación activa")
    location: Optional[WalkerLocation] = None
    timeStamp: str
    path: str


class BroadcastMode(str, Enum):
    ALL = "all"
    GROUP = "group"
    MANUAL = "manual"


class WalkStartRequest(BaseModel):
    """Who gets notified when the walker starts a walk."""
    mode: BroadcastMode = Field(BroadcastMode.ALL, description="all, group o manual")
    group_id: Optional[str] = Field(None, description="Requerido cuando mode=group")
    client_ids: List[str] = Field(default_factory=list, description="Requerido cuando mode=manual")
    notes: Optional[str] = Field(None, max_length=500, description="Mensaje para los clientes")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def check_mode(self):
        if self.mode == BroadcastMode.GROUP and not self.group_id:
            raise ValueError("Selecciona un grupo")
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Latitud y longitud deben enviarse juntas")
        return self


class WalkStartResponse(BaseModel):
    success: bool = True
    status: int = 200
    mode: BroadcastMode
    target_client_ids: List[str]
    notified: int
    location: Optional[WalkerLocation] = None
    timeStamp: str
    path: str
