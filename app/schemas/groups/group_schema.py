import re
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
DEFAULT_GROUP_COLOR = "#3B82F6"


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("El nombre es requerido")
    if len(v) > 50:
        raise ValueError("El nombre debe tener máximo 50 caracteres")
    return v


def _clean_color(v: str) -> str:
    if not HEX_COLOR.match(v):
        raise ValueError("Color inválido")
    return v


class GroupCreateRequest(BaseModel):
    name: str = Field(..., description="Nombre del grupo (1-50)")
    description: Optional[str] = Field(None, description="Descripción (máx. 200)")
    color: str = Field(DEFAULT_GROUP_COLOR, description="Color #RRGGBB")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) > 200:
            raise ValueError("La descripción debe tener máximo 200 caracteres")
        return v or None

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _clean_color(v)


class GroupUpdateRequest(GroupCreateRequest):
    name: Optional[str] = Field(None, description="Nombre del grupo (1-50)")
    color: Optional[str] = Field(None, description="Color #RRGGBB")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("El nombre es requerido")
        return _clean_name(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Color inválido")
        return _clean_color(v)


class GroupMembersRequest(BaseModel):
    client_ids: List[str] = Field(default_factory=list, description="Conjunto completo de miembros")


class GroupInfo(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: str
    member_count: int = 0
    created_at: Optional[datetime] = None


class GroupListResponse(BaseModel):
    success: bool = True
    status: int = 200
    groups: List[GroupInfo]
    timeStamp: str
    path: str


class GroupResponse(BaseModel):
    success: bool = True
    status: int = 200
    group: GroupInfo
    timeStamp: str
    path: str


class GroupMembersResponse(BaseModel):
    success: bool = True
    status: int = 200
    group_id: str
    client_ids: List[str]
    timeStamp: str
    path: str
