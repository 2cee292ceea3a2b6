from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ConceptMovementType = Literal["Ingreso", "Egreso", "Ambos", "RetiroCaja"]

CONCEPT_TYPE_LABELS: dict[str, str] = {
    "Ingreso": "Ingreso",
    "Egreso": "Egreso",
    "Ambos": "Ingreso/Egreso",
    "RetiroCaja": "Retiro de Caja",
}


class Role(BaseModel):
    model_config = ConfigDict(extra="allow")

    role_id: int
    role_name: str


class RoleWrite(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    role_name: str = Field(min_length=1)


class RoleRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    role_name: str | None = None


class AdminUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    user_id: int
    email: str | None = None
    full_name: str | None = None
    role_id: int | None = None
    role: RoleRef | None = None
    is_active: bool = True
    created_at: datetime | None = None


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    email: str = Field(min_length=3)
    full_name: str = Field(min_length=1)
    password: str = Field(min_length=8)
    role_id: int = Field(gt=0)


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    full_name: str = Field(min_length=1)
    role_id: int = Field(gt=0)
    is_active: bool = True


class PasswordReset(BaseModel):
    model_config = ConfigDict(extra="forbid")

    new_password: str = Field(min_length=8)


class CreatorRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    full_name: str | None = None


class Concept(BaseModel):
    model_config = ConfigDict(extra="allow")

    concept_id: int
    concept_name: str
    movement_type_association: str
    is_active: bool = True
    created_by: int | None = None
    creator: CreatorRef | None = None

    @property
    def type_label(self) -> str:
        return CONCEPT_TYPE_LABELS.get(self.movement_type_association, self.movement_type_association)


class ConceptWrite(BaseModel):
    """Create sends name and type; update also carries ``is_active``."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    concept_name: str = Field(min_length=1)
    movement_type_association: ConceptMovementType
    is_active: bool | None = None
