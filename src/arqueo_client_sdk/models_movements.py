from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# Backend column is decimal(15,2).
MAX_AMOUNT = Decimal("9999999999999.99")


class MovementType(str, Enum):
    INGRESO = "Ingreso"
    EGRESO = "Egreso"


class PendingMovement(BaseModel):
    """A movement entered by the operator but not yet persisted."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    movement_type: MovementType
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    shift: str = Field(min_length=1)
    concept_id: int = Field(gt=0)
    details: str = ""
    created_by: int = Field(gt=0)
    arco_id: int | None = None
    fecha: date | None = None

    @field_serializer("amount")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)


class MovementBatchRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    movements: list[PendingMovement]


class PersistedMovement(BaseModel):
    model_config = ConfigDict(extra="allow")

    movement_id: int
    movement_type: str
    amount: Decimal
    movement_date: datetime | str | None = None
    details: str | None = None
    concept_id: int | None = None


class MovementListResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    movements: list[PersistedMovement] = Field(default_factory=list)
