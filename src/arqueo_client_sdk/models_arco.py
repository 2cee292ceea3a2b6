from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Shift = Literal["M", "T"]


class ArcoRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    turno: str | None = None


class ArcoStatusResponse(BaseModel):
    """Payload of ``/arco/estado`` and ``/api/arco-estado``."""

    model_config = ConfigDict(extra="allow")

    arco_abierto: bool = False
    arco: ArcoRef | None = None
    error: str | None = None

    @property
    def is_open(self) -> bool:
        return self.arco_abierto and self.arco is not None


class OpenArcoRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    turno: Shift


class OpenArcoResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | None = None


class ArcoBalance(BaseModel):
    """Running totals of the latest session.

    Fields are snake_case on the wire; missing values read as zero.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    saldo_total: Decimal = Field(default=Decimal("0"))
    total_ingresos: Decimal = Field(default=Decimal("0"))
    total_egresos: Decimal = Field(default=Decimal("0"))
    saldo_inicial: Decimal = Field(default=Decimal("0"))

    @field_validator("saldo_total", "total_ingresos", "total_egresos", "saldo_inicial", mode="before")
    @classmethod
    def _none_as_zero(cls, value: object) -> object:
        return Decimal("0") if value is None else value
