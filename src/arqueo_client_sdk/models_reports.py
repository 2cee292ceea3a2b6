from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReportFilter(BaseModel):
    """Filters for ``/api/graficos``; every criterion is optional and ANDed."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    date_from: date | None = Field(default=None, alias="fecha_Desde")
    date_to: date | None = Field(default=None, alias="fecha_hasta")
    movement_type: str | None = Field(default=None, alias="tipo")
    shift: str | None = Field(default=None, alias="turno")
    arco_id: int | None = None
    min_amount: Decimal | None = Field(default=None, alias="monto_Minimo")
    max_amount: Decimal | None = Field(default=None, alias="monto_Maximo")
    negative_balance_only: bool = Field(default=False, alias="balance_negativo")

    @model_validator(mode="after")
    def _check_ranges(self) -> "ReportFilter":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("fecha_Desde must be on or before fecha_hasta")
        if self.min_amount is not None and self.max_amount is not None and self.min_amount > self.max_amount:
            raise ValueError("monto_Minimo must be <= monto_Maximo")
        if self.movement_type and self.movement_type.strip().lower() not in {"ingreso", "egreso"}:
            raise ValueError("tipo must be Ingreso or Egreso")
        return self

    def to_params(self) -> dict[str, str]:
        """Query string for the backend; absent criteria are not sent."""
        params: dict[str, str] = {}
        if self.date_from:
            params["fecha_Desde"] = self.date_from.isoformat()
        if self.date_to:
            params["fecha_hasta"] = self.date_to.isoformat()
        if self.movement_type:
            params["tipo"] = self.movement_type.strip().lower()
        if self.shift:
            params["turno"] = self.shift
        if self.arco_id is not None:
            params["arco_id"] = str(self.arco_id)
        if self.min_amount is not None:
            params["monto_Minimo"] = str(self.min_amount)
        if self.max_amount is not None:
            params["monto_Maximo"] = str(self.max_amount)
        if self.negative_balance_only:
            params["balance_negativo"] = "1"
        return params


class ReportRow(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    fecha: str = Field(alias="Fecha")
    tipo: str = Field(alias="Tipo")
    monto: Decimal = Field(alias="Monto")
    turno: str | None = Field(default=None, alias="Turno")
    concepto: int | str | None = Field(default=None, alias="Concepto")
    detalles: str | None = Field(default=None, alias="Detalles")
    arco_id: int | None = Field(default=None, alias="ArcoID")
    balance: Decimal | None = Field(default=None, alias="Balance")
