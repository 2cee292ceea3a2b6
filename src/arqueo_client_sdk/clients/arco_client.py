from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..exceptions import ApiError, SessionNotOpenError
from ..models_arco import ArcoBalance, ArcoStatusResponse, OpenArcoRequest, OpenArcoResponse
from .base import BaseClient, _expect_object

_SESSION_CLOSED_MARKERS = (
    "no hay un arco abierto",
    "arco ya está cerrado",
    "arco cerrado",
    "arco no está abierto",
)


@dataclass
class ArcoClient(BaseClient):
    """Cash session ("arco") lifecycle endpoints."""

    module: str = "arco"

    def get_status(self, shift: str) -> ArcoStatusResponse:
        data = self._request("GET", "/arco/estado", params={"turno": shift}, operation="status")
        return ArcoStatusResponse.model_validate(_expect_object(data, "arco status"))

    def get_current(self) -> ArcoStatusResponse:
        data = self._request("GET", "/api/arco-estado", operation="current")
        return ArcoStatusResponse.model_validate(_expect_object(data, "arco state"))

    def open(self, shift: str) -> None:
        request = OpenArcoRequest(turno=shift)
        try:
            self._request("POST", "/arco/abrir", json_body=request.model_dump(mode="json"), operation="open")
        except ApiError as exc:
            raise map_session_error(exc) from exc

    def open_advanced(self, shift: str) -> OpenArcoResponse:
        try:
            data = self._request("POST", "/arco/abrir-avanzado", form_body={"turno": shift}, operation="open_advanced")
        except ApiError as exc:
            raise map_session_error(exc) from exc
        return OpenArcoResponse.model_validate(_expect_object(data, "open arco"))

    def close(self, arco_id: int, withdrawal_amount: Decimal | None = None) -> None:
        """Close the session; a positive withdrawal travels in the same request."""
        form = {"arco_id": str(arco_id)}
        if withdrawal_amount is not None and withdrawal_amount > 0:
            form["retiro_amount"] = format(withdrawal_amount, "f")
        try:
            self._request("POST", "/arco/cerrar", form_body=form, operation="close")
        except ApiError as exc:
            raise map_session_error(exc) from exc

    def get_last_balance(self) -> ArcoBalance:
        data = self._request("GET", "/api/saldo-ultimo-arco", operation="last_balance")
        return ArcoBalance.model_validate(_expect_object(data, "arco balance"))


def map_session_error(exc: ApiError) -> ApiError:
    if isinstance(exc, SessionNotOpenError):
        return exc
    probe = exc.message.lower()
    if any(marker in probe for marker in _SESSION_CLOSED_MARKERS):
        return SessionNotOpenError(
            code="SESSION_NOT_OPEN",
            message=exc.message,
            details=exc.details,
            trace_id=exc.trace_id,
            status_code=exc.status_code,
            raw_payload=exc.raw_payload,
        )
    return exc
