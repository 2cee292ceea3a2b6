from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..exceptions import ApiError
from ..models_movements import MovementBatchRequest, MovementListResponse, PendingMovement
from .arco_client import map_session_error
from .base import BaseClient, _coerce_model, _expect_object


@dataclass
class MovementsClient(BaseClient):
    module: str = "movements"

    def list_for_arco(self, arco_id: int) -> MovementListResponse:
        data = self._request("GET", f"/api/movimientos/arco/{arco_id}", operation="list")
        return MovementListResponse.model_validate(_expect_object(data, "movement list"))

    def delete(self, movement_id: int) -> None:
        self._request("DELETE", f"/api/movimientos/{movement_id}", operation="delete")

    def submit_batch(self, movements: Sequence[PendingMovement | dict[str, Any]]) -> dict[str, Any] | None:
        request = MovementBatchRequest(movements=[_coerce_model(item, PendingMovement) for item in movements])
        try:
            data = self._request(
                "POST",
                "/api/movements/batch",
                json_body=request.model_dump(mode="json", exclude_none=True),
                operation="submit_batch",
            )
        except ApiError as exc:
            raise map_session_error(exc) from exc
        return data if isinstance(data, dict) else None
