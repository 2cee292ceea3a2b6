from __future__ import annotations

import logging
from typing import Sequence

from arqueo_client_sdk import ApiSession, MovementListResponse, PendingMovement

from arqueo_app.services.errors import ArqueoServiceError, normalize_error

logger = logging.getLogger(__name__)


class MovementsService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def list_for_arco(self, arco_id: int) -> MovementListResponse:
        try:
            return self.session.movements_client().list_for_arco(arco_id)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def delete(self, movement_id: int) -> None:
        try:
            self.session.movements_client().delete(movement_id)
        except Exception as exc:
            raise normalize_error(exc) from exc
        logger.info("movement_deleted", extra={"movement_id": movement_id})

    def submit_batch(self, movements: Sequence[PendingMovement]) -> None:
        if not movements:
            raise ArqueoServiceError(message="No hay movimientos para enviar", kind="validation")
        try:
            self.session.movements_client().submit_batch(list(movements))
        except Exception as exc:
            raise normalize_error(exc) from exc
        logger.info("movement_batch_submitted", extra={"count": len(movements)})
