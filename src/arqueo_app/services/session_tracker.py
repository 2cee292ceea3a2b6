from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from arqueo_client_sdk import ApiSession
from arqueo_client_sdk.exceptions import ApiError

from arqueo_app.services.errors import ArqueoServiceError, normalize_error
from arqueo_app.state import AppState, BalanceSnapshot, SessionSnapshot

logger = logging.getLogger(__name__)

SESSION_CLOSED_MESSAGE = "Debe abrir el arco para continuar."


class SessionTracker:
    """Keeps ``AppState.session`` and ``AppState.balance`` in sync with the server."""

    def __init__(self, session: ApiSession, state: AppState) -> None:
        self.session = session
        self.state = state

    def fetch_status(self, shift: str | None = None) -> SessionSnapshot | None:
        """Fresh status for ``shift``; ``None`` when the server cannot be read."""
        resolved_shift = shift or self.state.shift
        try:
            response = self.session.arco_client().get_status(resolved_shift)
        except (ApiError, ValueError) as exc:
            logger.warning("arco_status_unavailable", extra={"shift": resolved_shift, "error_type": type(exc).__name__})
            self.state.session = SessionSnapshot(shift=resolved_shift, checked_at=_now())
            return None
        snapshot = SessionSnapshot(
            is_open=response.is_open,
            arco_id=response.arco.id if response.is_open and response.arco else None,
            shift=resolved_shift,
            checked_at=_now(),
        )
        self.state.session = snapshot
        return snapshot

    def require_open(self, shift: str | None = None, *, message: str = SESSION_CLOSED_MESSAGE) -> SessionSnapshot:
        snapshot = self.fetch_status(shift)
        if snapshot is None or not snapshot.is_open or snapshot.arco_id is None:
            raise ArqueoServiceError(message=message, kind="session")
        return snapshot

    def current_status(self) -> SessionSnapshot:
        """Server-side current session; failures are raised as ``ArqueoServiceError``."""
        try:
            response = self.session.arco_client().get_current()
        except (ApiError, ValueError) as exc:
            self.state.session.mark_closed()
            raise normalize_error(exc) from exc
        self.state.session = SessionSnapshot(
            is_open=response.is_open,
            arco_id=response.arco.id if response.is_open and response.arco else None,
            shift=(response.arco.turno if response.arco else None) or self.state.shift,
            checked_at=_now(),
        )
        return self.state.session

    def load_current(self) -> SessionSnapshot:
        try:
            return self.current_status()
        except ArqueoServiceError as exc:
            logger.warning("arco_state_unavailable", extra={"error_kind": exc.kind})
            return self.state.session

    def refresh_balance(self) -> BalanceSnapshot:
        try:
            balance = self.session.arco_client().get_last_balance()
        except (ApiError, ValueError) as exc:
            logger.warning("arco_balance_unavailable", extra={"error_type": type(exc).__name__})
            self.state.balance = BalanceSnapshot()
            return self.state.balance
        self.state.balance = BalanceSnapshot.from_model(balance)
        return self.state.balance

    def open(self, shift: str | None = None) -> SessionSnapshot | None:
        resolved_shift = shift or self.state.shift
        try:
            self.session.arco_client().open(resolved_shift)
        except Exception as exc:
            raise normalize_error(exc) from exc
        logger.info("arco_opened", extra={"shift": resolved_shift})
        return self.fetch_status(resolved_shift)

    def open_advanced(self, shift: str | None = None) -> SessionSnapshot:
        resolved_shift = shift or self.state.shift
        try:
            response = self.session.arco_client().open_advanced(resolved_shift)
        except Exception as exc:
            raise normalize_error(exc) from exc
        if response.id is None:
            raise ArqueoServiceError(message="El servidor no devolvió el identificador del arco")
        self.state.session = SessionSnapshot(is_open=True, arco_id=response.id, shift=resolved_shift, checked_at=_now())
        self.state.balance = BalanceSnapshot()
        logger.info("arco_opened", extra={"shift": resolved_shift, "arco_id": response.id})
        return self.state.session

    def close(self, withdrawal_amount: Decimal | None = None) -> BalanceSnapshot:
        arco_id = self.state.session.arco_id
        if not self.state.session.is_open or arco_id is None:
            raise ArqueoServiceError(message="No hay un arco abierto para cerrar", kind="session")
        try:
            self.session.arco_client().close(arco_id, withdrawal_amount)
        except Exception as exc:
            raise normalize_error(exc) from exc
        logger.info("arco_closed", extra={"arco_id": arco_id, "with_withdrawal": bool(withdrawal_amount)})
        self.state.session.mark_closed()
        return self.refresh_balance()


def _now() -> datetime:
    return datetime.now(timezone.utc)
