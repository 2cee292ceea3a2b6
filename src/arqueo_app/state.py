from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from arqueo_client_sdk import ArcoBalance, MeResponse

from arqueo_app.staging import StagingBuffer
from arqueo_app.ui.shared.action_guard import ActionGuard


@dataclass
class SessionSnapshot:
    """Last known cash session status. Never authoritative for gated actions."""

    is_open: bool = False
    arco_id: int | None = None
    shift: str | None = None
    checked_at: datetime | None = None

    def mark_closed(self) -> None:
        self.is_open = False
        self.arco_id = None


@dataclass
class BalanceSnapshot:
    total: Decimal = Decimal("0")
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    opening: Decimal = Decimal("0")

    @property
    def indicator(self) -> str:
        return "positive" if self.total >= 0 else "negative"

    @classmethod
    def from_model(cls, balance: ArcoBalance) -> "BalanceSnapshot":
        return cls(
            total=balance.saldo_total,
            income=balance.total_ingresos,
            expense=balance.total_egresos,
            opening=balance.saldo_inicial,
        )


@dataclass
class AppState:
    shift: str = "M"
    user: MeResponse | None = None
    session: SessionSnapshot = field(default_factory=SessionSnapshot)
    balance: BalanceSnapshot = field(default_factory=BalanceSnapshot)
    staging: StagingBuffer = field(default_factory=StagingBuffer)
    guard: ActionGuard = field(default_factory=ActionGuard)
    status_message: str = "Ready"
    error_message: str | None = None
    trace_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.user.user_id > 0
