from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import pytest

from arqueo_client_sdk import (
    AdminUser,
    ArcoBalance,
    ArcoStatusResponse,
    Concept,
    MeResponse,
    MovementListResponse,
    OpenArcoResponse,
    ReportFilter,
    ReportRow,
    Role,
    TransportError,
)
from arqueo_client_sdk.clients.base import _coerce_model
from arqueo_client_sdk.models_admin import ConceptWrite, PasswordReset, RoleWrite, UserCreate, UserUpdate

from arqueo_app.state import AppState


def open_status(arco_id: int = 9, shift: str = "M") -> ArcoStatusResponse:
    return ArcoStatusResponse(arco_abierto=True, arco={"id": arco_id, "turno": shift})


def closed_status() -> ArcoStatusResponse:
    return ArcoStatusResponse(arco_abierto=False, arco=None)


@dataclass
class FakeArcoClient:
    status: ArcoStatusResponse = field(default_factory=open_status)
    balance: ArcoBalance = field(default_factory=lambda: ArcoBalance(saldo_total=Decimal("22000")))
    errors: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, Any]] = field(default_factory=list)
    next_id: int = 40

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.errors:
            raise self.errors[operation]

    def get_status(self, shift: str) -> ArcoStatusResponse:
        self.calls.append(("status", shift))
        self._maybe_fail("status")
        return self.status

    def get_current(self) -> ArcoStatusResponse:
        self.calls.append(("current", None))
        self._maybe_fail("current")
        return self.status

    def open(self, shift: str) -> None:
        self.calls.append(("open", shift))
        self._maybe_fail("open")
        self.status = open_status(self.next_id, shift)

    def open_advanced(self, shift: str) -> OpenArcoResponse:
        self.calls.append(("open_advanced", shift))
        self._maybe_fail("open_advanced")
        self.status = open_status(self.next_id, shift)
        return OpenArcoResponse(id=self.next_id)

    def close(self, arco_id: int, withdrawal_amount: Decimal | None = None) -> None:
        self.calls.append(("close", (arco_id, withdrawal_amount)))
        self._maybe_fail("close")
        self.status = closed_status()

    def get_last_balance(self) -> ArcoBalance:
        self.calls.append(("balance", None))
        self._maybe_fail("balance")
        return self.balance

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]


@dataclass
class FakeMovementsClient:
    listing: MovementListResponse = field(default_factory=MovementListResponse)
    batches: list[list[Any]] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    submit_error: Exception | None = None
    delete_error: Exception | None = None
    list_error: Exception | None = None

    def list_for_arco(self, arco_id: int) -> MovementListResponse:
        if self.list_error:
            raise self.list_error
        return self.listing

    def delete(self, movement_id: int) -> None:
        if self.delete_error:
            raise self.delete_error
        self.deleted.append(movement_id)
        self.listing = MovementListResponse(
            movements=[item for item in self.listing.movements if item.movement_id != movement_id]
        )

    def submit_batch(self, movements: list[Any]) -> None:
        if self.submit_error:
            raise self.submit_error
        self.batches.append(list(movements))


@dataclass
class FakeReportsClient:
    rows: list[dict[str, Any]] = field(default_factory=list)
    error: Exception | None = None
    version: int = 0
    queries: list[ReportFilter] = field(default_factory=list)
    on_query: Any = None

    def begin_query(self) -> int:
        self.version += 1
        return self.version

    def query(self, filters: ReportFilter, *, context_version: int | None = None) -> list[ReportRow]:
        self.queries.append(filters)
        if self.on_query:
            self.on_query()
        if self.error:
            raise self.error
        if context_version is not None and context_version != self.version:
            raise TransportError(
                code="REQUEST_CANCELLED",
                message="Request cancelled due to context switch",
                details=None,
                trace_id=None,
                status_code=0,
            )
        return [ReportRow.model_validate(row) for row in self.rows]


@dataclass
class FakeAdminClient:
    roles: list[Role] = field(default_factory=list)
    users: list[AdminUser] = field(default_factory=list)
    concepts: list[Concept] = field(default_factory=list)
    writes: list[tuple[str, Any]] = field(default_factory=list)
    error: Exception | None = None

    def _write(self, name: str, payload: Any) -> None:
        if self.error:
            raise self.error
        self.writes.append((name, payload))

    def list_roles(self) -> list[Role]:
        return list(self.roles)

    def create_role(self, payload: Any) -> None:
        request = _coerce_model(payload, RoleWrite)
        self._write("create_role", request)
        self.roles.append(Role(role_id=len(self.roles) + 1, role_name=request.role_name))

    def update_role(self, role_id: int, payload: Any) -> None:
        self._write("update_role", (role_id, _coerce_model(payload, RoleWrite)))

    def delete_role(self, role_id: int) -> None:
        self._write("delete_role", role_id)
        self.roles = [role for role in self.roles if role.role_id != role_id]

    def list_users(self) -> list[AdminUser]:
        return list(self.users)

    def create_user(self, payload: Any) -> None:
        self._write("create_user", _coerce_model(payload, UserCreate))

    def update_user(self, user_id: int, payload: Any) -> None:
        self._write("update_user", (user_id, _coerce_model(payload, UserUpdate)))

    def delete_user(self, user_id: int) -> None:
        self._write("delete_user", user_id)

    def reset_password(self, user_id: int, payload: Any) -> None:
        self._write("reset_password", (user_id, _coerce_model(payload, PasswordReset)))

    def list_concepts(self) -> list[Concept]:
        return list(self.concepts)

    def create_concept(self, payload: Any) -> None:
        self._write("create_concept", _coerce_model(payload, ConceptWrite))

    def update_concept(self, concept_id: int, payload: Any) -> None:
        self._write("update_concept", (concept_id, _coerce_model(payload, ConceptWrite)))

    def delete_concept(self, concept_id: int) -> None:
        self._write("delete_concept", concept_id)


@dataclass
class FakeMeClient:
    profile: MeResponse | None = field(default_factory=lambda: MeResponse(user_id=7, full_name="Ana Caja"))
    error: Exception | None = None

    def me(self) -> MeResponse:
        if self.error:
            raise self.error
        assert self.profile is not None
        return self.profile


@dataclass
class FakeSession:
    arco: FakeArcoClient = field(default_factory=FakeArcoClient)
    movements: FakeMovementsClient = field(default_factory=FakeMovementsClient)
    reports: FakeReportsClient = field(default_factory=FakeReportsClient)
    admin: FakeAdminClient = field(default_factory=FakeAdminClient)
    me: FakeMeClient = field(default_factory=FakeMeClient)
    token: str | None = "token"
    user: MeResponse | None = None
    trace: Any = None
    cleared: bool = False
    established: list[str] = field(default_factory=list)

    def arco_client(self) -> FakeArcoClient:
        return self.arco

    def movements_client(self) -> FakeMovementsClient:
        return self.movements

    def reports_client(self) -> FakeReportsClient:
        return self.reports

    def admin_client(self) -> FakeAdminClient:
        return self.admin

    def me_client(self) -> FakeMeClient:
        return self.me

    def establish(self, token: str, user: MeResponse | None) -> None:
        self.token = token
        self.user = user
        self.established.append(token)

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.cleared = True


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def state() -> AppState:
    return AppState(shift="M", user=MeResponse(user_id=7, full_name="Ana Caja"))
