from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter

from arqueo_client_sdk import ApiSession, ClientConfig, load_config
from arqueo_client_sdk.exceptions import ApiError

from arqueo_app.services.admin_service import AdminService
from arqueo_app.services.errors import normalize_error
from arqueo_app.services.movements_service import MovementsService
from arqueo_app.services.profile_service import ProfileService
from arqueo_app.services.reports_service import ReportsService
from arqueo_app.services.session_tracker import SessionTracker
from arqueo_app.state import AppState
from arqueo_app.telemetry.events import build_event
from arqueo_app.telemetry.logger import TelemetryLogger
from arqueo_app.ui.admin.concepts_view import ConceptsPanel
from arqueo_app.ui.admin.roles_view import RolesPanel
from arqueo_app.ui.admin.users_view import UsersPanel
from arqueo_app.ui.cash.session_movements_view import SessionMovementsView
from arqueo_app.ui.cash.session_panel_view import SessionPanelView
from arqueo_app.ui.movements.movement_entry_view import MovementEntryView
from arqueo_app.ui.reports.report_view import ReportView
from arqueo_app.ui.shared.notification_center import NotificationCenter

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    authenticated: bool
    error_message: str | None = None


@dataclass
class AppViews:
    session_panel: SessionPanelView
    session_movements: SessionMovementsView
    expenses: SessionMovementsView
    movement_entry: MovementEntryView
    reports: ReportView
    roles: RolesPanel
    users: UsersPanel
    concepts: ConceptsPanel


class AppBootstrap:
    """Wires config, API session, services and views around one shared ``AppState``."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        session: ApiSession | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.config = config or load_config()
        self.session = session or ApiSession(self.config)
        self.state = AppState(shift=self.config.default_shift)
        self.notifications = NotificationCenter()
        self.telemetry = telemetry or TelemetryLogger(app_name="arqueo_app")
        self.profile_service = ProfileService(self.session)
        self.tracker = SessionTracker(self.session, self.state)
        self.movements_service = MovementsService(self.session)
        self.reports_service = ReportsService(self.session)
        self.admin_service = AdminService(self.session)
        self.views = self._build_views()

    def start(self) -> BootstrapResult:
        if not self.session.token:
            self.state.status_message = "Login required"
            logger.info("bootstrap_no_token")
            return BootstrapResult(authenticated=False)

        started = perf_counter()
        try:
            profile = self.profile_service.load_profile()
        except (ApiError, ValueError) as exc:
            failure = normalize_error(exc)
            self.state.user = None
            self.state.error_message = failure.message
            self.state.trace_id = failure.trace_id
            self.state.status_message = "Usuario no autenticado correctamente"
            self._emit_auth_result(False, started, trace_id=failure.trace_id)
            return BootstrapResult(authenticated=False, error_message=failure.message)

        self.state.user = profile
        self.session.establish(self.session.token, profile)
        self._emit_auth_result(True, started, trace_id=self.session.trace.trace_id if self.session.trace else None)

        self.views.session_panel.load()
        self.state.status_message = "Arco abierto" if self.state.session.is_open else "Arco cerrado"
        self.state.error_message = None
        self._emit(
            category="navigation",
            name="screen_view",
            action="dashboard",
            success=True,
            context={"shift": self.state.shift, "session_open": self.state.session.is_open},
        )
        logger.info("dashboard_ready", extra={"shift": self.state.shift, "session_open": self.state.session.is_open})
        return BootstrapResult(authenticated=True)

    def logout(self) -> BootstrapResult:
        self.session.clear()
        self.state.user = None
        self.state.session.mark_closed()
        self.state.staging.clear()
        self.state.status_message = "Session cleared"
        return BootstrapResult(authenticated=False)

    def _build_views(self) -> AppViews:
        shared = {"state": self.state, "notifications": self.notifications}
        return AppViews(
            session_panel=SessionPanelView(tracker=self.tracker, **shared),
            session_movements=SessionMovementsView(service=self.movements_service, tracker=self.tracker, **shared),
            expenses=SessionMovementsView(
                service=self.movements_service, tracker=self.tracker, movement_type="Egreso", **shared
            ),
            movement_entry=MovementEntryView(tracker=self.tracker, service=self.movements_service, **shared),
            reports=ReportView(service=self.reports_service, **shared),
            roles=RolesPanel(service=self.admin_service, **shared),
            users=UsersPanel(service=self.admin_service, **shared),
            concepts=ConceptsPanel(service=self.admin_service, **shared),
        )

    def _emit_auth_result(self, success: bool, started: float, *, trace_id: str | None) -> None:
        self._emit(
            category="auth",
            name="profile_load_result",
            action="me",
            success=success,
            duration_ms=int((perf_counter() - started) * 1000),
            trace_id=trace_id,
        )

    def _emit(self, *, category: str, name: str, action: str, **fields) -> None:
        self.telemetry.emit(build_event(category=category, name=name, area="arqueo_app", action=action, **fields))
