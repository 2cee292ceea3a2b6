from __future__ import annotations

from dataclasses import dataclass

from .auth_store import AuthStore
from .clients.admin_client import AdminClient
from .clients.arco_client import ArcoClient
from .clients.me_client import MeClient
from .clients.movements_client import MovementsClient
from .clients.reports_client import ReportsClient
from .config import ClientConfig
from .http_client import HttpClient
from .models import MeResponse, SessionData
from .tracing import TraceContext


@dataclass
class ApiSession:
    """Client factory sharing one transport and one bearer token."""

    config: ClientConfig
    auth_store: AuthStore | None = None
    trace: TraceContext | None = None
    token: str | None = None
    user: MeResponse | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        self.auth_store = self.auth_store or AuthStore()
        self.trace = self.trace or TraceContext()
        self.http = self.http or HttpClient(config=self.config, trace=self.trace)
        if not self.token and self.config.access_token:
            self.token = self.config.access_token
        if not self.token:
            stored = self.auth_store.load()
            if stored:
                self.token = stored.access_token
                self.user = stored.user

    def arco_client(self) -> ArcoClient:
        return ArcoClient(http=self.http, access_token=self.token)

    def movements_client(self) -> MovementsClient:
        return MovementsClient(http=self.http, access_token=self.token)

    def reports_client(self) -> ReportsClient:
        return ReportsClient(http=self.http, access_token=self.token)

    def admin_client(self) -> AdminClient:
        return AdminClient(http=self.http, access_token=self.token)

    def me_client(self) -> MeClient:
        return MeClient(http=self.http, access_token=self.token)

    def establish(self, token: str, user: MeResponse | None) -> None:
        self.token = token
        self.user = user
        self.auth_store.save(SessionData(access_token=token, user=user, env_name=self.config.env_name))

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.auth_store:
            self.auth_store.clear()
