from __future__ import annotations

from dataclasses import dataclass

from ..models import MeResponse
from .base import BaseClient, _expect_object


@dataclass
class MeClient(BaseClient):
    module: str = "auth"

    def me(self) -> MeResponse:
        data = self._request("GET", "/api/me", operation="me")
        return MeResponse.model_validate(_expect_object(data, "me"))
