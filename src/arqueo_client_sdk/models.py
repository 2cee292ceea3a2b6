from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MeResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    user_id: int
    full_name: str | None = None
    email: str | None = None


class SessionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    access_token: str
    user: MeResponse | None = None
    env_name: str | None = None
