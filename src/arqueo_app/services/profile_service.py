from __future__ import annotations

import logging

from arqueo_client_sdk import ApiSession, MeResponse

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def load_profile(self) -> MeResponse:
        logger.info("profile_fetch_attempt")
        profile = self.session.me_client().me()
        logger.info("profile_fetch_success", extra={"user_id": profile.user_id})
        return profile
