"""Push-notification registration.

Deadline reminders are scheduled by the backend; the client only hands over
the device push token.
"""

from __future__ import annotations

import logging

from influbuddy.adapters.backend.client import BackendClient
from influbuddy.core.errors import ApiError

logger = logging.getLogger(__name__)


class NotificationsService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def register_push_token(self, token: str) -> bool:
        """Store `token` in the backend; failures are logged and reported as False."""

        try:
            await self._client.post("/notifications/push-token", json={"token": token})
        except ApiError as exc:
            logger.error("Error storing push token: %s", exc)
            return False
        return True
