"""User endpoints: account sync after sign-up and the profile."""

from __future__ import annotations

from influbuddy.adapters.backend.client import BackendClient, expect_object
from influbuddy.core.domain.inputs import ProfileUpdate
from influbuddy.core.domain.models import UserProfile


class UsersService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def sync(self) -> None:
        """Create (or refresh) the backend user record for the signed-in Firebase user."""

        await self._client.post("/users/sync", json={})

    async def get_profile(self) -> UserProfile:
        payload = await self._client.get("/user/profile")
        return UserProfile.model_validate(expect_object(payload, method="GET", path="/user/profile"))

    async def update_profile(self, updates: ProfileUpdate) -> UserProfile:
        payload = await self._client.patch("/user/profile", json=updates.to_payload(exclude_unset=True))
        return UserProfile.model_validate(expect_object(payload, method="PATCH", path="/user/profile"))
