"""Partner endpoints (`/partners`)."""

from __future__ import annotations

import logging

from influbuddy.adapters.backend.client import BackendClient, expect_list, expect_object
from influbuddy.core.domain.inputs import PartnerCreate, PartnerUpdate
from influbuddy.core.domain.models import Partner

logger = logging.getLogger(__name__)


class PartnersService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def list(self) -> list[Partner]:
        payload = await self._client.get("/partners")
        items = expect_list(payload, method="GET", path="/partners")
        return [Partner.model_validate(item) for item in items]

    async def get_details(self, partner_id: str) -> Partner:
        path = f"/partners/{partner_id}"
        payload = await self._client.get(path)
        return Partner.model_validate(expect_object(payload, method="GET", path=path))

    async def create(self, partner: PartnerCreate) -> Partner:
        payload = await self._client.post("/partners", json=partner.to_payload())
        created = Partner.model_validate(expect_object(payload, method="POST", path="/partners"))
        logger.info("created partner %s (%s)", created.id, created.company)
        return created

    async def update(self, partner_id: str, updates: PartnerUpdate) -> Partner:
        path = f"/partners/{partner_id}"
        payload = await self._client.patch(path, json=updates.to_payload(exclude_unset=True))
        return Partner.model_validate(expect_object(payload, method="PATCH", path=path))

    async def delete(self, partner_id: str) -> None:
        await self._client.delete(f"/partners/{partner_id}")
        logger.info("deleted partner %s", partner_id)
