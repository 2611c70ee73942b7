"""Campaign endpoints (`/campaigns`)."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from influbuddy.adapters.backend.client import BackendClient, expect_list, expect_object
from influbuddy.core.domain.inputs import CampaignCreate, CampaignUpdate
from influbuddy.core.domain.models import Campaign

logger = logging.getLogger(__name__)


def _unwrap_campaign(payload: Any, *, method: str, path: str) -> Campaign:
    # The post endpoints answer `{"campaign": {...}}`; the others a bare campaign.
    data = expect_object(payload, method=method, path=path)
    if isinstance(data.get("campaign"), dict):
        data = data["campaign"]
    return Campaign.model_validate(data)


class CampaignsService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def list(self) -> list[Campaign]:
        payload = await self._client.get("/campaigns")
        items = expect_list(payload, method="GET", path="/campaigns")
        return [Campaign.model_validate(item) for item in items]

    async def get_details(self, campaign_id: str) -> Campaign:
        path = f"/campaigns/{campaign_id}"
        payload = await self._client.get(path)
        return _unwrap_campaign(payload, method="GET", path=path)

    async def create(self, campaign: CampaignCreate) -> Campaign:
        payload = await self._client.post("/campaigns", json=campaign.to_payload())
        created = _unwrap_campaign(payload, method="POST", path="/campaigns")
        logger.info("created campaign %s (%s)", created.id, created.title)
        return created

    async def update(self, campaign_id: str, updates: CampaignUpdate) -> Campaign:
        path = f"/campaigns/{campaign_id}"
        payload = await self._client.patch(path, json=updates.to_payload(exclude_unset=True))
        return _unwrap_campaign(payload, method="PATCH", path=path)

    async def delete(self, campaign_id: str) -> None:
        await self._client.delete(f"/campaigns/{campaign_id}")
        logger.info("deleted campaign %s", campaign_id)

    async def add_post(self, campaign_id: str, post_url: str) -> Campaign:
        path = f"/campaigns/{campaign_id}/posts"
        payload = await self._client.post(path, json={"postUrl": post_url})
        return _unwrap_campaign(payload, method="POST", path=path)

    async def remove_post(self, campaign_id: str, post_url: str) -> Campaign:
        path = f"/campaigns/{campaign_id}/posts"
        payload = await self._client.delete(path, json={"postUrl": post_url})
        return _unwrap_campaign(payload, method="DELETE", path=path)

    async def update_posts(self, campaign_id: str, post_links: Iterable[str]) -> Campaign:
        path = f"/campaigns/{campaign_id}/posts"
        payload = await self._client.put(path, json={"postLinks": list(post_links)})
        return _unwrap_campaign(payload, method="PUT", path=path)
