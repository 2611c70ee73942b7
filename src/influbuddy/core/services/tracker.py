"""Tracker facade: the REST services behind a query cache.

Every read goes through `QueryCache.fetch`; every mutation invalidates the
queries it affects, the same way the app refetches after a change:

- create: campaign/partner lists
- update: lists + that item's detail
- delete: lists, and the item's detail is dropped
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from influbuddy.adapters.backend import CampaignsService, PartnersService
from influbuddy.core.domain.inputs import CampaignCreate, CampaignUpdate, PartnerCreate, PartnerUpdate
from influbuddy.core.domain.models import Campaign, CampaignStatus, DashboardStats, Partner
from influbuddy.core.errors import InfluBuddyError
from influbuddy.core.query_cache import QueryCache, campaign_keys, partner_keys
from influbuddy.core.services.campaign_actions import next_status_action
from influbuddy.core.services.dashboard import (
    compute_dashboard_stats,
    recent_campaigns,
    upcoming_deadlines,
)


@dataclass
class DashboardView:
    stats: DashboardStats
    recent: list[Campaign] = field(default_factory=list)
    upcoming: list[Campaign] = field(default_factory=list)


class Tracker:
    def __init__(
        self,
        *,
        campaigns: CampaignsService,
        partners: PartnersService,
        cache: QueryCache | None = None,
    ) -> None:
        self._campaigns = campaigns
        self._partners = partners
        self.cache = cache if cache is not None else QueryCache()

    # Campaigns

    async def list_campaigns(self) -> list[Campaign]:
        return await self.cache.fetch(campaign_keys.lists(), self._campaigns.list)

    async def get_campaign(self, campaign_id: str) -> Campaign:
        return await self.cache.fetch(
            campaign_keys.detail(campaign_id),
            lambda: self._campaigns.get_details(campaign_id),
        )

    async def create_campaign(self, data: CampaignCreate) -> Campaign:
        created = await self._campaigns.create(data)
        self.cache.invalidate(campaign_keys.lists())
        return created

    async def update_campaign(self, campaign_id: str, updates: CampaignUpdate) -> Campaign:
        updated = await self._campaigns.update(campaign_id, updates)
        self._after_campaign_change(updated.id)
        return updated

    async def set_campaign_status(self, campaign_id: str, status: CampaignStatus) -> Campaign:
        return await self.update_campaign(campaign_id, CampaignUpdate(status=status))

    async def advance_campaign_status(self, campaign_id: str) -> Campaign:
        """Apply the single status action offered for the campaign's current status."""

        campaign = await self.get_campaign(campaign_id)
        action = next_status_action(campaign.status)
        if action is None:
            raise InfluBuddyError(f"No status action available for a {campaign.status.value} campaign")
        _, target = action
        return await self.set_campaign_status(campaign_id, target)

    async def delete_campaign(self, campaign_id: str) -> None:
        await self._campaigns.delete(campaign_id)
        self.cache.invalidate(campaign_keys.lists())
        self.cache.remove(campaign_keys.detail(campaign_id))

    async def add_post(self, campaign_id: str, post_url: str) -> Campaign:
        updated = await self._campaigns.add_post(campaign_id, post_url)
        self._after_campaign_change(campaign_id)
        return updated

    async def remove_post(self, campaign_id: str, post_url: str) -> Campaign:
        updated = await self._campaigns.remove_post(campaign_id, post_url)
        self._after_campaign_change(campaign_id)
        return updated

    async def update_posts(self, campaign_id: str, post_links: Iterable[str]) -> Campaign:
        updated = await self._campaigns.update_posts(campaign_id, post_links)
        self._after_campaign_change(campaign_id)
        return updated

    def _after_campaign_change(self, campaign_id: str) -> None:
        self.cache.invalidate(campaign_keys.lists())
        self.cache.invalidate(campaign_keys.detail(campaign_id))

    # Partners

    async def list_partners(self) -> list[Partner]:
        return await self.cache.fetch(partner_keys.lists(), self._partners.list)

    async def get_partner(self, partner_id: str) -> Partner:
        return await self.cache.fetch(
            partner_keys.detail(partner_id),
            lambda: self._partners.get_details(partner_id),
        )

    async def create_partner(self, data: PartnerCreate) -> Partner:
        created = await self._partners.create(data)
        self.cache.invalidate(partner_keys.lists())
        return created

    async def update_partner(self, partner_id: str, updates: PartnerUpdate) -> Partner:
        updated = await self._partners.update(partner_id, updates)
        self.cache.invalidate(partner_keys.lists())
        self.cache.invalidate(partner_keys.detail(updated.id))
        return updated

    async def delete_partner(self, partner_id: str) -> None:
        await self._partners.delete(partner_id)
        self.cache.invalidate(partner_keys.lists())
        self.cache.remove(partner_keys.detail(partner_id))

    # Views

    async def load_all(self) -> tuple[list[Campaign], list[Partner]]:
        campaigns, partners = await asyncio.gather(self.list_campaigns(), self.list_partners())
        return campaigns, partners

    async def dashboard(self, now: datetime | None = None, limit: int = 3) -> DashboardView:
        campaigns, partners = await self.load_all()
        return DashboardView(
            stats=compute_dashboard_stats(campaigns, partners, now),
            recent=recent_campaigns(campaigns, limit),
            upcoming=upcoming_deadlines(campaigns, now, limit),
        )

    def refresh(self) -> None:
        """Mark everything stale so the next read goes back to the backend."""

        self.cache.invalidate(campaign_keys.all)
        self.cache.invalidate(partner_keys.all)
