"""Campaign detail helpers: status actions, post links and the share summary."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse

from influbuddy.core.domain.models import Campaign, CampaignStatus, SocialPlatform
from influbuddy.core.services.dates import days_until, local_date

URGENT_WINDOW_DAYS = 3

# One action per status, as offered on the campaign detail screen.
_STATUS_ACTIONS: dict[CampaignStatus, tuple[str, CampaignStatus]] = {
    CampaignStatus.DRAFT: ("start", CampaignStatus.ACTIVE),
    CampaignStatus.ACTIVE: ("complete", CampaignStatus.COMPLETED),
    CampaignStatus.COMPLETED: ("cancel", CampaignStatus.CANCELLED),
}

_PLATFORM_HOSTS: tuple[tuple[str, SocialPlatform], ...] = (
    ("instagram.com", SocialPlatform.INSTAGRAM),
    ("tiktok.com", SocialPlatform.TIKTOK),
    ("youtube.com", SocialPlatform.YOUTUBE),
    ("twitter.com", SocialPlatform.TWITTER),
    ("linkedin.com", SocialPlatform.LINKEDIN),
)


def next_status_action(status: CampaignStatus) -> tuple[str, CampaignStatus] | None:
    """`(action_name, target_status)` offered for `status`, or None."""

    return _STATUS_ACTIONS.get(status)


def detect_platform(url: str) -> SocialPlatform:
    for host, platform in _PLATFORM_HOSTS:
        if host in url:
            return platform
    return SocialPlatform.OTHER


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def is_urgent(campaign: Campaign, now: datetime | None = None) -> bool:
    if campaign.deadline is None or campaign.status is CampaignStatus.COMPLETED:
        return False
    return days_until(campaign.deadline, now) <= URGENT_WINDOW_DAYS


def generate_campaign_summary(campaign: Campaign) -> str:
    """Short text to share a campaign update with the partner."""

    start = local_date(campaign.created_at).isoformat() if campaign.created_at else "-"
    deadline = local_date(campaign.deadline).isoformat() if campaign.deadline else "No deadline"
    partner_name = campaign.partner.name if campaign.partner else ""
    partner_company = campaign.partner.company if campaign.partner else ""

    lines = [
        f"Campaign: {campaign.title}",
        f"Partner: {partner_name} ({partner_company})",
        f"Status: {campaign.status.value.lower()}",
        f"Start Date: {start}",
        f"Deadline: {deadline}",
    ]
    if campaign.description:
        lines.extend(["", "Description:", campaign.description])
    return "\n".join(lines) + "\n"
