"""Dashboard statistics and list views.

Plain filtering/reduction over the campaign and partner lists already fetched
from the backend. Nothing here performs I/O, so every entry point (CLI,
tests, future API) gets the same numbers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from influbuddy.core.domain.models import Campaign, CampaignStatus, DashboardStats, Partner
from influbuddy.core.services.dates import days_until, to_local

UPCOMING_WINDOW_DAYS = 7
ALL_STATUSES = "all"


def is_upcoming(campaign: Campaign, now: datetime | None = None) -> bool:
    """Deadline within the next week (overdue included) and not yet completed."""

    if campaign.deadline is None:
        return False
    if campaign.status is CampaignStatus.COMPLETED:
        return False
    return days_until(campaign.deadline, now) <= UPCOMING_WINDOW_DAYS


def total_earnings(campaigns: Iterable[Campaign], status: CampaignStatus = CampaignStatus.COMPLETED) -> float:
    return sum(c.value for c in campaigns if c.status is status)


def compute_dashboard_stats(
    campaigns: Sequence[Campaign],
    partners: Sequence[Partner],
    now: datetime | None = None,
) -> DashboardStats:
    return DashboardStats(
        total_earnings=total_earnings(campaigns),
        active_campaigns=sum(1 for c in campaigns if c.status is CampaignStatus.ACTIVE),
        completed_campaigns=sum(1 for c in campaigns if c.status is CampaignStatus.COMPLETED),
        total_partners=len(partners),
        upcoming_deadlines=sum(1 for c in campaigns if is_upcoming(c, now)),
    )


def recent_campaigns(campaigns: Sequence[Campaign], limit: int = 3) -> list[Campaign]:
    """Newest first by creation time; undated campaigns keep their order after dated ones."""

    dated = [c for c in campaigns if c.created_at is not None]
    undated = [c for c in campaigns if c.created_at is None]
    dated.sort(key=lambda c: to_local(c.created_at), reverse=True)  # type: ignore[arg-type]
    return (dated + undated)[: max(0, limit)]


def upcoming_deadlines(
    campaigns: Sequence[Campaign],
    now: datetime | None = None,
    limit: int = 3,
) -> list[Campaign]:
    upcoming = [c for c in campaigns if is_upcoming(c, now)]
    upcoming.sort(key=lambda c: to_local(c.deadline))  # type: ignore[arg-type]
    return upcoming[: max(0, limit)]


def _matches_search(query: str, *fields: str | None) -> bool:
    if not query:
        return True
    needle = query.lower()
    return any(f is not None and needle in f.lower() for f in fields)


def _list_order(campaign: Campaign) -> tuple[int, int, float]:
    completed = 1 if campaign.status is CampaignStatus.COMPLETED else 0
    if campaign.deadline is None:
        return (completed, 1, 0.0)
    return (completed, 0, to_local(campaign.deadline).timestamp())


def filter_campaigns(
    campaigns: Iterable[Campaign],
    search: str = "",
    status: CampaignStatus | str | None = None,
) -> list[Campaign]:
    """Campaign list view: search title/description, filter by status.

    Ordered by deadline (earliest first) with completed campaigns at the end.
    """

    wanted: CampaignStatus | None = None
    if status is not None and status != ALL_STATUSES:
        wanted = CampaignStatus(status)

    matches = [
        c
        for c in campaigns
        if _matches_search(search.strip(), c.title, c.description)
        and (wanted is None or c.status is wanted)
    ]
    return sorted(matches, key=_list_order)


def status_counts(campaigns: Sequence[Campaign]) -> dict[str, int]:
    counts: dict[str, int] = {ALL_STATUSES: len(campaigns)}
    for status in CampaignStatus:
        counts[status.value] = sum(1 for c in campaigns if c.status is status)
    return counts


def filter_partners(partners: Iterable[Partner], search: str = "") -> list[Partner]:
    query = search.strip()
    return [p for p in partners if _matches_search(query, p.name, p.company, p.email)]
