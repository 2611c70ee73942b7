from datetime import datetime

from conftest import make_campaign, make_partner

from influbuddy.core.domain.models import CampaignStatus
from influbuddy.core.services.dashboard import (
    compute_dashboard_stats,
    filter_campaigns,
    filter_partners,
    is_upcoming,
    recent_campaigns,
    status_counts,
    upcoming_deadlines,
)

NOW = datetime(2024, 5, 1, 12, 0)


def test_is_upcoming_window():
    assert is_upcoming(make_campaign(deadline=datetime(2024, 5, 8, 12, 0)), NOW) is True
    assert is_upcoming(make_campaign(deadline=datetime(2024, 5, 8, 12, 1)), NOW) is False
    # overdue still counts until completed
    assert is_upcoming(make_campaign(deadline=datetime(2024, 4, 20)), NOW) is True
    assert is_upcoming(make_campaign(deadline=datetime(2024, 5, 2), status=CampaignStatus.COMPLETED), NOW) is False
    assert is_upcoming(make_campaign(deadline=None), NOW) is False


def test_dashboard_stats():
    campaigns = [
        make_campaign("a", status=CampaignStatus.COMPLETED, value=1000),
        make_campaign("b", status=CampaignStatus.COMPLETED, value=None),
        make_campaign("c", status=CampaignStatus.ACTIVE, deadline=datetime(2024, 5, 3)),
        make_campaign("d", status=CampaignStatus.WAITING_FOR_PAYMENT, value=700, deadline=datetime(2024, 6, 1)),
    ]
    stats = compute_dashboard_stats(campaigns, [make_partner("p1"), make_partner("p2")], NOW)
    assert stats.total_earnings == 1000
    assert stats.active_campaigns == 1
    assert stats.completed_campaigns == 2
    assert stats.total_partners == 2
    assert stats.upcoming_deadlines == 1


def test_dashboard_stats_empty():
    stats = compute_dashboard_stats([], [], NOW)
    assert stats.total_earnings == 0
    assert stats.upcoming_deadlines == 0


def test_recent_campaigns_newest_first():
    campaigns = [
        make_campaign("old", created_at=datetime(2024, 1, 1)),
        make_campaign("none", created_at=None),
        make_campaign("new", created_at=datetime(2024, 4, 1)),
        make_campaign("mid", created_at=datetime(2024, 3, 1)),
    ]
    assert [c.id for c in recent_campaigns(campaigns)] == ["new", "mid", "old"]
    assert [c.id for c in recent_campaigns(campaigns, limit=10)][-1] == "none"


def test_upcoming_deadlines_sorted_and_limited():
    campaigns = [
        make_campaign("late", deadline=datetime(2024, 5, 7)),
        make_campaign("soon", deadline=datetime(2024, 5, 2)),
        make_campaign("far", deadline=datetime(2024, 6, 1)),
        make_campaign("mid", deadline=datetime(2024, 5, 4)),
        make_campaign("overdue", deadline=datetime(2024, 4, 28)),
    ]
    assert [c.id for c in upcoming_deadlines(campaigns, NOW)] == ["overdue", "soon", "mid"]


def test_filter_campaigns_search_status_and_order():
    campaigns = [
        make_campaign("done", title="Summer reel", status=CampaignStatus.COMPLETED, deadline=datetime(2024, 4, 1)),
        make_campaign("undated", title="Summer story", deadline=None),
        make_campaign("b", title="Winter", description="summer teaser", deadline=datetime(2024, 5, 20)),
        make_campaign("a", title="Summer post", deadline=datetime(2024, 5, 5)),
    ]
    assert [c.id for c in filter_campaigns(campaigns, "SUMMER")] == ["a", "b", "undated", "done"]
    assert [c.id for c in filter_campaigns(campaigns, status="all")] == ["a", "b", "undated", "done"]
    assert [c.id for c in filter_campaigns(campaigns, status=CampaignStatus.COMPLETED)] == ["done"]
    assert [c.id for c in filter_campaigns(campaigns, "winter", "ACTIVE")] == ["b"]


def test_status_counts():
    counts = status_counts(
        [make_campaign("a"), make_campaign("b"), make_campaign("c", status=CampaignStatus.DRAFT)]
    )
    assert counts["all"] == 3
    assert counts["ACTIVE"] == 2
    assert counts["DRAFT"] == 1
    assert counts["CANCELLED"] == 0


def test_filter_partners():
    partners = [make_partner("p1", "Acme", "Jan"), make_partner("p2", "Globex", "Ola")]
    assert [p.id for p in filter_partners(partners, "glob")] == ["p2"]
    assert [p.id for p in filter_partners(partners, "p1@")] == ["p1"]
    assert len(filter_partners(partners, "  ")) == 2
