from datetime import date, datetime

import pytest
from conftest import make_campaign, make_partner

from influbuddy.core.domain.language import Language
from influbuddy.core.domain.models import CampaignStatus
from influbuddy.core.services.calendar import (
    DayStatus,
    build_monthly_summary,
    day_campaigns,
    day_deadline_status,
    format_money,
    month_campaigns,
    month_name,
    render_monthly_summary,
    shift_month,
    week_start,
    weeks_in_month,
)


@pytest.mark.parametrize(
    "year, month, delta, expected",
    [
        (2024, 5, 1, (2024, 6)),
        (2024, 12, 1, (2025, 1)),
        (2024, 1, -1, (2023, 12)),
        (2024, 5, -17, (2022, 12)),
    ],
)
def test_shift_month(year, month, delta, expected):
    assert shift_month(year, month, delta) == expected


def test_week_start_is_sunday():
    # 2024-05-01 is a Wednesday
    assert week_start(date(2024, 5, 1)) == date(2024, 4, 28)
    assert week_start(date(2024, 5, 5)) == date(2024, 5, 5)
    assert week_start(date(2024, 5, 11)) == date(2024, 5, 5)


def test_weeks_in_month_grid():
    weeks = weeks_in_month(2024, 5)
    assert weeks[0] == [None, None, None, 1, 2, 3, 4]
    assert weeks[-1] == [26, 27, 28, 29, 30, 31, None]
    assert all(len(week) == 7 for week in weeks)


def test_month_campaigns_filters_and_sorts():
    campaigns = [
        make_campaign("late", deadline=datetime(2024, 5, 20)),
        make_campaign("early", deadline=datetime(2024, 5, 2)),
        make_campaign("june", deadline=datetime(2024, 6, 1)),
        make_campaign("undated", deadline=None),
        make_campaign("other", deadline=datetime(2024, 5, 3), partner_id="p2"),
    ]
    assert [c.id for c in month_campaigns(campaigns, 2024, 5)] == ["early", "other", "late"]
    assert [c.id for c in month_campaigns(campaigns, 2024, 5, ["p2"])] == ["other"]
    assert month_campaigns(campaigns, 2024, 7) == []


def test_day_deadline_status():
    today = date(2024, 5, 10)
    campaigns = [
        make_campaign("past-open", deadline=datetime(2024, 5, 3)),
        make_campaign("past-done", deadline=datetime(2024, 5, 4), status=CampaignStatus.COMPLETED),
        make_campaign("today", deadline=datetime(2024, 5, 10, 18, 0), status=CampaignStatus.DRAFT),
        make_campaign("future", deadline=datetime(2024, 5, 20)),
    ]
    assert day_deadline_status(campaigns, 2024, 5, 3, today) is DayStatus.OVERDUE
    assert day_deadline_status(campaigns, 2024, 5, 4, today) is DayStatus.NORMAL
    assert day_deadline_status(campaigns, 2024, 5, 10, today) is DayStatus.DUE_TODAY
    assert day_deadline_status(campaigns, 2024, 5, 20, today) is DayStatus.NORMAL
    assert day_deadline_status(campaigns, 2024, 5, 21, today) is None
    assert [c.id for c in day_campaigns(campaigns, 10)] == ["today"]


def _summary():
    campaigns = [
        make_campaign("a", title="Reel drop", status=CampaignStatus.COMPLETED, value=1000, deadline=datetime(2024, 5, 2)),
        make_campaign("b", title="Story set", status=CampaignStatus.WAITING_FOR_PAYMENT, value=500.5, deadline=datetime(2024, 5, 6)),
        make_campaign("c", title="Unboxing", status=CampaignStatus.ACTIVE, value=None, deadline=datetime(2024, 5, 7), partner_id="p2"),
        make_campaign("x", title="June", deadline=datetime(2024, 6, 2)),
    ]
    partners = [make_partner("p1", "Acme"), make_partner("p2", "Globex")]
    return build_monthly_summary(campaigns, partners, 2024, 5, generated_at=datetime(2024, 5, 31, 18, 30))


def test_build_monthly_summary():
    summary = _summary()
    assert [c.id for c in summary.campaigns] == ["a", "b", "c"]
    assert summary.total_earnings == 1000
    assert summary.pending_earnings == 500.5
    assert summary.status_counts[CampaignStatus.COMPLETED] == 1
    assert summary.status_counts[CampaignStatus.CANCELLED] == 0
    by_partner = {p.partner_id: p for p in summary.partners}
    assert by_partner["p1"].campaign_count == 2
    assert by_partner["p1"].earnings == 1000
    assert by_partner["p2"].earnings == 0
    assert [w.week_start for w in summary.weeks] == [date(2024, 4, 28), date(2024, 5, 5)]
    assert [c.id for c in summary.weeks[1].campaigns] == ["b", "c"]


def test_build_monthly_summary_partner_filter():
    campaigns = [make_campaign("a", partner_id="p1"), make_campaign("b", partner_id="p2")]
    summary = build_monthly_summary(campaigns, [make_partner("p1"), make_partner("p2")], 2024, 5, ["p2"])
    assert summary.partner_filter == ["p2"]
    assert [c.id for c in summary.campaigns] == ["b"]


def test_render_monthly_summary_english():
    text = render_monthly_summary(_summary())
    assert text.startswith("📅 CAMPAIGN SUMMARY - May 2024\n")
    assert "• Campaigns: 3" in text
    assert "• Total earnings: $1,000" in text
    assert "• Waiting for payment: $500.50" in text
    assert "• Acme (2 campaigns, $1,000 earnings)" in text
    assert "• Globex (1 campaigns)" in text
    assert "Week of Apr 28:" in text
    assert "  ✅ Reel drop" in text
    assert "     Deadline: Thu, May 2" in text
    assert text.rstrip().endswith("Report generated on 2024-05-31 18:30")


def test_render_monthly_summary_polish():
    text = render_monthly_summary(_summary(), Language.POLISH)
    assert "PODSUMOWANIE KAMPANII - Maj 2024" in text
    assert "Łączne zarobki: $1,000" in text


def test_render_empty_month():
    summary = build_monthly_summary([], [], 2024, 2, generated_at=datetime(2024, 3, 1))
    text = render_monthly_summary(summary)
    assert "• Campaigns: 0" in text
    assert "CAMPAIGN DETAILS" not in text


def test_format_money_and_month_name():
    assert format_money(1500) == "$1,500"
    assert format_money(1500.5) == "$1,500.50"
    assert format_money(0) == "$0"
    assert month_name(10) == "October"
    assert month_name(10, Language.POLISH) == "Październik"
