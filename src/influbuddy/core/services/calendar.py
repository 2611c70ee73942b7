"""Calendar bucketing and the monthly summary report.

Campaigns are placed on the calendar by deadline (local date). The month
grid is Sunday-first, matching what users see in the app.
"""

from __future__ import annotations

import calendar as _calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Sequence

from pydantic import BaseModel, Field

from influbuddy.core.domain.language import Language
from influbuddy.core.domain.models import Campaign, CampaignStatus, Partner
from influbuddy.core.services.dates import local_date, now_local, to_local

_OPEN_STATUSES = frozenset(
    {CampaignStatus.DRAFT, CampaignStatus.ACTIVE, CampaignStatus.WAITING_FOR_PAYMENT}
)

STATUS_MARKERS: dict[CampaignStatus, str] = {
    CampaignStatus.ACTIVE: "🟡",
    CampaignStatus.COMPLETED: "✅",
    CampaignStatus.DRAFT: "⚪",
    CampaignStatus.WAITING_FOR_PAYMENT: "💰",
    CampaignStatus.CANCELLED: "❌",
}


class DayStatus(str, Enum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    NORMAL = "normal"


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move `delta` months forward (or back) from `year`/`month`."""

    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def week_start(day: date) -> date:
    """Sunday on or before `day`."""

    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_campaigns(
    campaigns: Iterable[Campaign],
    year: int,
    month: int,
    partner_ids: Iterable[str] | None = None,
) -> list[Campaign]:
    """Campaigns whose deadline falls in the month, optionally for some partners only."""

    wanted = set(partner_ids or ())
    selected = []
    for campaign in campaigns:
        if campaign.deadline is None:
            continue
        deadline = local_date(campaign.deadline)
        if (deadline.year, deadline.month) != (year, month):
            continue
        if wanted and campaign.partner_id not in wanted:
            continue
        selected.append(campaign)
    selected.sort(key=lambda c: to_local(c.deadline))  # type: ignore[arg-type]
    return selected


def weeks_in_month(year: int, month: int) -> list[list[int | None]]:
    """Sunday-first month grid; `None` pads the days outside the month."""

    cal = _calendar.Calendar(firstweekday=_calendar.SUNDAY)
    return [[day or None for day in week] for week in cal.monthdayscalendar(year, month)]


def day_campaigns(campaigns: Iterable[Campaign], day: int) -> list[Campaign]:
    """Campaigns of an already month-filtered list that are due on `day`."""

    return [c for c in campaigns if c.deadline is not None and local_date(c.deadline).day == day]


def day_deadline_status(
    campaigns: Iterable[Campaign],
    year: int,
    month: int,
    day: int,
    today: date | None = None,
) -> DayStatus | None:
    due = day_campaigns(campaigns, day)
    if not due:
        return None

    today = today or now_local().date()
    diff_days = (date(year, month, day) - today).days
    has_open = any(c.status in _OPEN_STATUSES for c in due)

    if diff_days < 0 and has_open:
        return DayStatus.OVERDUE
    if diff_days == 0 and has_open:
        return DayStatus.DUE_TODAY
    return DayStatus.NORMAL


class PartnerMonthSummary(BaseModel):
    partner_id: str
    company: str
    name: str
    campaign_count: int = 0
    earnings: float = 0.0


class WeekBucket(BaseModel):
    week_start: date
    campaigns: list[Campaign] = Field(default_factory=list)


class MonthlySummary(BaseModel):
    year: int
    month: int
    partner_filter: list[str] = Field(default_factory=list)
    campaigns: list[Campaign] = Field(default_factory=list)
    status_counts: dict[CampaignStatus, int] = Field(default_factory=dict)
    total_earnings: float = 0.0
    pending_earnings: float = 0.0
    partners: list[PartnerMonthSummary] = Field(default_factory=list)
    weeks: list[WeekBucket] = Field(default_factory=list)
    generated_at: datetime


def build_monthly_summary(
    campaigns: Sequence[Campaign],
    partners: Sequence[Partner],
    year: int,
    month: int,
    partner_ids: Iterable[str] | None = None,
    generated_at: datetime | None = None,
) -> MonthlySummary:
    selected_partners = list(partner_ids or ())
    selected = month_campaigns(campaigns, year, month, selected_partners)
    by_id = {p.id: p for p in partners}

    counts = {status: 0 for status in CampaignStatus}
    for campaign in selected:
        counts[campaign.status] += 1

    involved: dict[str, PartnerMonthSummary] = {}
    for campaign in selected:
        partner = by_id.get(campaign.partner_id)
        if partner is None:
            continue
        entry = involved.setdefault(
            partner.id,
            PartnerMonthSummary(partner_id=partner.id, company=partner.company, name=partner.name),
        )
        entry.campaign_count += 1
        if campaign.status is CampaignStatus.COMPLETED:
            entry.earnings += campaign.value

    weeks: dict[date, WeekBucket] = {}
    for campaign in selected:
        start = week_start(local_date(campaign.deadline))  # type: ignore[arg-type]
        weeks.setdefault(start, WeekBucket(week_start=start)).campaigns.append(campaign)

    return MonthlySummary(
        year=year,
        month=month,
        partner_filter=selected_partners,
        campaigns=selected,
        status_counts=counts,
        total_earnings=sum(c.value for c in selected if c.status is CampaignStatus.COMPLETED),
        pending_earnings=sum(
            c.value for c in selected if c.status is CampaignStatus.WAITING_FOR_PAYMENT
        ),
        partners=list(involved.values()),
        weeks=[weeks[key] for key in sorted(weeks)],
        generated_at=generated_at or now_local(),
    )


_LABELS: dict[Language, dict[str, str]] = {
    Language.ENGLISH: {
        "title": "CAMPAIGN SUMMARY",
        "overview": "OVERVIEW",
        "campaigns": "Campaigns",
        "partners": "Partners",
        "partner": "Partner",
        "total_earnings": "Total earnings",
        "earnings": "earnings",
        "details": "CAMPAIGN DETAILS",
        "week": "Week of",
        "deadline": "Deadline",
        "value": "Campaign value",
        "generated": "Report generated on",
        "unknown": "Unknown",
        "DRAFT": "Draft",
        "ACTIVE": "Active",
        "WAITING_FOR_PAYMENT": "Waiting for payment",
        "COMPLETED": "Completed",
        "CANCELLED": "Cancelled",
    },
    Language.POLISH: {
        "title": "PODSUMOWANIE KAMPANII",
        "overview": "PRZEGLĄD",
        "campaigns": "Kampanie",
        "partners": "Partnerzy",
        "partner": "Partner",
        "total_earnings": "Łączne zarobki",
        "earnings": "zarobki",
        "details": "SZCZEGÓŁY KAMPANII",
        "week": "Tydzień od",
        "deadline": "Termin",
        "value": "Wartość kampanii",
        "generated": "Raport wygenerowany",
        "unknown": "Nieznany",
        "DRAFT": "Szkic",
        "ACTIVE": "Aktywna",
        "WAITING_FOR_PAYMENT": "Oczekuje na płatność",
        "COMPLETED": "Zakończona",
        "CANCELLED": "Anulowana",
    },
}

_POLISH_MONTHS = (
    "Styczeń", "Luty", "Marzec", "Kwiecień", "Maj", "Czerwiec",
    "Lipiec", "Sierpień", "Wrzesień", "Październik", "Listopad", "Grudzień",
)

# Order in which the status breakdown is printed.
_BREAKDOWN_ORDER = (
    CampaignStatus.ACTIVE,
    CampaignStatus.COMPLETED,
    CampaignStatus.DRAFT,
    CampaignStatus.WAITING_FOR_PAYMENT,
    CampaignStatus.CANCELLED,
)


def summary_labels(language: Language) -> dict[str, str]:
    return _LABELS[language]


def month_name(month: int, language: Language = Language.ENGLISH) -> str:
    if language is Language.POLISH:
        return _POLISH_MONTHS[month - 1]
    return _calendar.month_name[month]


def format_money(amount: float) -> str:
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def render_monthly_summary(summary: MonthlySummary, language: Language = Language.ENGLISH) -> str:
    """Plain-text monthly report, ready to share or save as .txt."""

    t = summary_labels(language)
    rule = "=" * 50
    lines = [f"📅 {t['title']} - {month_name(summary.month, language)} {summary.year}", rule, ""]

    lines.append(f"📊 {t['overview']}")
    lines.append(f"• {t['campaigns']}: {len(summary.campaigns)}")
    lines.append(f"• {t['partners']}: {len(summary.partners)}")
    lines.append(f"• {t['total_earnings']}: {format_money(summary.total_earnings)}")
    if summary.pending_earnings > 0:
        lines.append(f"• {t['WAITING_FOR_PAYMENT']}: {format_money(summary.pending_earnings)}")
    lines.append("")

    lines.append(f"📈 {t['campaigns'].upper()}")
    for status in _BREAKDOWN_ORDER:
        count = summary.status_counts.get(status, 0)
        if count:
            lines.append(f"• {t[status.value]}: {count}")
    lines.append("")

    if summary.partners:
        lines.append(f"🤝 {t['partners'].upper()}")
        for partner in summary.partners:
            line = f"• {partner.company} ({partner.campaign_count} {t['campaigns'].lower()}"
            if partner.earnings > 0:
                line += f", {format_money(partner.earnings)} {t['earnings']}"
            lines.append(line + ")")
        lines.append("")

    if summary.campaigns:
        companies = {p.partner_id: p.company for p in summary.partners}
        lines.append(f"📋 {t['details']}")
        for bucket in summary.weeks:
            lines.append("")
            lines.append(f"{t['week']} {bucket.week_start.strftime('%b')} {bucket.week_start.day}:")
            for campaign in bucket.campaigns:
                deadline = local_date(campaign.deadline)  # type: ignore[arg-type]
                company = companies.get(campaign.partner_id) or (
                    campaign.partner.company if campaign.partner else ""
                ) or t["unknown"]
                lines.append(f"  {STATUS_MARKERS[campaign.status]} {campaign.title}")
                lines.append(f"     {t['partner']}: {company}")
                lines.append(
                    f"     {t['deadline']}: {deadline.strftime('%a')}, {deadline.strftime('%b')} {deadline.day}"
                )
                if campaign.product_value:
                    lines.append(f"     {t['value']}: {format_money(campaign.product_value)}")

    lines.append("")
    lines.append(rule)
    lines.append(f"{t['generated']} {summary.generated_at.strftime('%Y-%m-%d %H:%M')}")
    return "\n".join(lines) + "\n"
