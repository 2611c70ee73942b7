"""Rich UI components for the CLI.

Keeps command logic apart from presentation details so tables and panels can
be reused across commands.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from influbuddy.core.domain.models import (
    AuthSession,
    Campaign,
    CampaignStatus,
    DashboardStats,
    Partner,
    UserProfile,
)
from influbuddy.core.services.calendar import DayStatus, format_money
from influbuddy.core.services.dates import local_date

STATUS_STYLES: dict[CampaignStatus, str] = {
    CampaignStatus.DRAFT: "dim",
    CampaignStatus.ACTIVE: "yellow",
    CampaignStatus.WAITING_FOR_PAYMENT: "magenta",
    CampaignStatus.COMPLETED: "green",
    CampaignStatus.CANCELLED: "red",
}

DAY_STYLES: dict[DayStatus, str] = {
    DayStatus.OVERDUE: "bold white on red",
    DayStatus.DUE_TODAY: "bold black on yellow",
    DayStatus.NORMAL: "bold cyan",
}


def print_banner(console: Console) -> None:
    title = Text("InfluBuddy", style="bold magenta")
    subtitle = Text("Partners • Campaigns • Posts", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="magenta", padding=(1, 4)))


def status_text(status: CampaignStatus) -> Text:
    return Text(status.value.replace("_", " ").title(), style=STATUS_STYLES[status])


def _date_or_dash(value) -> str:
    return local_date(value).isoformat() if value else "-"


def build_stats_panel(stats: DashboardStats) -> Panel:
    table = Table.grid(padding=(0, 3))
    table.add_column(style="bold")
    table.add_column(justify="right")
    table.add_row("Total earnings", Text(format_money(stats.total_earnings), style="green"))
    table.add_row("Active campaigns", str(stats.active_campaigns))
    table.add_row("Completed campaigns", str(stats.completed_campaigns))
    table.add_row("Total partners", str(stats.total_partners))
    table.add_row("Upcoming deadlines", Text(str(stats.upcoming_deadlines), style="yellow"))
    return Panel(table, title="Overview", border_style="magenta")


def build_campaigns_table(campaigns: Sequence[Campaign], *, title: str = "Campaigns") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Partner", style="cyan")
    table.add_column("Status")
    table.add_column("Deadline", no_wrap=True)
    table.add_column("Value", justify="right", style="green")
    for campaign in campaigns:
        partner = campaign.partner.company if campaign.partner else campaign.partner_id
        table.add_row(
            campaign.id,
            campaign.title,
            partner,
            status_text(campaign.status),
            _date_or_dash(campaign.deadline),
            format_money(campaign.product_value) if campaign.product_value else "-",
        )
    return table


def build_status_counts(counts: dict[str, int]) -> Text:
    text = Text()
    for key, count in counts.items():
        if text:
            text.append("  ")
        label = "All" if key == "all" else key.replace("_", " ").title()
        style = STATUS_STYLES.get(CampaignStatus(key), "") if key != "all" else "bold"
        text.append(f"{label}: {count}", style=style)
    return text


def build_campaign_panel(campaign: Campaign, *, urgent: bool = False, next_action: str | None = None) -> Panel:
    body = Table.grid(padding=(0, 2))
    body.add_column(style="bold")
    body.add_column()
    partner = f"{campaign.partner.name} ({campaign.partner.company})" if campaign.partner else campaign.partner_id
    body.add_row("Partner", partner)
    body.add_row("Status", status_text(campaign.status))
    deadline = Text(_date_or_dash(campaign.deadline), style="bold red" if urgent else "")
    body.add_row("Deadline", deadline)
    body.add_row("Value", format_money(campaign.product_value) if campaign.product_value else "-")
    if campaign.collaboration_type:
        body.add_row("Type", campaign.collaboration_type.value.title())
    if campaign.description:
        body.add_row("Description", campaign.description)
    if campaign.requirements:
        body.add_row("Requirements", "\n".join(f"• {r}" for r in campaign.requirements))
    if next_action:
        body.add_row("Next action", Text(next_action, style="cyan"))

    parts: list = [body]
    if campaign.social_links:
        links = Table(title="Posts", show_edge=False)
        links.add_column("Platform", style="cyan")
        links.add_column("Type")
        links.add_column("URL", style="magenta")
        links.add_column("Views", justify="right")
        links.add_column("Likes", justify="right")
        for link in campaign.social_links:
            metrics = link.metrics
            links.add_row(
                link.platform.value,
                link.post_type.value,
                link.url,
                str(metrics.views) if metrics and metrics.views is not None else "-",
                str(metrics.likes) if metrics and metrics.likes is not None else "-",
            )
        parts.append(links)
    return Panel(Group(*parts), title=campaign.title, subtitle=campaign.id, border_style="magenta")


def build_partners_table(partners: Sequence[Partner]) -> Table:
    table = Table(title="Partners")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Company", style="cyan")
    table.add_column("Contact", style="white")
    table.add_column("Email")
    table.add_column("Active", justify="right")
    table.add_column("Earnings", justify="right", style="green")
    for partner in partners:
        table.add_row(
            partner.id,
            partner.company,
            partner.name,
            partner.email or "-",
            str(partner.active_campaigns),
            format_money(partner.total_earnings),
        )
    return table


def build_partner_panel(partner: Partner) -> Panel:
    body = Table.grid(padding=(0, 2))
    body.add_column(style="bold")
    body.add_column()
    body.add_row("Contact", partner.name)
    for label, value in (("Email", partner.email), ("Phone", partner.phone), ("Website", partner.website)):
        if value:
            body.add_row(label, value)
    body.add_row("Total earnings", Text(format_money(partner.total_earnings), style="green"))
    body.add_row("Active campaigns", str(partner.active_campaigns))
    if partner.notes:
        body.add_row("Notes", partner.notes)

    parts: list = [body]
    if partner.campaigns:
        recent = Table(title="Recent campaigns", show_edge=False)
        recent.add_column("ID", style="dim")
        recent.add_column("Title")
        recent.add_column("Status")
        recent.add_column("Deadline")
        for item in partner.campaigns:
            recent.add_row(item.id, item.title, item.status, _date_or_dash(item.deadline))
        parts.append(recent)
    return Panel(Group(*parts), title=partner.company, subtitle=partner.id, border_style="cyan")


def build_month_grid(
    title: str,
    weeks: Sequence[Sequence[int | None]],
    day_status: dict[int, DayStatus],
    *,
    today: date | None = None,
    year: int | None = None,
    month: int | None = None,
) -> Table:
    table = Table(title=title, show_lines=False)
    for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"):
        table.add_column(name, justify="right")
    for week in weeks:
        cells: list[Text] = []
        for day in week:
            if day is None:
                cells.append(Text(""))
                continue
            style = DAY_STYLES.get(day_status[day], "") if day in day_status else ""
            if today and year and month and today == date(year, month, day) and not style:
                style = "underline"
            cells.append(Text(str(day), style=style))
        table.add_row(*cells)
    return table


def build_session_panel(session: AuthSession) -> Panel:
    body = Table.grid(padding=(0, 2))
    body.add_column(style="bold")
    body.add_column()
    body.add_row("Name", session.display_name or "-")
    body.add_row("Email", session.email or "-")
    body.add_row("User ID", session.uid)
    verified = Text("yes", style="green") if session.email_verified else Text("no", style="yellow")
    body.add_row("Verified", verified)
    return Panel(body, title="Signed in", border_style="green")


def build_profile_panel(profile: UserProfile) -> Panel:
    body = Table.grid(padding=(0, 2))
    body.add_column(style="bold")
    body.add_column()
    body.add_row("Name", profile.name or "-")
    body.add_row("Email", profile.email or "-")
    body.add_row("Bio", profile.bio or "-")
    body.add_row("Website", profile.website or "-")
    handles = profile.social_handles
    for label, value in (("Instagram", handles.instagram), ("TikTok", handles.tiktok), ("YouTube", handles.youtube)):
        body.add_row(label, value or "-")
    return Panel(body, title="Profile", border_style="magenta")
