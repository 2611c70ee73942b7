"""InfluBuddy CLI.

Every command opens an `AppContext` (see `cli.runtime`), runs one coroutine
against it and renders the result with the Rich components in
`cli.ui_components`. Library errors become a red message and exit code 1.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, List, NoReturn, Optional, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from influbuddy import __version__
from influbuddy.adapters.json_exporter import export_summary_json
from influbuddy.adapters.report_exporter import (
    export_summary_html,
    export_summary_pdf,
    export_summary_text,
)
from influbuddy.cli import doctor as doctor_cmd
from influbuddy.cli.runtime import AppContext, open_app
from influbuddy.cli.ui_components import (
    build_campaign_panel,
    build_campaigns_table,
    build_month_grid,
    build_partner_panel,
    build_partners_table,
    build_profile_panel,
    build_session_panel,
    build_stats_panel,
    build_status_counts,
    print_banner,
)
from influbuddy.core.config import AppSettings
from influbuddy.core.domain.inputs import (
    CampaignCreate,
    CampaignUpdate,
    PartnerCreate,
    PartnerUpdate,
    ProfileUpdate,
)
from influbuddy.core.domain.language import Language
from influbuddy.core.domain.models import CampaignStatus, CollaborationType, SocialHandles
from influbuddy.core.errors import InfluBuddyError, NotAuthenticatedError
from influbuddy.core.log import setup_logging
from influbuddy.core.services.calendar import (
    build_monthly_summary,
    day_campaigns,
    day_deadline_status,
    month_campaigns,
    month_name,
    render_monthly_summary,
    weeks_in_month,
)
from influbuddy.core.services.campaign_actions import (
    detect_platform,
    generate_campaign_summary,
    is_urgent,
    is_valid_url,
    next_status_action,
)
from influbuddy.core.services.dashboard import filter_campaigns, filter_partners, status_counts
from influbuddy.core.services.dates import now_local

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="InfluBuddy: track brand partners, campaigns and posts.")
auth_app = typer.Typer(no_args_is_help=True, help="Sign in, register and manage the account.")
campaigns_app = typer.Typer(no_args_is_help=True, help="Create, edit and follow campaigns.")
partners_app = typer.Typer(no_args_is_help=True, help="Manage brand partners.")
calendar_app = typer.Typer(no_args_is_help=True, help="Deadlines by month and monthly summaries.")
profile_app = typer.Typer(no_args_is_help=True, help="Your creator profile.")

app.add_typer(auth_app, name="auth")
app.add_typer(campaigns_app, name="campaigns")
app.add_typer(partners_app, name="partners")
app.add_typer(calendar_app, name="calendar")
app.add_typer(profile_app, name="profile")
app.add_typer(doctor_cmd.config_app, name="config")
app.command(name="doctor")(doctor_cmd.doctor)

console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


def _run(action: Callable[[AppContext], Awaitable[T]]) -> T:
    """Run `action` inside a fresh app context, turning library errors into exit code 1."""

    async def _main() -> T:
        async with open_app(AppSettings()) as ctx:
            return await action(ctx)

    try:
        return asyncio.run(_main())
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()))
            message = str(error.get("msg", "")).removeprefix("Value error, ")
            console.print(f"[red]Invalid {escape(field) or 'input'}:[/red] {escape(message)}")
        raise typer.Exit(code=1)
    except NotAuthenticatedError:
        console.print("[red]Not signed in.[/red] Run `influbuddy auth login` first.")
        raise typer.Exit(code=1)
    except InfluBuddyError as exc:
        _fail(str(exc))


def _local(value: Optional[datetime]) -> Optional[datetime]:
    # Naive values from the command line are local wall-clock times.
    return value.astimezone() if value is not None else None


def _parse_month(value: Optional[str]) -> tuple[int, int]:
    if not value:
        today = now_local()
        return today.year, today.month
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError as exc:
        raise typer.BadParameter("Use YYYY-MM, e.g. 2024-05", param_hint="--month") from exc
    return parsed.year, parsed.month


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"influbuddy {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    settings = AppSettings()
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_file)


# Auth


@auth_app.command()
def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Sign in with e-mail and password."""

    if not email.strip() or not password:
        _fail("Please fill in all fields")
    session = _run(lambda ctx: ctx.auth.sign_in(email, password))
    console.print(f"[green]Signed in as[/green] {escape(session.display_name or session.email)}")
    if not session.email_verified:
        console.print("[yellow]Your e-mail is not verified yet.[/yellow] Run `influbuddy auth verify-email`.")


@auth_app.command()
def register(
    name: str = typer.Option(..., "--name", "-n", prompt="Full name"),
    email: str = typer.Option(..., "--email", "-e", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an account; a verification e-mail is sent afterwards."""

    if not name.strip() or not email.strip() or not password:
        _fail("Please fill in all fields")
    session = _run(lambda ctx: ctx.auth.sign_up(email, password, name))
    console.print(f"[green]Welcome, {escape(session.display_name or name)}![/green]")
    console.print(f"A verification link was sent to {escape(session.email)}.")


@auth_app.command()
def logout() -> None:
    """Forget the stored session."""

    async def action(ctx: AppContext) -> None:
        ctx.auth.sign_out()

    _run(action)
    console.print("Signed out.")


@auth_app.command(name="reset-password")
def reset_password(email: str = typer.Option(..., "--email", "-e", prompt=True)) -> None:
    """Send a password reset e-mail."""

    _run(lambda ctx: ctx.auth.reset_password(email))
    console.print(f"[green]Password reset e-mail sent to[/green] {escape(email.strip())}")


@auth_app.command(name="verify-email")
def verify_email(
    check: bool = typer.Option(False, "--check", help="Refresh the verification status instead of resending."),
) -> None:
    """Resend the verification e-mail, or check whether it was confirmed."""

    if check:
        session = _run(lambda ctx: ctx.auth.refresh_email_verified())
        if session.email_verified:
            console.print("[green]E-mail verified.[/green]")
        else:
            console.print("[yellow]E-mail not verified yet.[/yellow]")
        return

    sent = _run(lambda ctx: ctx.auth.send_verification_email())
    if not sent:
        console.print("[red]Not signed in.[/red] Run `influbuddy auth login` first.")
        raise typer.Exit(code=1)
    console.print("[green]Verification e-mail sent.[/green]")


@auth_app.command()
def whoami() -> None:
    """Show the signed-in account."""

    async def action(ctx: AppContext):
        return ctx.auth.current_session

    session = _run(action)
    if session is None:
        console.print("Not signed in.")
        raise typer.Exit(code=1)
    console.print(build_session_panel(session))


# Dashboard


@app.command()
def dashboard(
    limit: int = typer.Option(3, "--limit", min=1, help="Rows in the recent and upcoming lists."),
) -> None:
    """Earnings, active work and the next deadlines at a glance."""

    view = _run(lambda ctx: ctx.tracker.dashboard(limit=limit))
    print_banner(console)
    console.print(build_stats_panel(view.stats))
    if view.recent:
        console.print(build_campaigns_table(view.recent, title="Recent campaigns"))
    else:
        console.print("[dim]No campaigns yet. Add one with `influbuddy campaigns add`.[/dim]")
    if view.upcoming:
        console.print(build_campaigns_table(view.upcoming, title="Upcoming deadlines"))


# Campaigns


@campaigns_app.command("list")
def list_campaigns(
    search: str = typer.Option("", "--search", "-s", help="Match title or description."),
    status: Optional[CampaignStatus] = typer.Option(None, "--status", case_sensitive=False),
) -> None:
    """List campaigns, most urgent first."""

    campaigns = _run(lambda ctx: ctx.tracker.list_campaigns())
    shown = filter_campaigns(campaigns, search, status)
    console.print(build_status_counts(status_counts(campaigns)))
    if not shown:
        console.print("[dim]No campaigns match.[/dim]")
        return
    console.print(build_campaigns_table(shown))


@campaigns_app.command("show")
def show_campaign(campaign_id: str = typer.Argument(...)) -> None:
    """Campaign details with its posts."""

    campaign = _run(lambda ctx: ctx.tracker.get_campaign(campaign_id))
    action = next_status_action(campaign.status)
    console.print(
        build_campaign_panel(
            campaign,
            urgent=is_urgent(campaign),
            next_action=f"influbuddy campaigns advance {campaign.id}  ({action[0]})" if action else None,
        )
    )


@campaigns_app.command("add")
def add_campaign(
    title: str = typer.Option(..., "--title", "-t", prompt=True),
    partner_id: str = typer.Option(..., "--partner", "-p", prompt="Partner ID"),
    value: str = typer.Option(..., "--value", prompt="Product value"),
    deadline: datetime = typer.Option(..., "--deadline", formats=DATE_FORMATS, prompt="Deadline (YYYY-MM-DD)"),
    description: str = typer.Option("", "--description", "-d"),
    requirement: Optional[List[str]] = typer.Option(None, "--requirement", "-r", help="Repeat for each requirement."),
    collaboration_type: CollaborationType = typer.Option(
        CollaborationType.BARTER, "--type", case_sensitive=False
    ),
    status: CampaignStatus = typer.Option(CampaignStatus.DRAFT, "--status", case_sensitive=False),
) -> None:
    """Create a campaign."""

    async def action(ctx: AppContext):
        data = CampaignCreate(
            title=title,
            description=description,
            partner_id=partner_id,
            product_value=value,
            deadline=_local(deadline),
            status=status,
            requirements=requirement or [],
            collaboration_type=collaboration_type,
        )
        return await ctx.tracker.create_campaign(data)

    created = _run(action)
    console.print(f"[green]Created campaign[/green] {escape(created.title)} [dim]({created.id})[/dim]")


@campaigns_app.command("edit")
def edit_campaign(
    campaign_id: str = typer.Argument(...),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    partner_id: Optional[str] = typer.Option(None, "--partner", "-p"),
    value: Optional[str] = typer.Option(None, "--value"),
    start_date: Optional[datetime] = typer.Option(None, "--start-date", formats=DATE_FORMATS),
    deadline: Optional[datetime] = typer.Option(None, "--deadline", formats=DATE_FORMATS),
    requirement: Optional[List[str]] = typer.Option(None, "--requirement", "-r", help="Replaces all requirements."),
    collaboration_type: Optional[CollaborationType] = typer.Option(None, "--type", case_sensitive=False),
) -> None:
    """Update the given fields of a campaign."""

    changes = {
        "title": title,
        "description": description,
        "partner_id": partner_id,
        "product_value": value,
        "start_date": _local(start_date),
        "deadline": _local(deadline),
        "requirements": requirement or None,
        "collaboration_type": collaboration_type,
    }
    changes = {key: item for key, item in changes.items() if item is not None}
    if not changes:
        _fail("Nothing to update")

    async def action(ctx: AppContext):
        return await ctx.tracker.update_campaign(campaign_id, CampaignUpdate(**changes))

    updated = _run(action)
    console.print(f"[green]Updated[/green] {escape(updated.title)}")


@campaigns_app.command("delete")
def delete_campaign(
    campaign_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete a campaign."""

    if not yes:
        typer.confirm(f"Delete campaign {campaign_id}? This cannot be undone.", abort=True)
    _run(lambda ctx: ctx.tracker.delete_campaign(campaign_id))
    console.print("[green]Campaign deleted.[/green]")


@campaigns_app.command("advance")
def advance_campaign(campaign_id: str = typer.Argument(...)) -> None:
    """Apply the next status action (start, complete or cancel)."""

    updated = _run(lambda ctx: ctx.tracker.advance_campaign_status(campaign_id))
    console.print(f"[green]{escape(updated.title)}[/green] is now {updated.status.value}")


@campaigns_app.command("status")
def set_status(
    campaign_id: str = typer.Argument(...),
    status: CampaignStatus = typer.Argument(..., case_sensitive=False),
) -> None:
    """Set a campaign's status directly."""

    updated = _run(lambda ctx: ctx.tracker.set_campaign_status(campaign_id, status))
    console.print(f"[green]{escape(updated.title)}[/green] is now {updated.status.value}")


@campaigns_app.command("add-post")
def add_post(campaign_id: str = typer.Argument(...), url: str = typer.Argument(...)) -> None:
    """Attach a published post to a campaign."""

    if not is_valid_url(url):
        _fail("Please enter a valid URL")
    _run(lambda ctx: ctx.tracker.add_post(campaign_id, url))
    console.print(f"[green]Added {detect_platform(url).value} post.[/green]")


@campaigns_app.command("remove-post")
def remove_post(campaign_id: str = typer.Argument(...), url: str = typer.Argument(...)) -> None:
    """Detach a post from a campaign."""

    _run(lambda ctx: ctx.tracker.remove_post(campaign_id, url))
    console.print("[green]Post removed.[/green]")


@campaigns_app.command("set-posts")
def set_posts(
    campaign_id: str = typer.Argument(...),
    urls: Optional[List[str]] = typer.Argument(None, help="The complete list of post URLs."),
) -> None:
    """Replace all post links of a campaign."""

    links = urls or []
    invalid = [link for link in links if not is_valid_url(link)]
    if invalid:
        _fail(f"Please enter a valid URL: {invalid[0]}")
    updated = _run(lambda ctx: ctx.tracker.update_posts(campaign_id, links))
    console.print(f"[green]{escape(updated.title)}[/green] now has {len(updated.social_links)} post(s).")


@campaigns_app.command("summary")
def campaign_summary(campaign_id: str = typer.Argument(...)) -> None:
    """Print a shareable plain-text summary."""

    campaign = _run(lambda ctx: ctx.tracker.get_campaign(campaign_id))
    typer.echo(generate_campaign_summary(campaign))


# Partners


@partners_app.command("list")
def list_partners(search: str = typer.Option("", "--search", "-s", help="Match company, name or email.")) -> None:
    """List partners."""

    partners = filter_partners(_run(lambda ctx: ctx.tracker.list_partners()), search)
    if not partners:
        console.print("[dim]No partners found.[/dim]")
        return
    console.print(build_partners_table(partners))


@partners_app.command("show")
def show_partner(partner_id: str = typer.Argument(...)) -> None:
    """Partner details with recent campaigns."""

    console.print(build_partner_panel(_run(lambda ctx: ctx.tracker.get_partner(partner_id))))


@partners_app.command("add")
def add_partner(
    company: str = typer.Option(..., "--company", "-c", prompt=True),
    name: str = typer.Option(..., "--name", "-n", prompt="Contact name"),
    email: str = typer.Option(..., "--email", "-e", prompt=True),
    phone: Optional[str] = typer.Option(None, "--phone"),
    website: Optional[str] = typer.Option(None, "--website"),
    notes: Optional[str] = typer.Option(None, "--notes"),
) -> None:
    """Create a partner."""

    async def action(ctx: AppContext):
        data = PartnerCreate(company=company, name=name, email=email, phone=phone, website=website, notes=notes)
        return await ctx.tracker.create_partner(data)

    created = _run(action)
    console.print(f"[green]Created partner[/green] {escape(created.company)} [dim]({created.id})[/dim]")


@partners_app.command("edit")
def edit_partner(
    partner_id: str = typer.Argument(...),
    company: Optional[str] = typer.Option(None, "--company", "-c"),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    email: Optional[str] = typer.Option(None, "--email", "-e"),
    phone: Optional[str] = typer.Option(None, "--phone"),
    website: Optional[str] = typer.Option(None, "--website"),
    notes: Optional[str] = typer.Option(None, "--notes"),
) -> None:
    """Update the given fields of a partner."""

    changes = {
        "company": company,
        "name": name,
        "email": email,
        "phone": phone,
        "website": website,
        "notes": notes,
    }
    changes = {key: item for key, item in changes.items() if item is not None}
    if not changes:
        _fail("Nothing to update")

    async def action(ctx: AppContext):
        return await ctx.tracker.update_partner(partner_id, PartnerUpdate(**changes))

    updated = _run(action)
    console.print(f"[green]Updated[/green] {escape(updated.company)}")


@partners_app.command("delete")
def delete_partner(
    partner_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete a partner."""

    if not yes:
        typer.confirm(f"Delete partner {partner_id}? This cannot be undone.", abort=True)
    _run(lambda ctx: ctx.tracker.delete_partner(partner_id))
    console.print("[green]Partner deleted.[/green]")


# Calendar


@calendar_app.command("month")
def calendar_month(
    month: Optional[str] = typer.Option(None, "--month", "-m", help="YYYY-MM (defaults to the current month)."),
    partner: Optional[List[str]] = typer.Option(None, "--partner", "-p", help="Only these partner IDs."),
) -> None:
    """Month grid with deadline markers, followed by the month's campaigns."""

    year, month_no = _parse_month(month)
    campaigns = month_campaigns(_run(lambda ctx: ctx.tracker.list_campaigns()), year, month_no, partner)
    today = now_local().date()
    weeks = weeks_in_month(year, month_no)
    day_status = {}
    for week in weeks:
        for day in week:
            if day is None:
                continue
            status = day_deadline_status(campaigns, year, month_no, day, today)
            if status is not None:
                day_status[day] = status

    title = f"{month_name(month_no)} {year}"
    console.print(build_month_grid(title, weeks, day_status, today=today, year=year, month=month_no))
    if campaigns:
        console.print(build_campaigns_table(campaigns, title="Deadlines this month"))
    else:
        console.print("[dim]No deadlines this month.[/dim]")


@calendar_app.command("day")
def calendar_day(
    day: int = typer.Argument(..., min=1, max=31),
    month: Optional[str] = typer.Option(None, "--month", "-m", help="YYYY-MM (defaults to the current month)."),
    partner: Optional[List[str]] = typer.Option(None, "--partner", "-p", help="Only these partner IDs."),
) -> None:
    """Campaigns due on one day."""

    year, month_no = _parse_month(month)
    campaigns = month_campaigns(_run(lambda ctx: ctx.tracker.list_campaigns()), year, month_no, partner)
    due = day_campaigns(campaigns, day)
    if not due:
        console.print(f"[dim]No deadlines on {year}-{month_no:02d}-{day:02d}.[/dim]")
        return
    console.print(build_campaigns_table(due, title=f"Due {year}-{month_no:02d}-{day:02d}"))


@calendar_app.command("summary")
def calendar_summary(
    month: Optional[str] = typer.Option(None, "--month", "-m", help="YYYY-MM (defaults to the current month)."),
    partner: Optional[List[str]] = typer.Option(None, "--partner", "-p", help="Only these partner IDs."),
    export: Optional[Path] = typer.Option(None, "--export", "-o", help="Write the report to this file."),
    fmt: str = typer.Option("txt", "--format", "-f", help="txt, json, html or pdf."),
    language: Optional[Language] = typer.Option(None, "--lang", case_sensitive=False),
) -> None:
    """Monthly summary report: overview, statuses, partners and weekly details."""

    fmt = fmt.lower()
    if fmt not in {"txt", "json", "html", "pdf"}:
        raise typer.BadParameter("Choose txt, json, html or pdf", param_hint="--format")

    year, month_no = _parse_month(month)
    settings = AppSettings()
    lang = language or settings.default_language
    campaigns, partners = _run(lambda ctx: ctx.tracker.load_all())
    summary = build_monthly_summary(campaigns, partners, year, month_no, partner)

    if export is None:
        if fmt == "json":
            typer.echo(json.dumps(summary.model_dump(mode="json"), ensure_ascii=False, indent=2))
        else:
            typer.echo(render_monthly_summary(summary, lang))
        return

    if fmt == "json":
        path = export_summary_json(summary=summary, output_path=export)
    elif fmt == "html":
        path = export_summary_html(summary=summary, output_path=export, language=lang)
    elif fmt == "pdf":
        try:
            path = export_summary_pdf(summary=summary, output_path=export, language=lang)
        except Exception as exc:
            fallback = export.with_suffix(".html")
            console.print(f"[yellow]PDF export failed ({escape(str(exc))}); writing HTML instead.[/yellow]")
            path = export_summary_html(summary=summary, output_path=fallback, language=lang)
    else:
        path = export_summary_text(summary=summary, output_path=export, language=lang)
    console.print(Panel(f"Saved to {escape(str(path))}", border_style="green"))


# Profile


@profile_app.command("show")
def show_profile() -> None:
    """Show your profile."""

    console.print(build_profile_panel(_run(lambda ctx: ctx.auth.get_profile())))


@profile_app.command("update")
def update_profile(
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    bio: Optional[str] = typer.Option(None, "--bio"),
    website: Optional[str] = typer.Option(None, "--website"),
    instagram: Optional[str] = typer.Option(None, "--instagram"),
    tiktok: Optional[str] = typer.Option(None, "--tiktok"),
    youtube: Optional[str] = typer.Option(None, "--youtube"),
) -> None:
    """Update your profile; social handles are replaced together."""

    changes: dict[str, object] = {
        key: item for key, item in {"name": name, "bio": bio, "website": website}.items() if item is not None
    }
    if any(handle is not None for handle in (instagram, tiktok, youtube)):
        changes["social_handles"] = SocialHandles(
            instagram=instagram or "", tiktok=tiktok or "", youtube=youtube or ""
        )
    if not changes:
        _fail("Nothing to update")

    async def action(ctx: AppContext):
        return await ctx.auth.update_profile(ProfileUpdate(**changes))

    console.print(build_profile_panel(_run(action)))


@profile_app.command("push-token")
def register_push_token(token: str = typer.Argument(..., help="Device push token.")) -> None:
    """Register a device push token for deadline reminders."""

    if not _run(lambda ctx: ctx.notifications.register_push_token(token)):
        _fail("Could not register the push token")
    console.print("[green]Push token registered.[/green]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
