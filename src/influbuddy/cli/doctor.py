"""Doctor command and user configuration commands."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from influbuddy.adapters.http_client import build_async_client
from influbuddy.adapters.report_exporter import export_summary_pdf
from influbuddy.adapters.session_store import SessionStore
from influbuddy.core.config import AppSettings, get_user_env_file, write_user_env_vars
from influbuddy.core.domain.language import Language
from influbuddy.core.services.calendar import build_monthly_summary
from influbuddy.core.services.dates import now_local

config_app = typer.Typer(no_args_is_help=True, help="Backend, Firebase and language configuration.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_pdf() -> tuple[bool, str]:
    """Render an empty monthly summary to detect WeasyPrint issues."""

    today = now_local()
    summary = build_monthly_summary([], [], today.year, today.month)
    try:
        with tempfile.TemporaryDirectory() as tmp:
            export_summary_pdf(summary=summary, output_path=Path(tmp) / "doctor.pdf")
        return True, "OK"
    except Exception as exc:
        return False, str(exc)


def doctor() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="InfluBuddy Doctor")
    table.add_column("Check", style="bright_magenta", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Config file", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))
    table.add_row("API base URL", "OK", settings.api_base_url)
    if settings.firebase_api_key:
        table.add_row("Firebase key", "OK", "Sign-in enabled")
    else:
        table.add_row("Firebase key", "MISSING", "Run `influbuddy config setup`")

    session = SessionStore().load()
    if session is not None:
        table.add_row("Session", "OK", f"Signed in as {session.email}")
    else:
        table.add_row("Session", "SIGNED OUT", "Run `influbuddy auth login`")

    ok_http, detail_http = asyncio.run(_check_http(settings.api_base_url, settings))
    table.add_row("Backend connectivity", "OK" if ok_http else "FAIL", detail_http)

    ok_pdf, detail_pdf = _check_pdf()
    table.add_row("WeasyPrint PDF", "OK" if ok_pdf else "FAIL", detail_pdf)

    _console.print(table)

    if not ok_pdf:
        _console.print(
            "\n[yellow]Note:[/yellow] When PDF export fails, `calendar summary --format pdf` falls back to HTML."
        )


@config_app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    api_base_url = typer.prompt("Backend API base URL", default=settings.api_base_url, show_default=True).strip()
    api_key = typer.prompt(
        "Firebase Web API key",
        default=settings.firebase_api_key or "",
        show_default=False,
        hide_input=True,
    ).strip()

    if not api_base_url.startswith("http"):
        raise typer.BadParameter("API base URL must start with http:// or https://")

    env_path = write_user_env_vars(
        {
            "INFLUBUDDY_API_BASE_URL": api_base_url,
            "INFLUBUDDY_FIREBASE_API_KEY": api_key or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")


@config_app.command()
def language(
    value: Language = typer.Argument(..., help="Report language (en or pl)."),
) -> None:
    """Set the default language for reports and summaries."""

    env_path = write_user_env_vars({"INFLUBUDDY_DEFAULT_LANGUAGE": value.value})
    _console.print(f"[green]Language set to {value.label()}[/green] ({env_path})")


@config_app.command()
def show() -> None:
    """Show the effective configuration."""

    settings = AppSettings()
    table = Table(title="Configuration")
    table.add_column("Setting", style="bright_magenta", no_wrap=True)
    table.add_column("Value")
    table.add_row("api_base_url", settings.api_base_url)
    table.add_row("firebase_api_key", "set" if settings.firebase_api_key else "-")
    table.add_row("default_language", settings.default_language.value)
    table.add_row("log_level", settings.log_level)
    table.add_row("log_file", str(settings.log_file) if settings.log_file else "-")
    table.add_row("config file", str(get_user_env_file()))
    _console.print(table)
