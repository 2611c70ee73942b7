"""Monthly summary reports (text, HTML, PDF).

HTML is rendered with Jinja2; PDF goes through WeasyPrint on top of the same
HTML. Text is the same report users share from the calendar screen.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from influbuddy.core.domain.language import Language
from influbuddy.core.services.calendar import (
    STATUS_MARKERS,
    MonthlySummary,
    format_money,
    month_name,
    render_monthly_summary,
    summary_labels,
)
from influbuddy.core.services.dates import local_date

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["money"] = format_money
    env.filters["local_date"] = local_date
    return env


def render_summary_html(*, summary: MonthlySummary, language: Language = Language.ENGLISH) -> str:
    """Render a self-contained HTML report."""

    companies = {p.partner_id: p.company for p in summary.partners}
    template = _get_env().get_template("monthly_summary.html")
    return template.render(
        summary=summary,
        t=summary_labels(language),
        language=language.value,
        month_label=f"{month_name(summary.month, language)} {summary.year}",
        companies=companies,
        markers=STATUS_MARKERS,
    )


def export_summary_text(
    *, summary: MonthlySummary, output_path: Path, language: Language = Language.ENGLISH
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_monthly_summary(summary, language), encoding="utf-8")
    return output_path


def export_summary_html(
    *, summary: MonthlySummary, output_path: Path, language: Language = Language.ENGLISH
) -> Path:
    """Export the report as HTML.

    Also the fallback when PDF rendering is not supported by the environment.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    html = render_summary_html(summary=summary, language=language)
    output_path.write_text(html, encoding="utf-8")
    return output_path


def export_summary_pdf(
    *, summary: MonthlySummary, output_path: Path, language: Language = Language.ENGLISH
) -> Path:
    """Export the report as PDF (synchronous; WeasyPrint is local CPU/IO)."""

    # Imported lazily: WeasyPrint needs native libraries (Pango) at import time.
    from weasyprint import HTML

    output_path.parent.mkdir(parents=True, exist_ok=True)
    html = render_summary_html(summary=summary, language=language)
    HTML(string=html, base_url=str(_TEMPLATES_DIR)).write_pdf(str(output_path))
    return output_path
