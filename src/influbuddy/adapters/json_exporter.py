"""JSON export of the monthly summary.

Lets the summary feed spreadsheets or other tools without going through the
HTML/PDF render.
"""

from __future__ import annotations

import json
from pathlib import Path

from influbuddy.core.services.calendar import MonthlySummary


def export_summary_json(*, summary: MonthlySummary, output_path: Path) -> Path:
    """Export `MonthlySummary` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = summary.model_dump(mode="json", by_alias=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
