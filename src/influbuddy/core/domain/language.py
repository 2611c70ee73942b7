"""Language utilities for InfluBuddy.

Centralizes the language options supported for user-facing output (reports,
summaries). Keeping it in the domain layer lets both the CLI and the services
share a single source of truth without importing adapters.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported natural-language choices for user-facing output."""

    ENGLISH = "en"
    POLISH = "pl"

    @classmethod
    def default(cls) -> "Language":
        """Return the default language used across the application."""

        return cls.ENGLISH

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return "Polski" if self is Language.POLISH else "English"
