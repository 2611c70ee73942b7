"""Core configuration.

Centralizes environment variables (pydantic-settings) so that adapters
(backend REST, Firebase) and the CLI read configuration the same way.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from influbuddy.core.domain.language import Language

APP_NAME = "influbuddy"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    override = (os.environ.get("INFLUBUDDY_CONFIG_DIR") or "").strip()
    if override:
        return Path(override)

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def get_session_file() -> Path:
    return get_user_config_dir() / "session.json"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def read_user_env_vars() -> dict[str, str]:
    env_path = get_user_env_file()
    if not env_path.exists():
        return {}
    return _parse_env_lines(env_path.read_text(encoding="utf-8"))


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# InfluBuddy user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INFLUBUDDY_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (development), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="http://localhost:3000/api/v1",
        min_length=8,
        description="Base URL of the tracker backend REST API.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="influbuddy-cli/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )

    firebase_api_key: str | None = Field(
        default=None,
        description="Web API key of the Firebase project used for authentication.",
    )
    firebase_auth_url: str = Field(
        default="https://identitytoolkit.googleapis.com/v1",
        min_length=8,
        description="Base URL of the Firebase Identity Toolkit REST API.",
    )
    firebase_token_url: str = Field(
        default="https://securetoken.googleapis.com/v1/token",
        min_length=8,
        description="Firebase Secure Token endpoint (id token refresh).",
    )

    default_language: Language = Field(
        default=Language.ENGLISH,
        description="Language for reports and summaries (en/pl).",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file receiving log output in addition to the console.",
    )
