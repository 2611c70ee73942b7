import logging

from influbuddy.core.config import (
    AppSettings,
    get_user_env_file,
    read_user_env_vars,
    write_user_env_vars,
)
from influbuddy.core.domain.language import Language
from influbuddy.core.log import setup_logging


def test_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("INFLUBUDDY_API_BASE_URL", "https://tracker.example.com/api/v1")
    monkeypatch.setenv("INFLUBUDDY_DEFAULT_LANGUAGE", "pl")
    settings = AppSettings(_env_file=None)
    assert settings.api_base_url == "https://tracker.example.com/api/v1"
    assert settings.default_language is Language.POLISH
    assert settings.firebase_auth_url == "https://identitytoolkit.googleapis.com/v1"


def test_user_env_file_round_trip(isolated_config_dir):
    path = write_user_env_vars({"INFLUBUDDY_API_BASE_URL": "http://localhost:3000/api/v1", "SKIPPED": None})
    assert path == get_user_env_file() == isolated_config_dir / ".env"
    write_user_env_vars({"INFLUBUDDY_FIREBASE_API_KEY": "abc"})
    assert read_user_env_vars() == {
        "INFLUBUDDY_API_BASE_URL": "http://localhost:3000/api/v1",
        "INFLUBUDDY_FIREBASE_API_KEY": "abc",
    }
    assert path.read_text(encoding="utf-8").startswith("# InfluBuddy user config")


def test_setup_logging_levels_and_file(tmp_path):
    log_file = tmp_path / "logs" / "influbuddy.log"
    setup_logging("info", log_file=log_file, enable_console=False)
    logger = logging.getLogger("influbuddy.tests")
    logger.info("hello from tests")
    for handler in logging.getLogger("influbuddy").handlers:
        handler.flush()

    assert logging.getLogger("influbuddy").level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING
    assert "hello from tests" in log_file.read_text(encoding="utf-8")
