import json

import httpx
import pytest
from conftest import API_BASE, campaign_payload, partner_payload
from typer.testing import CliRunner

from influbuddy.cli import main as cli_main
from influbuddy.cli.runtime import open_app
from influbuddy.core.config import read_user_env_vars

runner = CliRunner()


@pytest.fixture
def cli_env(monkeypatch, store, recorder):
    monkeypatch.setenv("INFLUBUDDY_API_BASE_URL", API_BASE)
    monkeypatch.setenv("INFLUBUDDY_FIREBASE_API_KEY", "test-key")
    monkeypatch.setenv("INFLUBUDDY_FIREBASE_AUTH_URL", "https://identity.test/v1")
    monkeypatch.setenv("INFLUBUDDY_FIREBASE_TOKEN_URL", "https://token.test/v1/token")
    monkeypatch.setattr(
        cli_main,
        "open_app",
        lambda settings: open_app(settings, transport=recorder.transport, store=store),
    )
    return recorder


@pytest.fixture
def signed_in(cli_env, store, session):
    store.save(session)
    cli_env.routes.update(
        {
            ("GET", "/api/v1/campaigns"): [
                campaign_payload(),
                campaign_payload(id="c2", title="Autumn reel", status="COMPLETED", deadline="2024-05-20T12:00:00"),
            ],
            ("GET", "/api/v1/campaigns/c1"): campaign_payload(),
            ("GET", "/api/v1/partners"): [partner_payload(), partner_payload(id="p2", company="Globex", name="Ola")],
        }
    )
    return cli_env


def invoke(*args):
    return runner.invoke(cli_main.app, list(args))


def test_requires_sign_in(cli_env):
    result = invoke("campaigns", "list")
    assert result.exit_code == 1
    assert "Not signed in" in result.output
    assert cli_env.requests == []


def test_login_stores_session(cli_env, store):
    cli_env.routes[("POST", "/v1/accounts:signInWithPassword")] = {
        "localId": "user-1",
        "email": "ana@example.com",
        "displayName": "Ana",
        "idToken": "id-1",
        "refreshToken": "refresh-1",
        "expiresIn": "3600",
    }
    result = invoke("auth", "login", "--email", "ana@example.com", "--password", "secret")
    assert result.exit_code == 0, result.output
    assert "Signed in as" in result.output
    assert store.load().id_token == "id-1"


def test_login_shows_firebase_message(cli_env):
    cli_env.routes[("POST", "/v1/accounts:signInWithPassword")] = httpx.Response(
        400, json={"error": {"message": "INVALID_LOGIN_CREDENTIALS"}}
    )
    result = invoke("auth", "login", "--email", "ana@example.com", "--password", "nope")
    assert result.exit_code == 1
    assert "Invalid email or password" in result.output


def test_whoami_and_logout(signed_in, store):
    result = invoke("auth", "whoami")
    assert result.exit_code == 0
    assert "ana@example.com" in result.output
    assert invoke("auth", "logout").exit_code == 0
    assert store.load() is None
    assert invoke("auth", "whoami").exit_code == 1


def test_campaigns_list_with_filter(signed_in):
    result = invoke("campaigns", "list", "--status", "completed")
    assert result.exit_code == 0, result.output
    assert "Autumn reel" in result.output
    assert "Spring launch" not in result.output
    assert "All: 2" in result.output


def test_campaign_show_and_summary(signed_in):
    result = invoke("campaigns", "show", "c1")
    assert result.exit_code == 0, result.output
    assert "Spring launch" in result.output

    result = invoke("campaigns", "summary", "c1")
    assert result.exit_code == 0
    assert "Campaign: Spring launch\nPartner: Jan Kowalski (Acme)\nStatus: active\n" in result.output


def test_campaign_show_not_found(signed_in):
    result = invoke("campaigns", "show", "missing")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_campaign_add_posts_payload(signed_in):
    signed_in.routes[("POST", "/api/v1/campaigns")] = campaign_payload(id="c9", title="Launch", status="DRAFT")
    result = invoke(
        "campaigns", "add",
        "--title", "Launch",
        "--partner", "p1",
        "--value", "$1,500",
        "--deadline", "2024-05-10",
        "--requirement", "2 reels",
        "--requirement", "1 story",
    )
    assert result.exit_code == 0, result.output
    assert "c9" in result.output
    body = signed_in.json_body()
    assert body["productValue"] == 1500
    assert body["requirements"] == ["2 reels", "1 story"]
    assert body["deadline"].startswith("2024-05-10T00:00:00")
    assert body["status"] == "DRAFT"


def test_campaign_add_rejects_bad_value(signed_in):
    result = invoke(
        "campaigns", "add", "--title", "Launch", "--partner", "p1", "--value", "0", "--deadline", "2024-05-10"
    )
    assert result.exit_code == 1
    assert "Invalid product_value" in result.output
    assert all(r.method == "GET" for r in signed_in.requests)


def test_campaign_edit_requires_changes(signed_in):
    result = invoke("campaigns", "edit", "c1")
    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_campaign_advance(signed_in):
    signed_in.routes[("PATCH", "/api/v1/campaigns/c1")] = campaign_payload(status="COMPLETED")
    result = invoke("campaigns", "advance", "c1")
    assert result.exit_code == 0, result.output
    assert signed_in.json_body() == {"status": "COMPLETED"}
    assert "COMPLETED" in result.output


def test_add_post_validates_url(signed_in):
    result = invoke("campaigns", "add-post", "c1", "instagram.com/p/1")
    assert result.exit_code == 1
    assert "valid URL" in result.output
    assert signed_in.requests == []


def test_add_post(signed_in):
    signed_in.routes[("POST", "/api/v1/campaigns/c1/posts")] = {"campaign": campaign_payload()}
    result = invoke("campaigns", "add-post", "c1", "https://instagram.com/p/1")
    assert result.exit_code == 0, result.output
    assert "instagram" in result.output
    assert signed_in.json_body() == {"postUrl": "https://instagram.com/p/1"}


def test_delete_campaign_with_confirmation(signed_in):
    signed_in.routes[("DELETE", "/api/v1/campaigns/c1")] = httpx.Response(204)
    aborted = runner.invoke(cli_main.app, ["campaigns", "delete", "c1"], input="n\n")
    assert aborted.exit_code == 1
    assert signed_in.requests == []

    result = invoke("campaigns", "delete", "c1", "--yes")
    assert result.exit_code == 0
    assert signed_in.requests[-1].method == "DELETE"


def test_partners_list_search(signed_in):
    result = invoke("partners", "list", "--search", "glob")
    assert result.exit_code == 0
    assert "Globex" in result.output
    assert "Acme" not in result.output


def test_partner_add_validation(signed_in):
    result = invoke("partners", "add", "--company", "Acme", "--name", "Jan", "--email", "nope")
    assert result.exit_code == 1
    assert "valid email" in result.output


def test_dashboard(signed_in):
    result = invoke("dashboard")
    assert result.exit_code == 0, result.output
    assert "Overview" in result.output
    assert "Total partners" in result.output


def test_calendar_month(signed_in):
    result = invoke("calendar", "month", "--month", "2024-05")
    assert result.exit_code == 0, result.output
    assert "May 2024" in result.output
    assert "Spring launch" in result.output


def test_calendar_bad_month(signed_in):
    result = invoke("calendar", "month", "--month", "May")
    assert result.exit_code == 2


def test_calendar_summary_text(signed_in):
    result = invoke("calendar", "summary", "--month", "2024-05")
    assert result.exit_code == 0, result.output
    assert "CAMPAIGN SUMMARY - May 2024" in result.output
    assert "Total earnings: $1,500" in result.output


def test_calendar_summary_json_export(signed_in, tmp_path):
    target = tmp_path / "may.json"
    result = invoke("calendar", "summary", "--month", "2024-05", "--partner", "p1", "--format", "json", "--export", str(target))
    assert result.exit_code == 0, result.output
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["partner_filter"] == ["p1"]
    assert len(data["campaigns"]) == 2


def test_config_language(cli_env):
    result = invoke("config", "language", "pl")
    assert result.exit_code == 0, result.output
    assert read_user_env_vars()["INFLUBUDDY_DEFAULT_LANGUAGE"] == "pl"


def test_calendar_day(signed_in):
    result = invoke("calendar", "day", "10", "--month", "2024-05")
    assert result.exit_code == 0, result.output
    assert "Spring launch" in result.output

    result = invoke("calendar", "day", "11", "--month", "2024-05")
    assert result.exit_code == 0
    assert "No deadlines on 2024-05-11" in result.output


def test_calendar_summary_pdf_falls_back_to_html(signed_in, tmp_path, monkeypatch):
    def broken_pdf(**kwargs):
        raise OSError("cairo missing")

    monkeypatch.setattr(cli_main, "export_summary_pdf", broken_pdf)
    target = tmp_path / "may.pdf"
    result = invoke("calendar", "summary", "--month", "2024-05", "--format", "pdf", "--export", str(target))

    assert result.exit_code == 0, result.output
    assert "writing HTML instead" in result.output
    assert not target.exists()
    html = (tmp_path / "may.html").read_text(encoding="utf-8")
    assert "May 2024" in html


def test_profile_update(signed_in):
    signed_in.routes[("PATCH", "/api/v1/user/profile")] = {
        "id": "user-1",
        "name": "Ana",
        "bio": "Hi",
        "socialHandles": {"instagram": "@ana"},
    }
    result = invoke("profile", "update", "--bio", "Hi", "--instagram", "@ana")
    assert result.exit_code == 0, result.output
    assert "@ana" in result.output
    body = signed_in.json_body()
    assert body["bio"] == "Hi"
    assert body["socialHandles"]["instagram"] == "@ana"
    assert "name" not in body


def test_profile_push_token(signed_in):
    signed_in.routes[("POST", "/api/v1/notifications/push-token")] = {"success": True}
    result = invoke("profile", "push-token", "expo-token")
    assert result.exit_code == 0, result.output
    assert "Push token registered" in result.output
    assert signed_in.json_body() == {"token": "expo-token"}


def test_profile_push_token_failure(signed_in):
    signed_in.routes[("POST", "/api/v1/notifications/push-token")] = httpx.Response(500, json={"message": "boom"})
    result = invoke("profile", "push-token", "expo-token")
    assert result.exit_code == 1
    assert "Could not register the push token" in result.output
