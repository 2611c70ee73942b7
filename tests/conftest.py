from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Callable

import httpx
import pytest

from influbuddy.adapters.backend import BackendClient
from influbuddy.adapters.session_store import SessionStore, StaticTokenProvider
from influbuddy.core.config import AppSettings
from influbuddy.core.domain.models import AuthSession, Campaign, CampaignStatus, Partner

API_BASE = "http://api.test/api/v1"


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Keep the session file and user .env away from the real home directory."""

    config_dir = tmp_path / "config"
    monkeypatch.setenv("INFLUBUDDY_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url=API_BASE,
        firebase_api_key="test-key",
        firebase_auth_url="https://identity.test/v1",
        firebase_token_url="https://token.test/v1/token",
    )


@pytest.fixture
def session() -> AuthSession:
    return AuthSession.expiring_in(
        3600,
        uid="user-1",
        email="ana@example.com",
        display_name="Ana",
        id_token="id-token",
        refresh_token="refresh-token",
    )


@pytest.fixture
def store(tmp_path) -> SessionStore:
    return SessionStore(tmp_path / "session.json")


class Recorder:
    """MockTransport handler that records requests and answers from a route table."""

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None) -> None:
        self.routes: dict[tuple[str, str], Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get((request.method, request.url.path))
        if answer is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(answer):
            return answer(request)
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client(settings, session, recorder) -> Callable[[], BackendClient]:
    def factory() -> BackendClient:
        return BackendClient(StaticTokenProvider(session), settings, transport=recorder.transport)

    return factory


def campaign_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": "c1",
        "title": "Spring launch",
        "description": "Two reels and a story",
        "partnerId": "p1",
        "partner": {"id": "p1", "name": "Jan Kowalski", "company": "Acme"},
        "productValue": 1500,
        "requirements": ["2 reels"],
        "deadline": "2024-05-10T12:00:00",
        "status": "ACTIVE",
        "collaborationType": "PAID",
        "createdAt": "2024-04-01T09:00:00",
        "socialLinks": [],
    }
    data.update(overrides)
    return data


def partner_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": "p1",
        "name": "Jan Kowalski",
        "company": "Acme",
        "email": "jan@acme.test",
        "totalEarnings": 0,
        "activeCampaigns": 1,
        "campaigns": [],
    }
    data.update(overrides)
    return data


def make_campaign(
    campaign_id: str = "c1",
    *,
    status: CampaignStatus = CampaignStatus.ACTIVE,
    deadline: datetime | None = datetime(2024, 5, 10, 12, 0),
    value: float | None = 1500,
    partner_id: str = "p1",
    created_at: datetime | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Campaign:
    return Campaign(
        id=campaign_id,
        title=title or f"Campaign {campaign_id}",
        description=description,
        partner_id=partner_id,
        product_value=value,
        deadline=deadline,
        status=status,
        created_at=created_at,
    )


def make_partner(partner_id: str = "p1", company: str = "Acme", name: str = "Jan Kowalski") -> Partner:
    return Partner(id=partner_id, company=company, name=name, email=f"{partner_id}@example.com")
