"""httpx client builder.

Every outgoing request (backend REST, Firebase) goes through a client built
here, so timeouts, headers and the User-Agent are the same everywhere.
Tests pass a `transport` (e.g. `httpx.MockTransport`) to stub the network.
"""

from __future__ import annotations

import httpx

from influbuddy.core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the application's defaults."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def decode_body(response: httpx.Response) -> object:
    """JSON body when there is one, else the raw text (or None when empty)."""

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
