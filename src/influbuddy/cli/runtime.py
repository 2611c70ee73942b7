"""Service wiring for CLI commands.

One `AppContext` is opened per command invocation: a single backend HTTP client
shared by every REST service, closed when the command finishes.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx

from influbuddy.adapters.backend import (
    BackendClient,
    CampaignsService,
    NotificationsService,
    PartnersService,
    UsersService,
)
from influbuddy.adapters.firebase_auth import FirebaseAuthClient
from influbuddy.adapters.session_store import SessionStore, SessionTokenProvider
from influbuddy.core.config import AppSettings
from influbuddy.core.services.auth import AuthService
from influbuddy.core.services.tracker import Tracker


@dataclass
class AppContext:
    settings: AppSettings
    auth: AuthService
    tracker: Tracker
    notifications: NotificationsService


@asynccontextmanager
async def open_app(
    settings: AppSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    store: SessionStore | None = None,
) -> AsyncIterator[AppContext]:
    store = store or SessionStore()
    firebase = FirebaseAuthClient(settings, transport=transport)
    tokens = SessionTokenProvider(store, firebase)

    async with BackendClient(tokens, settings, transport=transport) as client:
        yield AppContext(
            settings=settings,
            auth=AuthService(
                firebase=firebase,
                store=store,
                users=UsersService(client),
            ),
            tracker=Tracker(
                campaigns=CampaignsService(client),
                partners=PartnersService(client),
            ),
            notifications=NotificationsService(client),
        )
