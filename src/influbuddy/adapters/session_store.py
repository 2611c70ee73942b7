"""Signed-in session persistence.

The session (tokens + identity) is kept as JSON in the per-user config
directory so the CLI stays signed in between invocations.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from influbuddy.adapters.firebase_auth import FirebaseAuthClient
from influbuddy.core.config import get_session_file
from influbuddy.core.domain.models import AuthSession
from influbuddy.core.errors import NotAuthenticatedError

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_session_file()

    def load(self) -> AuthSession | None:
        """Stored session, or None when signed out (missing or unreadable file)."""

        if not self.path.exists():
            return None
        try:
            return AuthSession.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return None

    def save(self, session: AuthSession) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = session.model_dump(mode="json")
        self.path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug("could not restrict permissions on %s", self.path)
        return self.path

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class SessionTokenProvider:
    """`TokenProvider` backed by the session store, refreshing expired tokens."""

    def __init__(self, store: SessionStore, firebase: FirebaseAuthClient) -> None:
        self._store = store
        self._firebase = firebase
        self._refresh_lock = asyncio.Lock()

    async def get_session(self) -> AuthSession:
        session = self._store.load()
        if session is None:
            raise NotAuthenticatedError()
        if not session.is_expired():
            return session

        async with self._refresh_lock:
            # Another request may have refreshed while we waited.
            session = self._store.load()
            if session is None:
                raise NotAuthenticatedError()
            if session.is_expired():
                logger.info("id token expired, refreshing")
                session = await self._firebase.refresh(session)
                self._store.save(session)
        return session

    async def get_credentials(self) -> tuple[str, str]:
        session = await self.get_session()
        return session.id_token, session.uid


class StaticTokenProvider:
    """`TokenProvider` for a session already in hand (e.g. right after sign-up)."""

    def __init__(self, session: AuthSession) -> None:
        self._session = session

    async def get_credentials(self) -> tuple[str, str]:
        return self._session.id_token, self._session.uid
