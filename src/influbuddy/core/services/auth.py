"""Account flows: sign in/up/out, password reset, e-mail verification, profile.

Combines Firebase Authentication (identity) with the backend (user record and
profile). The signed-in session is persisted through `SessionStore`.
"""

from __future__ import annotations

import logging

from influbuddy.adapters.backend import UsersService
from influbuddy.adapters.firebase_auth import FirebaseAuthClient
from influbuddy.adapters.session_store import SessionStore
from influbuddy.core.domain.inputs import ProfileUpdate
from influbuddy.core.domain.models import AuthSession, UserProfile
from influbuddy.core.errors import AuthError, InfluBuddyError, NotAuthenticatedError

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        *,
        firebase: FirebaseAuthClient,
        store: SessionStore,
        users: UsersService,
    ) -> None:
        self._firebase = firebase
        self._store = store
        self._users = users

    @property
    def current_session(self) -> AuthSession | None:
        return self._store.load()

    @property
    def is_authenticated(self) -> bool:
        return self.current_session is not None

    async def sign_in(self, email: str, password: str) -> AuthSession:
        session = await self._firebase.sign_in(email, password)
        self._store.save(session)
        logger.info("signed in as %s", session.email)
        return session

    async def sign_up(self, email: str, password: str, name: str) -> AuthSession:
        """Create the Firebase account, name it, send verification and sync the backend user."""

        session = await self._firebase.sign_up(email, password)
        session = await self._firebase.update_display_name(session, name.strip())
        await self._firebase.send_email_verification(session)

        self._store.save(session)
        try:
            await self._users.sync()
        except InfluBuddyError as exc:
            self._store.clear()
            logger.error("user sync failed after sign-up: %s", exc)
            raise AuthError(
                "Your account was created but could not be registered with the server. "
                "Please sign in again later.",
                code="auth/sync-failed",
            ) from exc

        logger.info("registered %s", session.email)
        return session

    def sign_out(self) -> None:
        self._store.clear()

    async def reset_password(self, email: str) -> None:
        await self._firebase.send_password_reset(email)

    async def send_verification_email(self) -> bool:
        """Send the verification e-mail again; False when nobody is signed in."""

        session = self.current_session
        if session is None:
            return False
        await self._firebase.send_email_verification(session)
        return True

    async def refresh_email_verified(self) -> AuthSession:
        session = self.current_session
        if session is None:
            raise NotAuthenticatedError()
        info = await self._firebase.lookup(session)
        session = session.model_copy(update={"email_verified": bool(info.get("emailVerified"))})
        self._store.save(session)
        return session

    async def get_profile(self) -> UserProfile:
        return await self._users.get_profile()

    async def update_profile(self, updates: ProfileUpdate) -> UserProfile:
        """Update the backend profile; a new name is also set as the Firebase display name."""

        session = self.current_session
        if session is None:
            raise NotAuthenticatedError()
        if updates.name:
            session = await self._firebase.update_display_name(session, updates.name)
            self._store.save(session)
        return await self._users.update_profile(updates)
