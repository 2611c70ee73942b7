"""Firebase Authentication over its REST API (Identity Toolkit + Secure Token).

Only the request/response contract is used; no Firebase SDK. Firebase error
codes are translated into messages that can be shown to the user as-is.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from influbuddy.adapters.http_client import build_async_client, decode_body
from influbuddy.core.config import AppSettings
from influbuddy.core.domain.models import AuthSession
from influbuddy.core.errors import AuthError

logger = logging.getLogger(__name__)

NETWORK_ERROR = "auth/network-request-failed"

# Identity Toolkit REST codes -> SDK-style codes.
_REST_CODES: dict[str, str] = {
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "USER_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_EMAIL": "auth/invalid-email",
    "MISSING_EMAIL": "auth/invalid-email",
    "USER_DISABLED": "auth/user-disabled",
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "WEAK_PASSWORD": "auth/weak-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "INVALID_IDP_RESPONSE": "auth/invalid-credential",
    "INVALID_REFRESH_TOKEN": "auth/invalid-credential",
    "TOKEN_EXPIRED": "auth/invalid-credential",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
}

_MESSAGES: dict[str, str] = {
    "auth/user-not-found": "No account found with this email address.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/invalid-email": "Please enter a valid email address.",
    "auth/user-disabled": "This account has been disabled. Please contact support.",
    "auth/email-already-in-use": "An account with this email already exists.",
    "auth/weak-password": "Password should be at least 6 characters long.",
    "auth/invalid-credential": "Invalid email or password. Please check your credentials.",
    "auth/too-many-requests": "Too many failed attempts. Please try again later.",
    NETWORK_ERROR: "Network error. Please check your connection and try again.",
}

DEFAULT_MESSAGE = "An error occurred. Please try again."


def firebase_error_message(code: str | None) -> str:
    """User-facing message for an SDK-style Firebase error code."""

    return _MESSAGES.get(code or "", DEFAULT_MESSAGE)


def _rest_error_code(payload: Any) -> str | None:
    # {"error": {"code": 400, "message": "WEAK_PASSWORD : Password should be ..."}}
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
    else:
        message = error
    if not isinstance(message, str):
        return None
    rest_code = message.split(":", 1)[0].strip()
    return _REST_CODES.get(rest_code, f"auth/{rest_code.lower().replace('_', '-')}")


class FirebaseAuthClient:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def _api_key(self) -> str:
        key = self._settings.firebase_api_key
        if not key:
            raise AuthError(
                "Firebase API key is not configured (set INFLUBUDDY_FIREBASE_API_KEY).",
                code="auth/missing-api-key",
            )
        return key

    async def _post(self, url: str, *, json: Any = None, data: Any = None) -> dict[str, Any]:
        params = {"key": self._api_key()}
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                if data is not None:
                    response = await client.post(
                        url,
                        params=params,
                        data=data,
                        headers={"Content-Type": "application/x-www-form-urlencoded"},
                    )
                else:
                    response = await client.post(url, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.error("Firebase request failed: %s", exc)
            raise AuthError(firebase_error_message(NETWORK_ERROR), code=NETWORK_ERROR) from exc

        payload = decode_body(response)
        if response.is_success and isinstance(payload, dict):
            return payload

        code = _rest_error_code(payload)
        logger.warning("Firebase rejected %s: HTTP %s (%s)", url.rsplit("/", 1)[-1], response.status_code, code)
        raise AuthError(firebase_error_message(code), code=code)

    def _identity_url(self, method: str) -> str:
        return f"{self._settings.firebase_auth_url.rstrip('/')}/accounts:{method}"

    @staticmethod
    def _session_from(payload: dict[str, Any], *, fallback: AuthSession | None = None) -> AuthSession:
        return AuthSession.expiring_in(
            payload.get("expiresIn") or 3600,
            uid=payload.get("localId") or (fallback.uid if fallback else ""),
            email=payload.get("email") or (fallback.email if fallback else ""),
            display_name=payload.get("displayName") or (fallback.display_name if fallback else None),
            id_token=payload["idToken"],
            refresh_token=payload.get("refreshToken") or (fallback.refresh_token if fallback else ""),
            email_verified=bool(payload.get("emailVerified", fallback.email_verified if fallback else False)),
        )

    async def sign_in(self, email: str, password: str) -> AuthSession:
        payload = await self._post(
            self._identity_url("signInWithPassword"),
            json={"email": email.strip(), "password": password, "returnSecureToken": True},
        )
        return self._session_from(payload)

    async def sign_up(self, email: str, password: str) -> AuthSession:
        payload = await self._post(
            self._identity_url("signUp"),
            json={"email": email.strip(), "password": password, "returnSecureToken": True},
        )
        return self._session_from(payload)

    async def update_display_name(self, session: AuthSession, display_name: str) -> AuthSession:
        payload = await self._post(
            self._identity_url("update"),
            json={"idToken": session.id_token, "displayName": display_name, "returnSecureToken": True},
        )
        return self._session_from(payload, fallback=session)

    async def send_email_verification(self, session: AuthSession) -> None:
        await self._post(
            self._identity_url("sendOobCode"),
            json={"requestType": "VERIFY_EMAIL", "idToken": session.id_token},
        )

    async def send_password_reset(self, email: str) -> None:
        await self._post(
            self._identity_url("sendOobCode"),
            json={"requestType": "PASSWORD_RESET", "email": email.strip()},
        )

    async def lookup(self, session: AuthSession) -> dict[str, Any]:
        payload = await self._post(self._identity_url("lookup"), json={"idToken": session.id_token})
        users = payload.get("users") or []
        return users[0] if users and isinstance(users[0], dict) else {}

    async def refresh(self, session: AuthSession) -> AuthSession:
        """Exchange the refresh token for a new id token."""

        payload = await self._post(
            self._settings.firebase_token_url,
            data={"grant_type": "refresh_token", "refresh_token": session.refresh_token},
        )
        return AuthSession.expiring_in(
            payload.get("expires_in") or 3600,
            uid=payload.get("user_id") or session.uid,
            email=session.email,
            display_name=session.display_name,
            id_token=payload["id_token"],
            refresh_token=payload.get("refresh_token") or session.refresh_token,
            email_verified=session.email_verified,
        )
