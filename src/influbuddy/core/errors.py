"""Error hierarchy shared by adapters and the CLI.

Adapters raise these; the CLI turns them into a readable message and a
non-zero exit code.
"""

from __future__ import annotations

from typing import Any


class InfluBuddyError(Exception):
    """Base class for every error raised by this package."""


class ApiError(InfluBuddyError):
    """The backend answered with a non-2xx status (or could not be reached)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        method: str | None = None,
        path: str | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.method = method
        self.path = path
        self.payload = payload

    def __str__(self) -> str:
        where = f"{self.method} {self.path}" if self.method and self.path else None
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"(HTTP {self.status_code})")
        if where:
            parts.append(f"[{where}]")
        return " ".join(parts)


class NotFoundError(ApiError):
    """The requested partner/campaign does not exist (HTTP 404)."""


class AuthError(InfluBuddyError):
    """Authentication failed; `message` is safe to show to the user."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class NotAuthenticatedError(AuthError):
    """An authenticated call was attempted with nobody signed in."""

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message, code="not-authenticated")


class UnauthorizedError(ApiError):
    """The backend rejected the credentials (HTTP 401/403)."""
