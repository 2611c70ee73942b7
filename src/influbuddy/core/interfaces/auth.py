"""Credential contract for the backend REST client.

The REST client does not know about Firebase: it only asks a `TokenProvider`
for a fresh id token and the user id to attach to each request.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenProvider(Protocol):
    """Minimal contract for anything able to authenticate backend calls.

    - `get_credentials` is async because it may refresh the token over HTTP.
    - It raises `NotAuthenticatedError` when nobody is signed in.
    """

    async def get_credentials(self) -> tuple[str, str]:
        """Return `(id_token, user_id)` for the signed-in user."""

        ...
