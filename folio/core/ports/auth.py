"""
Auth Backend Interface.

Session-based authentication provided by the hosted backend:
password sign-in, sign-out, session restore and a push feed of
auth-state changes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal, Protocol

from folio.core.entities import AuthSession
from folio.core.ports.remote import FeedHandle

AuthEvent = Literal[
    "INITIAL_SESSION",
    "SIGNED_IN",
    "SIGNED_OUT",
    "TOKEN_REFRESHED",
    "USER_UPDATED",
]

AuthStateCallback = Callable[[AuthEvent, AuthSession | None], None]


class AuthBackendPort(Protocol):
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Authenticate; raises AuthError on bad credentials."""
        ...

    async def sign_out(self) -> None:
        """End the current session; raises AuthError on failure."""
        ...

    async def get_session(self) -> AuthSession | None:
        """Return the persisted session, if one survives from a previous run."""
        ...

    def on_auth_state_change(self, callback: AuthStateCallback) -> FeedHandle:
        """Register a listener for backend-pushed auth events."""
        ...


class SessionStoragePort(Protocol):
    """Where a backend keeps its session between process restarts."""

    def load(self) -> AuthSession | None: ...
    def save(self, session: AuthSession) -> None: ...
    def clear(self) -> None: ...


# --- Error Types ---


class AuthError(Exception):
    """Authentication failed or the session could not be changed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
