"""
In-memory auth backend.

Users live in a dict with argon2 password hashes. Sessions go
through a SessionStoragePort like the REST backend, so restore
behaves the same in tests and demo mode.
"""

from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime, timedelta

from folio.adapters.auth.crypto import Argon2PasswordHasher
from folio.adapters.auth.session_storage import InMemorySessionStorage
from folio.core.entities import AuthSession, Principal
from folio.core.ports.auth import AuthError, AuthEvent, AuthStateCallback, SessionStoragePort

logger = logging.getLogger(__name__)


class _ListenerHandle:
    def __init__(self, listeners: list[AuthStateCallback], callback: AuthStateCallback) -> None:
        self._listeners = listeners
        self._callback = callback

    def unsubscribe(self) -> None:
        if self._callback in self._listeners:
            self._listeners.remove(self._callback)


class InMemoryAuthBackend:
    def __init__(
        self,
        storage: SessionStoragePort | None = None,
        hasher: Argon2PasswordHasher | None = None,
        session_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self._storage = storage or InMemorySessionStorage()
        self._hasher = hasher or Argon2PasswordHasher()
        self._ttl = session_ttl
        self._users: dict[str, tuple[Principal, str]] = {}
        self._listeners: list[AuthStateCallback] = []
        self.fail_sign_out: AuthError | None = None

    def add_user(self, email: str, password: str) -> Principal:
        principal = Principal(id=secrets.token_hex(8), email=email.lower())
        self._users[principal.email] = (principal, self._hasher.hash_password(password))
        return principal

    @property
    def access_token(self) -> str | None:
        session = self._storage.load()
        return session.access_token if session else None

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        entry = self._users.get(email.strip().lower())
        if entry is None or not self._hasher.verify_password(password, entry[1]):
            raise AuthError("Invalid login credentials", status_code=400)

        session = AuthSession(
            principal=entry[0],
            access_token=secrets.token_urlsafe(32),
            refresh_token=secrets.token_urlsafe(32),
            expires_at=datetime.now(UTC) + self._ttl,
        )
        self._storage.save(session)
        self._emit("SIGNED_IN", session)
        return session

    async def sign_out(self) -> None:
        if self.fail_sign_out is not None:
            raise self.fail_sign_out
        self._storage.clear()
        self._emit("SIGNED_OUT", None)

    async def get_session(self) -> AuthSession | None:
        session = self._storage.load()
        if session is None:
            return None
        if session.expires_at is not None and session.expires_at <= datetime.now(UTC):
            self._storage.clear()
            return None
        return session

    def on_auth_state_change(self, callback: AuthStateCallback) -> _ListenerHandle:
        self._listeners.append(callback)
        return _ListenerHandle(self._listeners, callback)

    def _emit(self, event: AuthEvent, session: AuthSession | None) -> None:
        for callback in list(self._listeners):
            try:
                callback(event, session)
            except Exception:
                logger.exception("Auth state listener failed on %s", event)
