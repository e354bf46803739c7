"""
REST auth backend.

Password grant against `{base}/auth/v1/token`, logout against
`{base}/auth/v1/logout`. The session is written through a
SessionStoragePort so the next process can restore it.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from folio.adapters.http.rest_client import error_detail
from folio.core.entities import AuthSession, Principal
from folio.core.ports.auth import AuthError, AuthEvent, AuthStateCallback, SessionStoragePort

logger = logging.getLogger(__name__)


class _ListenerHandle:
    def __init__(self, owner: RestAuthBackend, callback: AuthStateCallback) -> None:
        self._owner = owner
        self._callback = callback

    def unsubscribe(self) -> None:
        self._owner._drop_listener(self._callback)


class RestAuthBackend:
    """AuthBackendPort over httpx."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        storage: SessionStoragePort,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self._storage = storage
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._listeners: list[AuthStateCallback] = []
        self._session: AuthSession | None = None

    @property
    def access_token(self) -> str | None:
        """Bearer token for data requests, if signed in."""
        session = self._session or self._storage.load()
        return session.access_token if session else None

    async def aclose(self) -> None:
        await self._client.aclose()

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        try:
            response = await self._client.post(
                f"{self.base_url}/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers={"apikey": self._anon_key},
            )
        except httpx.HTTPError as exc:
            raise AuthError(f"Auth service unreachable: {exc}") from exc

        if not response.is_success:
            raise AuthError(error_detail(response) or "Sign-in failed", response.status_code)

        session = self._session_from(response.json())
        self._session = session
        self._storage.save(session)
        logger.info("Signed in %s", session.principal.email)
        self._emit("SIGNED_IN", session)
        return session

    async def sign_out(self) -> None:
        session = self._session or self._storage.load()
        if session is not None:
            try:
                response = await self._client.post(
                    f"{self.base_url}/auth/v1/logout",
                    headers={
                        "apikey": self._anon_key,
                        "Authorization": f"Bearer {session.access_token}",
                    },
                )
            except httpx.HTTPError as exc:
                raise AuthError(f"Auth service unreachable: {exc}") from exc
            # an expired token is already signed out server-side
            if not response.is_success and response.status_code != 401:
                raise AuthError(error_detail(response) or "Sign-out failed", response.status_code)

        self._session = None
        self._storage.clear()
        self._emit("SIGNED_OUT", None)

    async def get_session(self) -> AuthSession | None:
        session = self._session or self._storage.load()
        if session is None:
            return None
        if session.expires_at is not None and session.expires_at <= datetime.now(UTC):
            logger.info("Stored session for %s has expired", session.principal.email)
            self._session = None
            self._storage.clear()
            return None
        self._session = session
        return session

    def on_auth_state_change(self, callback: AuthStateCallback) -> _ListenerHandle:
        self._listeners.append(callback)
        return _ListenerHandle(self, callback)

    def _drop_listener(self, callback: AuthStateCallback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, event: AuthEvent, session: AuthSession | None) -> None:
        for callback in list(self._listeners):
            try:
                callback(event, session)
            except Exception:
                logger.exception("Auth state listener failed on %s", event)

    @staticmethod
    def _session_from(body: dict[str, Any]) -> AuthSession:
        try:
            user = body["user"]
            expires_in = int(body.get("expires_in", 3600))
            return AuthSession(
                principal=Principal(id=str(user["id"]), email=user["email"]),
                access_token=body["access_token"],
                refresh_token=body.get("refresh_token"),
                expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthError(f"Unexpected token response: {exc}") from exc
