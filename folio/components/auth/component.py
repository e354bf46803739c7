"""
Auth component - session store behind the admin route guard.

States: uninitialized -> loading -> authenticated | anonymous.
After initialize() the store follows backend auth events for the
rest of the process; sign_in/sign_out raise AuthError unchanged and
leave the state as it was when they fail.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from folio.core.entities import AuthSession, Principal
from folio.core.ports.auth import AuthBackendPort, AuthError, AuthEvent
from folio.core.ports.remote import FeedHandle

from .models import AuthState, AuthStatus

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthState], None]


class AuthSessionStore:
    def __init__(self, backend: AuthBackendPort) -> None:
        self._backend = backend
        self._state = AuthState()
        self._handle: FeedHandle | None = None
        self._ready = asyncio.Event()
        self._init_lock = asyncio.Lock()
        self._listeners: list[AuthListener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def principal(self) -> Principal | None:
        return self._state.principal

    def add_listener(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def initialize(self) -> AuthState:
        """Restore a persisted session, then follow backend auth events."""
        async with self._init_lock:
            if self._handle is not None:
                return self._state

            self._set(AuthState(status=AuthStatus.LOADING))
            try:
                session = await self._backend.get_session()
            except AuthError as exc:
                logger.warning("Session restore failed: %s", exc)
                session = None

            self._set(self._from_session(session))
            self._handle = self._backend.on_auth_state_change(self._on_auth_event)
            self._ready.set()
            return self._state

    async def wait_ready(self) -> AuthState:
        """Block until initialize() has settled the state."""
        await self._ready.wait()
        return self._state

    async def sign_in(self, email: str, password: str) -> Principal:
        session = await self._backend.sign_in_with_password(email, password)
        restored = await self._backend.get_session()
        principal = (restored or session).principal
        self._set(AuthState.signed_in(principal))
        logger.info("Signed in as %s", principal.email)
        return principal

    async def sign_out(self) -> None:
        await self._backend.sign_out()
        self._set(AuthState.anonymous())
        logger.info("Signed out")

    def teardown(self) -> None:
        if self._handle is not None:
            self._handle.unsubscribe()
            self._handle = None
        self._ready.clear()
        self._set(AuthState())

    def _on_auth_event(self, event: AuthEvent, session: AuthSession | None) -> None:
        if self._handle is None:
            return
        logger.debug("Auth event %s", event)
        self._set(self._from_session(session))

    @staticmethod
    def _from_session(session: AuthSession | None) -> AuthState:
        if session is None:
            return AuthState.anonymous()
        return AuthState.signed_in(session.principal)

    def _set(self, state: AuthState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Auth listener failed")
