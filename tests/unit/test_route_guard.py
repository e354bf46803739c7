import asyncio

import pytest

from folio.app_shell.router import GuardOutcome, RouteGuard
from folio.components.auth import AuthSessionStore, AuthState, AuthStatus
from folio.core.entities import Principal


def test_public_routes_always_allowed(auth_backend):
    guard = RouteGuard(AuthSessionStore(auth_backend))

    assert guard.check("/").outcome is GuardOutcome.ALLOW
    assert guard.check("/administrator").outcome is GuardOutcome.ALLOW
    assert guard.check("/admin/login").outcome is GuardOutcome.ALLOW


def test_protected_route_pending_while_loading(auth_backend):
    guard = RouteGuard(AuthSessionStore(auth_backend))
    loading = AuthState(status=AuthStatus.LOADING)

    assert guard.check("/admin", AuthState()).outcome is GuardOutcome.PENDING
    assert guard.check("/admin/projects", loading).outcome is GuardOutcome.PENDING


def test_anonymous_redirected_to_login(auth_backend):
    guard = RouteGuard(AuthSessionStore(auth_backend))

    decision = guard.check("/admin/skills", AuthState.anonymous())

    assert decision.outcome is GuardOutcome.REDIRECT
    assert decision.location == "/admin/login"


def test_signed_in_admitted(auth_backend):
    guard = RouteGuard(AuthSessionStore(auth_backend))
    state = AuthState.signed_in(Principal(id="u1", email="admin@example.com"))

    assert guard.check("/admin/contacts", state).outcome is GuardOutcome.ALLOW


@pytest.mark.asyncio
async def test_resolve_waits_for_session_restore(auth_backend):
    await auth_backend.sign_in_with_password("admin@example.com", "correct horse")
    store = AuthSessionStore(auth_backend)
    guard = RouteGuard(store)

    pending = asyncio.create_task(guard.resolve("/admin"))
    await asyncio.sleep(0)
    assert not pending.done()

    await store.initialize()
    decision = await pending

    assert decision.outcome is GuardOutcome.ALLOW
