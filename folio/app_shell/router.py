"""
Admin route guard.

Admits or redirects navigation to the admin console based on the
auth session store. While the session is still being restored the
guard gives no answer; `resolve()` waits for it instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from folio.components.auth import AuthSessionStore, AuthState
from folio.rules.models import AdminRules

logger = logging.getLogger(__name__)


class GuardOutcome(Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    PENDING = "pending"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    location: str | None = None


class RouteGuard:
    def __init__(self, auth: AuthSessionStore, admin: AdminRules | None = None) -> None:
        self._auth = auth
        self._admin = admin or AdminRules()

    def is_protected(self, route: str) -> bool:
        prefix = self._admin.protected_prefix.rstrip("/")
        if route == self._admin.login_route:
            return False
        return route == prefix or route.startswith(prefix + "/")

    def check(self, route: str, state: AuthState | None = None) -> GuardDecision:
        state = state or self._auth.state
        if not self.is_protected(route):
            return GuardDecision(GuardOutcome.ALLOW)
        if not state.settled:
            return GuardDecision(GuardOutcome.PENDING)
        if state.authenticated:
            return GuardDecision(GuardOutcome.ALLOW)
        logger.info("Access denied to %s. Redirecting to %s.", route, self._admin.login_route)
        return GuardDecision(GuardOutcome.REDIRECT, self._admin.login_route)

    async def resolve(self, route: str) -> GuardDecision:
        """Like check(), but waits out a pending session restore."""
        decision = self.check(route)
        if decision.outcome is GuardOutcome.PENDING:
            state = await self._auth.wait_ready()
            decision = self.check(route, state)
        return decision
