"""
Auth component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from folio.core.entities import Principal


class AuthStatus(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class AuthState:
    """Snapshot of the session as the route guard sees it."""

    status: AuthStatus = AuthStatus.UNINITIALIZED
    principal: Principal | None = None

    @property
    def settled(self) -> bool:
        return self.status in (AuthStatus.AUTHENTICATED, AuthStatus.ANONYMOUS)

    @property
    def authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED

    @classmethod
    def signed_in(cls, principal: Principal) -> AuthState:
        return cls(status=AuthStatus.AUTHENTICATED, principal=principal)

    @classmethod
    def anonymous(cls) -> AuthState:
        return cls(status=AuthStatus.ANONYMOUS)
