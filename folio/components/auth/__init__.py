"""
Auth component - session state for the admin console.
"""

from .component import AuthListener, AuthSessionStore
from .models import AuthState, AuthStatus

__all__ = ["AuthSessionStore", "AuthListener", "AuthState", "AuthStatus"]
