"""
Session storage adapters.

Keep the backend session between process restarts so that
`get_session()` can restore it, the way a browser keeps it in
local storage.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from folio.core.entities import AuthSession

logger = logging.getLogger(__name__)


class InMemorySessionStorage:
    """Process-local storage - suitable for tests and one-shot commands."""

    def __init__(self, session: AuthSession | None = None) -> None:
        self._session = session

    def load(self) -> AuthSession | None:
        return self._session

    def save(self, session: AuthSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionStorage:
    """JSON file holding the current session."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> AuthSession | None:
        if not self.path.exists():
            return None
        try:
            return AuthSession.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return None

    def save(self, session: AuthSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(session.model_dump_json(), encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
