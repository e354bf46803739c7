from pathlib import Path

import pytest

from folio.adapters.feedback import LoggingFeedback
from folio.adapters.memory import InMemoryAuthBackend, InMemoryBackend
from folio.rules.loader import load_rules
from folio.rules.models import Rules

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def rules_path() -> Path:
    return ROOT / "rules.yaml"


@pytest.fixture
def rules(rules_path) -> Rules:
    return load_rules(rules_path)


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def auth_backend() -> InMemoryAuthBackend:
    auth = InMemoryAuthBackend()
    auth.add_user("admin@example.com", "correct horse")
    return auth


@pytest.fixture
def feedback() -> LoggingFeedback:
    return LoggingFeedback()
