import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from folio.rules.loader import load_rules
from folio.rules.models import Rules

DEFAULT_RULES_PATH = "rules.yaml"


class ConfigError(Exception):
    """The environment does not describe a usable backend."""


@dataclass(frozen=True)
class AppConfig:
    rules: Rules
    backend_url: str | None
    anon_key: str | None
    session_path: Path | None
    log_level: int

    def require_backend(self) -> tuple[str, str]:
        """URL and anon key for the hosted backend, or ConfigError."""
        url, key = self.backend_url, self.anon_key
        if not url or not key:
            missing = []
            if not url:
                missing.append("FOLIO_BACKEND_URL")
            if not key:
                missing.append(self.rules.backend.anon_key_env)
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        return url, key


def parse_log_level(value: str | None) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {value}")
    return level


def load_config(env: Mapping[str, str] | None = None) -> AppConfig:
    """
    Read the rules file and the FOLIO_* environment once.

    Raises FileNotFoundError / ValueError from the rules loader and
    ConfigError for a bad log level.
    """
    env = os.environ if env is None else env

    rules = load_rules(Path(env.get("FOLIO_RULES_PATH", DEFAULT_RULES_PATH)))

    # FOLIO_ANON_KEY always wins; otherwise the variable named in rules
    anon_key = env.get("FOLIO_ANON_KEY") or env.get(rules.backend.anon_key_env)
    session_path = env.get("FOLIO_SESSION_PATH")

    return AppConfig(
        rules=rules,
        backend_url=env.get("FOLIO_BACKEND_URL") or rules.backend.url,
        anon_key=anon_key or None,
        session_path=Path(session_path) if session_path else None,
        log_level=parse_log_level(env.get("FOLIO_LOG_LEVEL")),
    )
