from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError

SENSITIVE_NAME_TOKENS: Tuple[str, ...] = ("KEY", "TOKEN", "PASSWORD", "SECRET")

DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_REQUEST_DEADLINE_SECONDS = 30.0
# Subscription endpoint lives on its own port next to the base URL.
NEW_SUBSCRIPTION_PORT = 3030
GRAPHQL_PORT = 5000


def _required(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise ConfigError(f"ENV configuration invalid - missing {name}")
    return value


def _optional(env: Mapping[str, str], name: str) -> Optional[str]:
    value = (env.get(name) or "").strip()
    return value or None


def _as_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _optional(env, name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"ENV configuration invalid - {name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"ENV configuration invalid - {name} must be positive")
    return value


def _redact(key: str, value: Any) -> Any:
    if isinstance(value, str) and any(tok in key.upper() for tok in SENSITIVE_NAME_TOKENS):
        return "****" if len(value) <= 4 else f"{'*' * 4}…{value[-4:]}"
    return value


@dataclass(frozen=True)
class MercuryConfig:
    """Configuration container for the indexing service connection."""

    mercury_key: str
    mercury_url: str
    graphql_url: str
    email: Optional[str] = None
    password: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    request_deadline_seconds: float = DEFAULT_REQUEST_DEADLINE_SECONDS
    log_level: str = "INFO"

    @property
    def new_subscription_url(self) -> str:
        return f"{self.mercury_url.rstrip('/')}:{NEW_SUBSCRIPTION_PORT}/newsubscription"

    def redacted(self) -> Dict[str, Any]:
        """Return the config as a dict with secrets masked, safe for logs."""

        raw = {
            "mercury_key": self.mercury_key,
            "mercury_url": self.mercury_url,
            "graphql_url": self.graphql_url,
            "new_subscription_url": self.new_subscription_url,
            "email": self.email,
            "password": self.password,
            "timeout_seconds": self.timeout_seconds,
            "request_deadline_seconds": self.request_deadline_seconds,
            "log_level": self.log_level,
        }
        return {k: _redact(k, v) for k, v in raw.items()}


def load_config(env: Optional[Mapping[str, str]] = None) -> MercuryConfig:
    """Build a :class:`MercuryConfig` from ``env`` (defaults to ``os.environ``).

    Raises :class:`ConfigError` when ``MERCURY_KEY`` or ``MERCURY_URL`` is
    missing, or when a numeric setting cannot be parsed.
    """

    env = os.environ if env is None else env
    key = _required(env, "MERCURY_KEY")
    url = _required(env, "MERCURY_URL").rstrip("/")
    graphql_url = _optional(env, "MERCURY_GRAPHQL_URL") or f"{url}:{GRAPHQL_PORT}/graphql"

    return MercuryConfig(
        mercury_key=key,
        mercury_url=url,
        graphql_url=graphql_url,
        email=_optional(env, "MERCURY_EMAIL"),
        password=_optional(env, "MERCURY_PASSWORD"),
        timeout_seconds=_as_float(env, "MERCURY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        request_deadline_seconds=_as_float(
            env, "MERCURY_REQUEST_DEADLINE_SECONDS", DEFAULT_REQUEST_DEADLINE_SECONDS
        ),
        log_level=(_optional(env, "MERCURY_LOG_LEVEL") or "INFO").upper(),
    )
