"""Runtime configuration for Comment Relay."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_DB_PATH = "commentrelay.db"
DEFAULT_MAX_BATCH_SIZE = 50
DEFAULT_CALL_LIMIT = 100
DEFAULT_SAFETY_MARGIN = 1
DEFAULT_WORKERS = 4
DEFAULT_HTTP_TIMEOUT = 30.0
IN_MEMORY_DB = ":memory:"

ENV_PREFIX = "COMMENTRELAY_"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


def _env(name: str) -> str | None:
    value = os.environ.get(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = _env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = _env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from e


@dataclass
class RelayConfig:
    """Relay settings.

    Attributes:
        tracker_url: Base URL of the issue tracker (e.g. https://acme.atlassian.net).
        tracker_email: Account email for basic auth. Bearer auth is used when unset.
        tracker_token: API token or personal access token.
        db_path: SQLite file holding activity records. ":memory:" keeps them in a
            single shared connection and is only allowed with one worker
            (tests and one-shot use).
        max_batch_size: Maximum activity ids per work unit.
        call_limit: Outbound calls allowed per work unit execution.
        safety_margin: Calls held back from ``call_limit`` on every pass.
        workers: Number of work units processed concurrently.
        http_timeout: Timeout in seconds for tracker requests.
    """

    tracker_url: str = ""
    tracker_email: str | None = None
    tracker_token: str = ""
    db_path: str = DEFAULT_DB_PATH
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    call_limit: int = DEFAULT_CALL_LIMIT
    safety_margin: int = DEFAULT_SAFETY_MARGIN
    workers: int = DEFAULT_WORKERS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Build a config from ``COMMENTRELAY_*`` environment variables.

        Raises:
            ConfigError: If a numeric variable cannot be parsed or the
                resulting config is invalid.
        """
        config = cls(
            tracker_url=_env("TRACKER_URL") or "",
            tracker_email=_env("TRACKER_EMAIL"),
            tracker_token=_env("TRACKER_TOKEN") or "",
            db_path=_env("DB_PATH") or DEFAULT_DB_PATH,
            max_batch_size=_env_int("MAX_BATCH_SIZE", DEFAULT_MAX_BATCH_SIZE),
            call_limit=_env_int("CALL_LIMIT", DEFAULT_CALL_LIMIT),
            safety_margin=_env_int("SAFETY_MARGIN", DEFAULT_SAFETY_MARGIN),
            workers=_env_int("WORKERS", DEFAULT_WORKERS),
            http_timeout=_env_float("HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check limits.

        Raises:
            ConfigError: If any limit is out of range.
        """
        if self.max_batch_size < 1:
            raise ConfigError(f"max_batch_size must be >= 1, got {self.max_batch_size}")
        if self.safety_margin < 0:
            raise ConfigError(f"safety_margin must be >= 0, got {self.safety_margin}")
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        # A pass with no budget would defer every key forever
        if self.call_limit <= self.safety_margin:
            raise ConfigError(
                f"call_limit ({self.call_limit}) must exceed safety_margin ({self.safety_margin})"
            )
        if self.http_timeout <= 0:
            raise ConfigError(f"http_timeout must be positive, got {self.http_timeout}")
        if self.db_path == IN_MEMORY_DB and self.workers > 1:
            raise ConfigError(
                f"an in-memory database shares one connection; use workers=1, got {self.workers}"
            )
