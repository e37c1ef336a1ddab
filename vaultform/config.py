"""
Client configuration for vaultform.

Loaded from environment variables, overridable by CLI flags.

Usage:
    from vaultform.config import get_config
    cfg = get_config()
    cfg.require_valid()
    print(cfg.api_url)      # "https://passwork.example.com/api/v4"

Environment:
    PASSWORK_HOST      Instance URL, e.g. https://passwork.example.com
    PASSWORK_API_KEY   API key used to obtain a session token
    PASSWORK_TIMEOUT   Request timeout in seconds (default 30)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from vaultform.errors import ConfigError

DEFAULT_TIMEOUT = 30
DEFAULT_API_PATH = "/api/v4"


@dataclass(frozen=True)
class Config:
    """Connection parameters for the Passwork API."""

    host: str = ""
    api_key: str = ""
    timeout: int = DEFAULT_TIMEOUT
    api_path: str = DEFAULT_API_PATH

    @property
    def api_url(self) -> str:
        return self.host.rstrip("/") + self.api_path

    def validate(self) -> list[str]:
        """Return a list of problems; empty when the config is usable."""
        problems: list[str] = []
        if not self.host:
            problems.append(
                "Missing Passwork API host. Set --host or the PASSWORK_HOST environment variable."
            )
        if not self.api_key:
            problems.append(
                "Missing Passwork API key. Set --api-key or the PASSWORK_API_KEY environment variable."
            )
        if self.timeout <= 0:
            problems.append(f"Timeout must be a positive number of seconds, got {self.timeout}.")
        return problems

    def require_valid(self) -> Config:
        problems = self.validate()
        if problems:
            raise ConfigError(" ".join(problems))
        return self

    def with_overrides(
        self,
        host: str | None = None,
        api_key: str | None = None,
        timeout: int | None = None,
    ) -> Config:
        """Return a copy with any non-None argument applied."""
        changes: dict[str, str | int] = {}
        if host is not None:
            changes["host"] = host
        if api_key is not None:
            changes["api_key"] = api_key
        if timeout is not None:
            changes["timeout"] = timeout
        return replace(self, **changes)  # type: ignore[arg-type]


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    raw_timeout = os.environ.get("PASSWORK_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = int(raw_timeout)
    except ValueError as e:
        raise ConfigError(f"PASSWORK_TIMEOUT must be an integer, got {raw_timeout!r}") from e

    return Config(
        host=os.environ.get("PASSWORK_HOST", ""),
        api_key=os.environ.get("PASSWORK_API_KEY", ""),
        timeout=timeout,
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
