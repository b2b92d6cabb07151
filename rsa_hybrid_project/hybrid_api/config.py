"""
Runtime settings for the hybrid encryption API.

Settings are read from the environment once per process::

    PORT          listen port (default 3000)
    HOST          bind address (default 0.0.0.0)
    LOG_LEVEL     DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO)
    SERVICE_NAME  value of the ``service`` field in every log line
    RSA_KEY_SIZE  modulus length for generated RSA keys (default 2048)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_SERVICE_NAME = "rsa-hybrid-api"
MIN_RSA_KEY_SIZE = 2048

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    service_name: str = DEFAULT_SERVICE_NAME
    rsa_key_size: int = MIN_RSA_KEY_SIZE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (``os.environ`` by default).

        Raises ``ValueError`` if a value cannot be parsed or fails
        validation.
        """
        env = os.environ if environ is None else environ
        settings = cls(
            host=env.get("HOST", DEFAULT_HOST),
            port=_parse_int(env, "PORT", DEFAULT_PORT),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            service_name=env.get("SERVICE_NAME", DEFAULT_SERVICE_NAME),
            rsa_key_size=_parse_int(env, "RSA_KEY_SIZE", MIN_RSA_KEY_SIZE),
        )
        errors = settings.validate()
        if errors:
            raise ValueError("Invalid configuration: " + "; ".join(errors))
        return settings

    def validate(self) -> list[str]:
        """Return a list of configuration problems (empty means valid)."""
        errors: list[str] = []
        if not 1 <= self.port <= 65535:
            errors.append(f"PORT out of range: {self.port}")
        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL invalid: {self.log_level}")
        if self.rsa_key_size < MIN_RSA_KEY_SIZE:
            errors.append(
                f"RSA_KEY_SIZE must be at least {MIN_RSA_KEY_SIZE}, got {self.rsa_key_size}"
            )
        if not self.service_name:
            errors.append("SERVICE_NAME cannot be empty")
        return errors


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings for this process."""
    return Settings.from_env()
