"""
Configuration management for stripehooks.

Handles loading configuration from environment variables and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from stripehooks.core.exceptions import ConfigurationError

DEFAULT_SIGNATURE_HEADER = "Stripe-Signature"
DEFAULT_TOLERANCE = 300  # seconds, matches stripe.Webhook.DEFAULT_TOLERANCE

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _get_env_var(name: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class Config:
    """Webhook endpoint configuration."""

    webhook_secret: str | None = field(default=None, repr=False)
    verify: bool = False
    tolerance: int = DEFAULT_TOLERANCE
    signature_header: str = DEFAULT_SIGNATURE_HEADER

    # Environment & Logging
    log_level: str = "INFO"
    env: str = "development"

    def __post_init__(self) -> None:
        if self.verify and not self.webhook_secret:
            raise ConfigurationError("webhook_secret is required when verify is enabled")
        # stripe skips the timestamp check for a zero tolerance
        if self.tolerance <= 0:
            raise ConfigurationError("tolerance must be a positive number of seconds")
        if not self.signature_header:
            raise ConfigurationError("signature_header cannot be empty")

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, **overrides: Any) -> Config:
        """
        Load configuration from environment variables.

        Args:
            env_file: Optional .env file loaded before reading the environment.
                Variables already set in the process environment win.
            **overrides: Explicit values that take precedence over the environment.
        """
        if env_file is not None:
            load_dotenv(env_file)

        webhook_secret = overrides.get("webhook_secret") or _get_env_var("STRIPE_WEBHOOK_SECRET")

        if "verify" in overrides:
            verify = _parse_bool("verify", overrides["verify"])
        else:
            verify_str = _get_env_var("STRIPEHOOKS_VERIFY")
            if verify_str is None:
                verify = bool(webhook_secret)
            else:
                verify = _parse_bool("STRIPEHOOKS_VERIFY", verify_str)

        if "tolerance" in overrides:
            tolerance = _parse_int("tolerance", overrides["tolerance"])
        else:
            tolerance = _parse_int(
                "STRIPEHOOKS_TOLERANCE",
                _get_env_var("STRIPEHOOKS_TOLERANCE", default=str(DEFAULT_TOLERANCE)),
            )

        signature_header = overrides.get("signature_header") or _get_env_var(
            "STRIPEHOOKS_SIGNATURE_HEADER", default=DEFAULT_SIGNATURE_HEADER
        )
        log_level = overrides.get("log_level") or _get_env_var(
            "STRIPEHOOKS_LOG_LEVEL", default="INFO"
        )
        env = overrides.get("env") or _get_env_var("STRIPEHOOKS_ENV", default="development")

        return cls(
            webhook_secret=webhook_secret,
            verify=verify,
            tolerance=tolerance,
            signature_header=signature_header,  # type: ignore
            log_level=log_level,  # type: ignore
            env=env,  # type: ignore
        )

    def with_updates(self, **updates: Any) -> Config:
        """Create a new Config with updated values."""
        return replace(self, **updates)

    def masked_secret(self) -> str:
        """Return the webhook secret with most characters masked for safe logging."""
        if not self.webhook_secret:
            return "<unset>"
        if len(self.webhook_secret) <= 12:
            return "****"
        return self.webhook_secret[:5] + "..." + self.webhook_secret[-4:]
