import hashlib
import hmac
import json
import logging
import time
from collections.abc import Callable
from typing import Any

import pytest

WEBHOOK_SECRET = "whsec_test_0123456789abcdef"


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET


@pytest.fixture
def sign() -> Callable[..., str]:
    """Build a Stripe-Signature header (``t=...,v1=...``) for a payload."""

    def _sign(
        payload: str | bytes,
        secret: str = WEBHOOK_SECRET,
        timestamp: int | None = None,
    ) -> str:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        ts = int(time.time()) if timestamp is None else timestamp
        signed = f"{ts}.{payload}".encode("utf-8")
        digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
        return f"t={ts},v1={digest}"

    return _sign


@pytest.fixture
def event_body() -> Callable[..., bytes]:
    """Build a JSON event envelope as Stripe would POST it."""

    def _event_body(event_type: str = "charge.succeeded", **overrides: Any) -> bytes:
        envelope: dict[str, Any] = {
            "id": "evt_123",
            "object": "event",
            "type": event_type,
            "created": 1700000000,
            "livemode": False,
            "api_version": "2023-10-16",
            "data": {"object": {"id": "ch_123", "object": "charge", "amount": 2000}},
        }
        envelope.update(overrides)
        return json.dumps(envelope).encode("utf-8")

    return _event_body


@pytest.fixture(autouse=True)
def reset_stripehooks_logger():
    """Undo configure_logging() so caplog sees package records in every test."""
    yield
    logger = logging.getLogger("stripehooks")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
