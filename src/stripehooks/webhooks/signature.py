"""
Stripe webhook signature verification.
"""

from __future__ import annotations

import json

import stripe

from stripehooks.core.config import DEFAULT_TOLERANCE
from stripehooks.core.events import WebhookEvent
from stripehooks.core.exceptions import ConfigurationError, DecodeError, VerificationError


def verify_and_decode(
    payload: str | bytes,
    signature_header: str | None,
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
) -> WebhookEvent:
    """
    Verify a Stripe-Signature header and decode the signed payload.

    The payload is only decoded once the signature has been accepted.

    Args:
        payload: Raw request body, exactly as received
        signature_header: Value of the Stripe-Signature header (None if absent)
        secret: Endpoint signing secret
        tolerance: Maximum accepted age of the signature timestamp, in seconds

    Returns:
        WebhookEvent

    Raises:
        VerificationError: If the signature is missing, invalid or stale, or
            the signed payload is not a valid event
    """
    if tolerance <= 0:
        raise ConfigurationError("tolerance must be a positive number of seconds")

    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
    except UnicodeDecodeError as e:
        raise VerificationError("Payload is not valid UTF-8", cause=e) from e

    if not signature_header:
        raise VerificationError("Missing signature header")

    try:
        stripe.WebhookSignature.verify_header(text, signature_header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        # user_message carries the reason without the secret or header
        raise VerificationError(e.user_message or "Signature verification failed", cause=e) from e

    try:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise DecodeError("Event payload must be a JSON object")
        return WebhookEvent.from_dict(data)
    except (ValueError, RecursionError, DecodeError) as e:
        raise VerificationError(f"Signed payload is not a valid event: {e}", cause=e) from e
