"""
Core Event Types for stripehooks.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from stripehooks.core.exceptions import DecodeError


class EventType(str, Enum):
    """
    Well-known Stripe event types.

    Dispatch is keyed by the plain string value, so types missing from this
    list can still be registered and received as strings.
    """

    CHARGE_SUCCEEDED = "charge.succeeded"
    CHARGE_FAILED = "charge.failed"
    CHARGE_REFUNDED = "charge.refunded"
    CHARGE_DISPUTE_CREATED = "charge.dispute.created"
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    CHECKOUT_SESSION_EXPIRED = "checkout.session.expired"
    CUSTOMER_CREATED = "customer.created"
    CUSTOMER_UPDATED = "customer.updated"
    CUSTOMER_DELETED = "customer.deleted"
    CUSTOMER_SUBSCRIPTION_CREATED = "customer.subscription.created"
    CUSTOMER_SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    CUSTOMER_SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    INVOICE_PAID = "invoice.paid"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    PAYMENT_INTENT_CREATED = "payment_intent.created"
    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_INTENT_PAYMENT_FAILED = "payment_intent.payment_failed"
    PAYMENT_INTENT_CANCELED = "payment_intent.canceled"
    PAYOUT_PAID = "payout.paid"
    PAYOUT_FAILED = "payout.failed"

    def __str__(self) -> str:
        return self.value


def event_type_key(event_type: EventType | str) -> str:
    """Normalize an event type to the plain string used as the dispatch key."""
    if isinstance(event_type, EventType):
        return event_type.value
    return str(event_type)


@dataclass(frozen=True)
class WebhookEvent:
    """
    Decoded webhook event.

    Provides typed access to the common envelope fields while keeping the
    vendor data section opaque.
    """

    id: str
    type: str
    data: Mapping[str, Any]
    created: datetime | None
    livemode: bool
    api_version: str | None
    raw_payload: Mapping[str, Any]

    @property
    def object(self) -> Any:
        """The ``data.object`` section, or None when absent."""
        return self.data.get("object")

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> WebhookEvent:
        """
        Build an event from a decoded JSON envelope.

        Raises:
            DecodeError: If the envelope has no usable ``type``.
        """
        event_type = payload.get("type")
        if not isinstance(event_type, str) or not event_type:
            raise DecodeError("Missing or invalid 'type' in event payload")

        data = payload.get("data")
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise DecodeError("Invalid 'data' section in event payload")

        created = None
        created_raw = payload.get("created")
        if isinstance(created_raw, (int, float)) and not isinstance(created_raw, bool):
            try:
                created = datetime.fromtimestamp(created_raw, tz=timezone.utc)
            except (OverflowError, OSError, ValueError) as e:
                raise DecodeError(f"Invalid 'created' timestamp: {e}", cause=e) from e

        return cls(
            id=str(payload.get("id") or "unknown"),
            type=event_type,
            data=MappingProxyType(dict(data)),
            created=created,
            livemode=bool(payload.get("livemode", False)),
            api_version=payload.get("api_version"),
            raw_payload=MappingProxyType(dict(payload)),
        )


def decode_event(payload: str | bytes) -> WebhookEvent:
    """
    Decode a raw webhook body into a WebhookEvent.

    Args:
        payload: Raw request body

    Returns:
        WebhookEvent

    Raises:
        DecodeError: If the body is not a JSON object with a ``type`` field
    """
    # ValueError covers JSONDecodeError, UnicodeDecodeError and the int digit limit
    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"Invalid JSON payload: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise DecodeError("Event payload must be a JSON object")

    return WebhookEvent.from_dict(data)
