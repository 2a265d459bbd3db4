"""
Webhook Manager.

Holds the verification settings and the event type -> handler mapping, and
dispatches each incoming payload to the handler registered for its type.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from stripehooks.core.config import DEFAULT_SIGNATURE_HEADER, DEFAULT_TOLERANCE, Config
from stripehooks.core.events import EventType, WebhookEvent, decode_event, event_type_key
from stripehooks.core.exceptions import (
    ConfigurationError,
    DecodeError,
    HandlerError,
    ValidationError,
    VerificationError,
)
from stripehooks.core.logging import event_context, get_logger
from stripehooks.webhooks.endpoint import (
    ASGIApp,
    ErrorCallback,
    WSGIApp,
    asgi_handler,
    wsgi_handler,
)
from stripehooks.webhooks.signature import verify_and_decode

logger = get_logger("manager")

HandlerFunc = Callable[[WebhookEvent], None]
Option = Callable[["Manager"], None]


def with_verify(endpoint_secret: str, tolerance: int = DEFAULT_TOLERANCE) -> Option:
    """
    Enable signature verification with the given endpoint secret.

    Raises:
        ConfigurationError: If the secret is empty. Verification is never
            silently disabled.
    """
    if not endpoint_secret:
        raise ConfigurationError("endpoint_secret cannot be empty in with_verify")
    if tolerance <= 0:
        raise ConfigurationError("tolerance must be a positive number of seconds")

    def option(manager: Manager) -> None:
        manager._verify = True
        manager._endpoint_secret = endpoint_secret
        manager._tolerance = tolerance

    return option


def with_signature_header(name: str) -> Option:
    """Read the signature from ``name`` instead of ``Stripe-Signature``."""
    if not name:
        raise ConfigurationError("signature header name cannot be empty")

    def option(manager: Manager) -> None:
        manager._signature_header = name

    return option


class Manager:
    """
    Dispatches webhook events to registered handlers.

    Example:
        >>> manager = Manager(with_verify("whsec_..."))
        >>> manager.handle(EventType.CHARGE_SUCCEEDED, on_charge)
        >>> manager.process_event(body, headers.get("Stripe-Signature"))

    Registration is copy-on-write: handlers may be added while requests are
    in flight, and each dispatch sees a complete mapping.
    """

    def __init__(self, *options: Option) -> None:
        self._verify = False
        self._endpoint_secret: str | None = None
        self._tolerance = DEFAULT_TOLERANCE
        self._signature_header = DEFAULT_SIGNATURE_HEADER
        self._handlers: dict[str, HandlerFunc] = {}
        self._lock = threading.Lock()

        for option in options:
            option(self)

        logger.info(
            "Webhook manager created (verification %s)", "on" if self._verify else "off"
        )

    @classmethod
    def from_config(cls, config: Config) -> Manager:
        """Build a manager from a Config."""
        options: list[Option] = [with_signature_header(config.signature_header)]
        if config.verify:
            options.append(with_verify(config.webhook_secret or "", config.tolerance))
        return cls(*options)

    def __repr__(self) -> str:
        return (
            f"Manager(verify={self._verify}, "
            f"handlers={list(self.registered_event_types)})"
        )

    @property
    def verify(self) -> bool:
        return self._verify

    @property
    def signature_header(self) -> str:
        return self._signature_header

    @property
    def registered_event_types(self) -> tuple[str, ...]:
        return tuple(sorted(self._handlers))

    def handle(self, event_type: EventType | str, fn: HandlerFunc) -> None:
        """
        Register a handler for an event type.

        Re-registering the same type replaces the previous handler.
        """
        key = event_type_key(event_type)
        if not key:
            raise ValidationError("event_type cannot be empty")
        if not callable(fn):
            raise ValidationError(
                f"handler for {key} must be callable", details={"type": type(fn).__name__}
            )

        with self._lock:
            handlers = dict(self._handlers)
            replaced = key in handlers
            handlers[key] = fn
            self._handlers = handlers

        logger.info("%s handler for %s", "Replaced" if replaced else "Registered", key)

    def on(self, event_type: EventType | str) -> Callable[[HandlerFunc], HandlerFunc]:
        """Decorator form of :meth:`handle`."""

        def decorator(fn: HandlerFunc) -> HandlerFunc:
            self.handle(event_type, fn)
            return fn

        return decorator

    def handler_for(self, event_type: EventType | str) -> HandlerFunc | None:
        """Look up the handler registered for an event type."""
        return self._handlers.get(event_type_key(event_type))

    def process_event(self, payload: str | bytes, signature_header: str | None) -> WebhookEvent:
        """
        Verify or decode a payload and dispatch it.

        Args:
            payload: Raw request body
            signature_header: Value of the signature header (None if absent)

        Returns:
            The decoded event, whether or not a handler was registered for it.

        Raises:
            VerificationError: If verification is on and the signature is rejected
            DecodeError: If verification is off and the payload is malformed
            HandlerError: If the registered handler raised
        """
        if self._verify:
            try:
                event = verify_and_decode(
                    payload, signature_header, self._endpoint_secret or "", self._tolerance
                )
            except VerificationError as e:
                logger.warning("Rejected webhook: %s", e.message)
                raise
        else:
            try:
                event = decode_event(payload)
            except DecodeError as e:
                logger.warning("Could not decode webhook: %s", e.message)
                raise

        context = event_context(event.type, event.id)
        fn = self._handlers.get(event.type)
        if fn is None:
            logger.debug("No handler for %s, skipping", event.type, extra=context)
            return event

        logger.debug("Dispatching %s", event.type, extra=context)
        try:
            fn(event)
        except Exception as e:
            logger.warning("Handler for %s failed: %s", event.type, e, extra=context)
            raise HandlerError(
                f"error handling event: {e}",
                event_type=event.type,
                event_id=event.id,
                cause=e,
            ) from e

        return event

    def asgi_app(self, on_error: ErrorCallback | None = None) -> ASGIApp:
        """Return an ASGI application serving this manager."""
        return asgi_handler(self, on_error)

    def wsgi_app(self, on_error: ErrorCallback | None = None) -> WSGIApp:
        """Return a WSGI application serving this manager."""
        return wsgi_handler(self, on_error)
