"""
stripehooks - Stripe webhook dispatch for Python web services

Verify incoming Stripe webhooks and route each event to the handler
registered for its type.

Usage:
    >>> from stripehooks import EventType, Manager, with_verify
    >>>
    >>> manager = Manager(with_verify("whsec_..."))
    >>>
    >>> @manager.on(EventType.CHARGE_SUCCEEDED)
    ... def charge_succeeded(event):
    ...     print(event.object["id"])
    >>>
    >>> app = manager.asgi_app()  # or manager.wsgi_app()
"""

from stripehooks.core.config import Config
from stripehooks.core.events import EventType, WebhookEvent, decode_event
from stripehooks.core.exceptions import (
    ConfigurationError,
    DecodeError,
    HandlerError,
    StripeHooksError,
    TransportError,
    ValidationError,
    VerificationError,
)
from stripehooks.core.logging import configure_logging, get_logger
from stripehooks.manager import (
    HandlerFunc,
    Manager,
    Option,
    with_signature_header,
    with_verify,
)
from stripehooks.webhooks.endpoint import asgi_handler, wsgi_handler
from stripehooks.webhooks.signature import verify_and_decode

__version__ = "0.1.0"
__all__ = [
    # Manager
    "Manager",
    "Option",
    "HandlerFunc",
    "with_verify",
    "with_signature_header",
    # Events
    "EventType",
    "WebhookEvent",
    "decode_event",
    "verify_and_decode",
    # HTTP adapters
    "asgi_handler",
    "wsgi_handler",
    # Config & logging
    "Config",
    "configure_logging",
    "get_logger",
    # Exceptions
    "StripeHooksError",
    "ConfigurationError",
    "ValidationError",
    "VerificationError",
    "DecodeError",
    "HandlerError",
    "TransportError",
]
