"""
Exception hierarchy for stripehooks.

All package exceptions inherit from StripeHooksError for easy catching.
"""

from __future__ import annotations

from typing import Any


class StripeHooksError(Exception):
    """
    Base exception for all stripehooks errors.

    Catch this to handle any dispatch-related exception.

    Example:
        >>> try:
        ...     manager.process_event(payload, signature)
        ... except StripeHooksError as e:
        ...     print(f"Webhook rejected: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(StripeHooksError):
    """
    Configuration is missing or invalid.

    Raised when:
    - Verification is requested with an empty endpoint secret
    - Configuration values fail validation
    """

    pass


class ValidationError(StripeHooksError):
    """
    Input validation error.

    Raised when:
    - A handler is registered for an empty event type
    - A registered handler is not callable
    """

    pass


class VerificationError(StripeHooksError):
    """
    Webhook signature verification failed.

    The payload is never decoded or dispatched after this error.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.cause = cause


class DecodeError(StripeHooksError):
    """Payload could not be decoded into an event (verification disabled)."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.cause = cause


class HandlerError(StripeHooksError):
    """
    A registered handler failed.

    Example:
        >>> try:
        ...     manager.process_event(payload, signature)
        ... except HandlerError as e:
        ...     print(f"{e.event_type} handler failed: {e.cause}")
    """

    def __init__(
        self,
        message: str,
        event_type: str,
        event_id: str | None = None,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.event_type = event_type
        self.event_id = event_id
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.event_type}] {self.message}"


class TransportError(StripeHooksError):
    """
    HTTP transport error.

    Raised when:
    - The request body cannot be read
    - The response cannot be written
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.cause = cause
