"""
Webhook transport for stripehooks.

Example:
    >>> from stripehooks.webhooks import asgi_handler, verify_and_decode
"""

from stripehooks.webhooks.endpoint import ErrorCallback, asgi_handler, wsgi_handler
from stripehooks.webhooks.signature import verify_and_decode

__all__ = ["ErrorCallback", "asgi_handler", "verify_and_decode", "wsgi_handler"]
