"""
HTTP adapters for the webhook manager.

Framework-agnostic ASGI and WSGI applications that read the raw body and
signature header, hand them to ``Manager.process_event``, and map the outcome
to ``200 OK`` or ``500``. Listening, TLS and routing are the host server's job.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, MutableMapping
from typing import TYPE_CHECKING, Any

from stripehooks.core.exceptions import StripeHooksError, TransportError
from stripehooks.core.logging import get_logger

if TYPE_CHECKING:
    from stripehooks.manager import Manager

logger = get_logger("endpoint")

ErrorCallback = Callable[[StripeHooksError], None]

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

StartResponse = Callable[..., Any]
WSGIApp = Callable[[dict[str, Any], StartResponse], Iterable[bytes]]

_STATUS_LINES = {200: "200 OK", 500: "500 Internal Server Error"}
_CONTENT_TYPE = "text/plain; charset=utf-8"


def _notify(on_error: ErrorCallback | None, error: StripeHooksError) -> None:
    """Invoke the error callback, if any. Its failures never reach the client."""
    if on_error is None:
        return
    try:
        on_error(error)
    except Exception:
        logger.exception("Webhook error callback raised")


# ---------------------------------------------------------------------------
# ASGI
# ---------------------------------------------------------------------------


async def _read_asgi_body(receive: Receive) -> bytes:
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise TransportError("client disconnected before the body was read")
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            return b"".join(chunks)


def _asgi_header(scope: Scope, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


async def _send_asgi_response(send: Send, status: int, text: str) -> None:
    body = text.encode("utf-8")
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": [
                (b"content-type", _CONTENT_TYPE.encode("latin-1")),
                (b"content-length", str(len(body)).encode("latin-1")),
            ],
        }
    )
    await send({"type": "http.response.body", "body": body})


async def _lifespan(receive: Receive, send: Send) -> None:
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return


def asgi_handler(manager: Manager, on_error: ErrorCallback | None = None) -> ASGIApp:
    """
    Build an ASGI application for a manager.

    Args:
        manager: Manager that verifies and dispatches events
        on_error: Optional callback invoked once per failed request with the
            originating error. It never changes the response.

    Returns:
        ASGI 3 application
    """
    header_name = manager.signature_header.lower().encode("latin-1")

    async def fail(send: Send, text: str, error: StripeHooksError) -> None:
        # The callback still sees the originating error when the 500 cannot be sent
        try:
            await _send_asgi_response(send, 500, text)
        except OSError as e:
            logger.warning("error writing response: %s", e)
        _notify(on_error, error)

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await _lifespan(receive, send)
            return
        if scope["type"] != "http":
            raise TransportError(f"Unsupported ASGI scope type: {scope['type']}")

        try:
            payload = await _read_asgi_body(receive)
        except TransportError as e:
            logger.warning("Could not read webhook body: %s", e)
            await fail(send, f"error reading request body: {e}", e)
            return

        try:
            manager.process_event(payload, _asgi_header(scope, header_name))
        except StripeHooksError as e:
            await fail(send, f"error processing event: {e}", e)
            return

        try:
            await _send_asgi_response(send, 200, "OK")
        except OSError as e:
            error = TransportError(f"error writing response: {e}", cause=e)
            logger.warning("%s", error)
            _notify(on_error, error)

    return app


# ---------------------------------------------------------------------------
# WSGI
# ---------------------------------------------------------------------------


def _read_wsgi_body(environ: dict[str, Any]) -> bytes:
    stream = environ["wsgi.input"]
    length = environ.get("CONTENT_LENGTH")
    try:
        if length:
            return stream.read(int(length))
        if environ.get("wsgi.input_terminated"):
            return stream.read()
        return b""
    except (OSError, ValueError) as e:
        raise TransportError(str(e), cause=e) from e


def _wsgi_response(start_response: StartResponse, status: int, text: str) -> list[bytes]:
    body = text.encode("utf-8")
    start_response(
        _STATUS_LINES[status],
        [("Content-Type", _CONTENT_TYPE), ("Content-Length", str(len(body)))],
    )
    return [body]


def wsgi_handler(manager: Manager, on_error: ErrorCallback | None = None) -> WSGIApp:
    """
    Build a WSGI application for a manager.

    Same contract as :func:`asgi_handler`, for synchronous servers.
    """
    environ_key = "HTTP_" + manager.signature_header.upper().replace("-", "_")

    def app(environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        try:
            payload = _read_wsgi_body(environ)
        except TransportError as e:
            logger.warning("Could not read webhook body: %s", e)
            response = _wsgi_response(start_response, 500, f"error reading request body: {e}")
            _notify(on_error, e)
            return response

        try:
            manager.process_event(payload, environ.get(environ_key))
        except StripeHooksError as e:
            response = _wsgi_response(start_response, 500, f"error processing event: {e}")
            _notify(on_error, e)
            return response

        return _wsgi_response(start_response, 200, "OK")

    return app
